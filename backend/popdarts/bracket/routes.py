from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from popdarts.bracket.advancer import next_playable_match
from popdarts.bracket.models import BracketMatch, TournamentBracket
from popdarts.bracket.tournament import TournamentSession
from popdarts.config import get_settings
from popdarts.scoring.game import Player
from popdarts.scoring.routes import PlayerDTO, PlayerInDTO, dto_to_player, player_to_dto
from popdarts.store import get_store

router = APIRouter(prefix="/tournament", tags=["tournament"])


class CreateTournamentRequest(BaseModel):
    players: list[PlayerInDTO] = Field(..., description="4-16 named players; blank names are ignored")
    advanced_closest_tracking: bool | None = None


class StartTournamentMatchRequest(BaseModel):
    first_thrower: int = Field(default=1, ge=1, le=2)


class BracketMatchDTO(BaseModel):
    id: str
    round: int
    match_number: int
    player1: PlayerDTO | None
    player2: PlayerDTO | None
    player1_score: int | None
    player2_score: int | None
    winner: PlayerDTO | None
    completed: bool
    source_match1_id: str | None
    source_match2_id: str | None
    paused_scores: list[int] | None


class BracketDTO(BaseModel):
    rounds: list[list[BracketMatchDTO]]
    total_rounds: int
    bracket_size: int
    seed_slots: list[PlayerDTO]
    active_match_id: str | None
    is_complete: bool
    champion: PlayerDTO | None


class TournamentActionDTO(BaseModel):
    ok: bool = Field(..., description="False when the action was not available (no-op)")
    bracket: BracketDTO


def _player_or_none(p: Player | None) -> PlayerDTO | None:
    return player_to_dto(p) if p is not None else None


def _match_to_dto(m: BracketMatch) -> BracketMatchDTO:
    paused = m.paused_scores
    return BracketMatchDTO(
        id=m.id,
        round=m.round,
        match_number=m.match_number,
        player1=_player_or_none(m.player1),
        player2=_player_or_none(m.player2),
        player1_score=m.player1_score,
        player2_score=m.player2_score,
        winner=_player_or_none(m.winner),
        completed=m.completed,
        source_match1_id=m.source_match1_id,
        source_match2_id=m.source_match2_id,
        paused_scores=list(paused) if paused is not None else None,
    )


def _bracket_to_dto(b: TournamentBracket) -> BracketDTO:
    return BracketDTO(
        rounds=[[_match_to_dto(m) for m in r] for r in b.rounds],
        total_rounds=b.total_rounds,
        bracket_size=b.bracket_size,
        seed_slots=[player_to_dto(p) for p in b.seed_slots],
        active_match_id=b.active_match_id,
        is_complete=b.is_complete,
        champion=_player_or_none(b.champion),
    )


def _session() -> TournamentSession:
    session = get_store().tournament()
    if session is None:
        raise HTTPException(status_code=404, detail="no tournament in progress")
    return session


def _check_match(session: TournamentSession, match_id: str) -> None:
    try:
        session.bracket().match(match_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail="match not found") from e


@router.post("", response_model=BracketDTO)
def create_tournament(req: CreateTournamentRequest) -> BracketDTO:
    config = get_settings().match_config(advanced_closest_tracking=req.advanced_closest_tracking)
    try:
        session = get_store().start_tournament(
            [dto_to_player(p) for p in req.players], config=config
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return _bracket_to_dto(session.bracket())


@router.get("", response_model=BracketDTO)
def get_tournament() -> BracketDTO:
    return _bracket_to_dto(_session().bracket())


@router.get("/next", response_model=BracketMatchDTO | None)
def next_match() -> BracketMatchDTO | None:
    m = next_playable_match(_session().bracket())
    return _match_to_dto(m) if m is not None else None


@router.post("/matches/{match_id}/start", response_model=TournamentActionDTO)
def start_tournament_match(match_id: str, req: StartTournamentMatchRequest) -> TournamentActionDTO:
    session = _session()
    _check_match(session, match_id)
    try:
        ok = session.start_match(match_id, first_thrower=req.first_thrower)
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return TournamentActionDTO(ok=ok, bracket=_bracket_to_dto(session.bracket()))


@router.post("/matches/{match_id}/pause", response_model=TournamentActionDTO)
def pause_tournament_match(match_id: str) -> TournamentActionDTO:
    session = _session()
    _check_match(session, match_id)
    if session.bracket().active_match_id != match_id:
        raise HTTPException(status_code=409, detail="match is not in progress")
    try:
        bracket = session.pause()
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return TournamentActionDTO(ok=True, bracket=_bracket_to_dto(bracket))


@router.post("/matches/{match_id}/resume", response_model=TournamentActionDTO)
def resume_tournament_match(match_id: str) -> TournamentActionDTO:
    session = _session()
    _check_match(session, match_id)
    try:
        ok = session.resume(match_id)
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return TournamentActionDTO(ok=ok, bracket=_bracket_to_dto(session.bracket()))


@router.post("/matches/{match_id}/finish", response_model=TournamentActionDTO)
def finish_tournament_match(match_id: str) -> TournamentActionDTO:
    session = _session()
    _check_match(session, match_id)
    if session.bracket().active_match_id != match_id:
        raise HTTPException(status_code=409, detail="match is not in progress")
    try:
        bracket = session.finish_match()
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return TournamentActionDTO(ok=True, bracket=_bracket_to_dto(bracket))
