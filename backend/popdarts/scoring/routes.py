from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from popdarts.config import get_settings
from popdarts.scoring.darts import (
    DARTS_PER_ROUND,
    ClosestSelection,
    DartRef,
    DartState,
    DartStatus,
    RoundDarts,
)
from popdarts.scoring.game import (
    Player,
    PopdartsMatch,
    RoundSummary,
    WashConfirmationRequired,
)
from popdarts.scoring.ledger import MatchState, Round
from popdarts.scoring.shots import SpecialtyShot, catalog
from popdarts.scoring.stats import PlayerStats, compute_match_stats, score_progression
from popdarts.store import get_store

router = APIRouter(tags=["match"])


class PlayerInDTO(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., max_length=100)
    color: str | None = Field(default=None, description="Color reference")


class PlayerDTO(BaseModel):
    name: str
    color: str | None = None
    is_bye: bool = False


class DartRefDTO(BaseModel):
    player: int = Field(..., ge=1, le=2)
    index: int = Field(..., ge=0, le=DARTS_PER_ROUND - 1)


class DartDTO(BaseModel):
    status: DartStatus = DartStatus.EMPTY
    modifier: SpecialtyShot | None = None
    target: DartRefDTO | None = Field(default=None, description="Wiggle nobber target")


class ClosestDTO(BaseModel):
    player: int = Field(..., ge=1, le=2)
    dart_index: int | None = Field(default=None, ge=0, le=DARTS_PER_ROUND - 1)


def _empty_darts() -> list[DartDTO]:
    return [DartDTO() for _ in range(DARTS_PER_ROUND)]


class RoundDartsDTO(BaseModel):
    player1: list[DartDTO] = Field(default_factory=_empty_darts)
    player2: list[DartDTO] = Field(default_factory=_empty_darts)
    closest: ClosestDTO | None = None


class StartMatchRequest(BaseModel):
    player1: PlayerInDTO
    player2: PlayerInDTO
    first_thrower: int = Field(default=1, ge=1, le=2)
    advanced_closest_tracking: bool | None = Field(
        default=None, description="Defaults to POPDARTS_ADVANCED_CLOSEST"
    )


class ResetRequest(BaseModel):
    first_thrower: int | None = Field(default=None, ge=1, le=2)


class TapRequest(BaseModel):
    player: int = Field(..., ge=1, le=2)
    dart_index: int = Field(..., ge=0, le=DARTS_PER_ROUND - 1)


class ModifierRequest(BaseModel):
    player: int = Field(..., ge=1, le=2)
    dart_index: int = Field(..., ge=0, le=DARTS_PER_ROUND - 1)
    modifier: SpecialtyShot | None = Field(default=None, description="null clears the shot")
    target: DartRefDTO | None = None


class ClosestRequest(BaseModel):
    player: int | None = Field(default=None, ge=1, le=2, description="null clears the selection")
    dart_index: int | None = Field(default=None, ge=0, le=DARTS_PER_ROUND - 1)


class SubmitRoundRequest(BaseModel):
    confirm_wash: bool = False


class EditRoundRequest(BaseModel):
    darts: RoundDartsDTO
    confirm_wash: bool = False


class RoundDTO(BaseModel):
    round_number: int
    player1_darts: list[DartDTO]
    player2_darts: list[DartDTO]
    p1_darts_landed: int
    p2_darts_landed: int
    player1_points: int
    player2_points: int
    net_score: int
    closest: ClosestDTO | None
    winner: int
    first_thrower: int
    washed: bool
    player1_score_after: int
    player2_score_after: int


class MatchStateDTO(BaseModel):
    players: list[PlayerDTO]
    target_score: int
    advanced_closest_tracking: bool
    player1_score: int
    player2_score: int
    current_round_number: int
    first_thrower: int
    player1_rounds_won: int
    player2_rounds_won: int
    winner_player_num: int | None
    pending: RoundDartsDTO
    history: list[RoundDTO]


class RoundSummaryDTO(BaseModel):
    round_number: int
    p1_darts: int
    p2_darts: int
    p1_points: int
    p2_points: int
    p1_breakdown: list[int]
    p2_breakdown: list[int]
    net_score: int
    winner: int
    needs_wash_confirmation: bool


class MatchSummaryDTO(BaseModel):
    winner_player_num: int
    winner: PlayerDTO
    final_scores: list[int]
    history: list[RoundDTO]


class PlayerStatsDTO(BaseModel):
    player_id: int
    rounds_played: int
    darts_landed: int
    darts_missed: int
    average_darts_per_round: float
    rounds_won: int
    closest_count: int
    points_thrown: int
    highest_round: int
    specialty_shots: dict[str, int]


class MatchStatsDTO(BaseModel):
    player_1: PlayerStatsDTO
    player_2: PlayerStatsDTO


class ShotDTO(BaseModel):
    id: str
    name: str
    abbr: str
    points: int
    unique_per_round: bool


def player_to_dto(p: Player) -> PlayerDTO:
    return PlayerDTO(name=p.name, color=p.color, is_bye=p.is_bye)


def dto_to_player(p: PlayerInDTO) -> Player:
    return Player(name=p.name.strip(), color=p.color)


def _ref_to_dto(ref: DartRef | None) -> DartRefDTO | None:
    if ref is None:
        return None
    return DartRefDTO(player=ref.player, index=ref.index)


def _dart_to_dto(d: DartState) -> DartDTO:
    return DartDTO(status=d.status, modifier=d.modifier, target=_ref_to_dto(d.target))


def _closest_to_dto(c: ClosestSelection | None) -> ClosestDTO | None:
    if c is None:
        return None
    return ClosestDTO(player=c.player, dart_index=c.dart_index)


def _darts_to_dto(darts: RoundDarts) -> RoundDartsDTO:
    return RoundDartsDTO(
        player1=[_dart_to_dto(d) for d in darts.player1],
        player2=[_dart_to_dto(d) for d in darts.player2],
        closest=_closest_to_dto(darts.closest),
    )


def _dto_to_darts(dto: RoundDartsDTO) -> RoundDarts:
    def dart(d: DartDTO) -> DartState:
        target = DartRef(d.target.player, d.target.index) if d.target is not None else None
        return DartState(status=d.status, modifier=d.modifier, target=target)

    closest = None
    if dto.closest is not None:
        closest = ClosestSelection(dto.closest.player, dto.closest.dart_index)
    return RoundDarts(
        player1=tuple(dart(d) for d in dto.player1),
        player2=tuple(dart(d) for d in dto.player2),
        closest=closest,
    )


def round_to_dto(r: Round, score_after: tuple[int, int]) -> RoundDTO:
    return RoundDTO(
        round_number=r.round_number,
        player1_darts=[_dart_to_dto(d) for d in r.player1_darts],
        player2_darts=[_dart_to_dto(d) for d in r.player2_darts],
        p1_darts_landed=r.player1_darts_landed,
        p2_darts_landed=r.player2_darts_landed,
        player1_points=r.player1_points,
        player2_points=r.player2_points,
        net_score=r.net_score,
        closest=_closest_to_dto(r.darts.closest),
        winner=r.winner,
        first_thrower=r.first_thrower,
        washed=r.washed,
        player1_score_after=score_after[0],
        player2_score_after=score_after[1],
    )


def _history_to_dto(s: MatchState) -> list[RoundDTO]:
    return [round_to_dto(r, after) for r, after in zip(s.rounds, score_progression(s))]


def _state_to_dto(match: PopdartsMatch) -> MatchStateDTO:
    s: MatchState = match.state()
    return MatchStateDTO(
        players=[player_to_dto(p) for p in match.players],
        target_score=s.target_score,
        advanced_closest_tracking=match.config.advanced_closest_tracking,
        player1_score=s.player1_score,
        player2_score=s.player2_score,
        current_round_number=s.current_round_number,
        first_thrower=s.first_thrower,
        player1_rounds_won=s.player1_rounds_won,
        player2_rounds_won=s.player2_rounds_won,
        winner_player_num=s.winner_player_num,
        pending=_darts_to_dto(match.round_input.snapshot()),
        history=_history_to_dto(s),
    )


def _summary_to_dto(s: RoundSummary) -> RoundSummaryDTO:
    return RoundSummaryDTO(
        round_number=s.round_number,
        p1_darts=s.p1_darts,
        p2_darts=s.p2_darts,
        p1_points=s.p1_points,
        p2_points=s.p2_points,
        p1_breakdown=list(s.p1_breakdown),
        p2_breakdown=list(s.p2_breakdown),
        net_score=s.net_score,
        winner=s.winner,
        needs_wash_confirmation=s.needs_wash_confirmation,
    )


def _player_stats_to_dto(p: PlayerStats) -> PlayerStatsDTO:
    return PlayerStatsDTO(
        player_id=p.player_id,
        rounds_played=p.rounds_played,
        darts_landed=p.darts_landed,
        darts_missed=p.darts_missed,
        average_darts_per_round=p.average_darts_per_round,
        rounds_won=p.rounds_won,
        closest_count=p.closest_count,
        points_thrown=p.points_thrown,
        highest_round=p.highest_round,
        specialty_shots=dict(p.specialty_shots),
    )


def _active() -> PopdartsMatch:
    match = get_store().active_match()
    if match is None:
        raise HTTPException(status_code=404, detail="no match in progress")
    return match


@router.get("/shots", response_model=list[ShotDTO])
def list_shots() -> list[ShotDTO]:
    return [
        ShotDTO(
            id=s.shot.value,
            name=s.name,
            abbr=s.abbr,
            points=s.points,
            unique_per_round=s.unique_per_round,
        )
        for s in catalog()
    ]


@router.get("/match", response_model=MatchStateDTO)
def get_match() -> MatchStateDTO:
    return _state_to_dto(_active())


@router.post("/match/start", response_model=MatchStateDTO)
def start_match(req: StartMatchRequest) -> MatchStateDTO:
    config = get_settings().match_config(advanced_closest_tracking=req.advanced_closest_tracking)
    try:
        match = get_store().start_match(
            dto_to_player(req.player1),
            dto_to_player(req.player2),
            config=config,
            first_thrower=req.first_thrower,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _state_to_dto(match)


@router.post("/match/reset", response_model=MatchStateDTO)
def reset_match(req: ResetRequest) -> MatchStateDTO:
    match = _active()
    match.reset(first_thrower=req.first_thrower)
    return _state_to_dto(match)


@router.post("/match/input/tap", response_model=MatchStateDTO)
def tap_dart(req: TapRequest) -> MatchStateDTO:
    match = _active()
    try:
        match.round_input.tap(req.player, req.dart_index)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return _state_to_dto(match)


@router.post("/match/input/modifier", response_model=MatchStateDTO)
def set_modifier(req: ModifierRequest) -> MatchStateDTO:
    match = _active()
    target = DartRef(req.target.player, req.target.index) if req.target is not None else None
    try:
        match.round_input.set_modifier(req.player, req.dart_index, req.modifier, target=target)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return _state_to_dto(match)


@router.post("/match/input/closest", response_model=MatchStateDTO)
def select_closest(req: ClosestRequest) -> MatchStateDTO:
    match = _active()
    try:
        if req.player is None:
            match.round_input.clear_closest()
        else:
            match.round_input.select_closest(req.player, req.dart_index)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return _state_to_dto(match)


@router.post("/match/input/cancel", response_model=MatchStateDTO)
def cancel_input() -> MatchStateDTO:
    match = _active()
    match.round_input.clear()
    return _state_to_dto(match)


@router.get("/match/input/preview", response_model=RoundSummaryDTO)
def preview_round() -> RoundSummaryDTO:
    return _summary_to_dto(_active().preview_round())


@router.post("/match/round", response_model=MatchStateDTO)
def submit_round(req: SubmitRoundRequest) -> MatchStateDTO:
    match = _active()
    try:
        match.submit_round(confirm_wash=req.confirm_wash)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except WashConfirmationRequired as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _state_to_dto(match)


@router.put("/match/rounds/last", response_model=MatchStateDTO)
def edit_last_round(req: EditRoundRequest) -> MatchStateDTO:
    match = _active()
    try:
        match.edit_last_round(_dto_to_darts(req.darts), confirm_wash=req.confirm_wash)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return _state_to_dto(match)


@router.get("/match/stats", response_model=MatchStatsDTO)
def match_stats() -> MatchStatsDTO:
    stats = compute_match_stats(_active().state())
    return MatchStatsDTO(
        player_1=_player_stats_to_dto(stats.player_1),
        player_2=_player_stats_to_dto(stats.player_2),
    )


@router.get("/match/summary", response_model=MatchSummaryDTO)
def match_summary() -> MatchSummaryDTO:
    match = _active()
    try:
        summary = match.summary()
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return MatchSummaryDTO(
        winner_player_num=summary.winner_player_num,
        winner=player_to_dto(match.players[summary.winner_player_num - 1]),
        final_scores=list(summary.final_scores),
        history=_history_to_dto(match.state()),
    )
