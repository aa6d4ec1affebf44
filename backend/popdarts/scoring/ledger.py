from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable

from popdarts.scoring.calculator import score_round
from popdarts.scoring.darts import DartState, RoundDarts, other_player

_LOG = logging.getLogger(__name__)

TARGET_SCORE = 21


@dataclass(frozen=True)
class Round:
    """
    A completed round as recorded in the match history.

    Points are the raw totals each player threw; only the winner's cumulative
    score moves, by net_score. washed marks a confirmed round in which nobody
    landed a dart.
    """

    round_number: int
    darts: RoundDarts
    player1_points: int
    player2_points: int
    winner: int  # 0 = wash
    first_thrower: int
    washed: bool = False

    @property
    def net_score(self) -> int:
        return abs(self.player1_points - self.player2_points)

    @property
    def player1_darts(self) -> tuple[DartState, ...]:
        return self.darts.player1

    @property
    def player2_darts(self) -> tuple[DartState, ...]:
        return self.darts.player2

    @property
    def player1_darts_landed(self) -> int:
        return self.darts.landed_count(1)

    @property
    def player2_darts_landed(self) -> int:
        return self.darts.landed_count(2)

    @property
    def closest_player(self) -> int | None:
        return self.darts.closest_player

    def points_for(self, player: int) -> int:
        if player == 1:
            return self.player1_points
        if player == 2:
            return self.player2_points
        raise ValueError("player must be 1 or 2")


@dataclass(frozen=True)
class MatchState:
    target_score: int = TARGET_SCORE
    player1_score: int = 0
    player2_score: int = 0
    rounds: tuple[Round, ...] = ()
    current_round_number: int = 1
    first_thrower: int = 1
    opening_thrower: int = 1  # first thrower of round 1
    player1_rounds_won: int = 0
    player2_rounds_won: int = 0
    winner_player_num: int | None = None

    @property
    def is_over(self) -> bool:
        return self.winner_player_num is not None

    @property
    def last_round(self) -> Round | None:
        return self.rounds[-1] if self.rounds else None

    def score(self, player: int) -> int:
        if player == 1:
            return self.player1_score
        if player == 2:
            return self.player2_score
        raise ValueError("player must be 1 or 2")

    def rounds_won(self, player: int) -> int:
        if player == 1:
            return self.player1_rounds_won
        if player == 2:
            return self.player2_rounds_won
        raise ValueError("player must be 1 or 2")


def new_match_state(*, first_thrower: int = 1, target_score: int = TARGET_SCORE) -> MatchState:
    other_player(first_thrower)  # validates 1/2
    if target_score <= 0:
        raise ValueError("target_score must be > 0")
    return MatchState(
        target_score=target_score,
        first_thrower=first_thrower,
        opening_thrower=first_thrower,
    )


def build_round(
    round_number: int, darts: RoundDarts, *, first_thrower: int, washed: bool = False
) -> Round:
    """
    Score a round. A washed round is recorded with every dart missed.
    """
    if washed:
        return Round(
            round_number=round_number,
            darts=RoundDarts.all_missed(),
            player1_points=0,
            player2_points=0,
            winner=0,
            first_thrower=first_thrower,
            washed=True,
        )

    score = score_round(darts)
    return Round(
        round_number=round_number,
        darts=darts,
        player1_points=score.player1_points,
        player2_points=score.player2_points,
        winner=score.winner,
        first_thrower=first_thrower,
    )


def next_first_thrower(r: Round) -> int:
    """
    Who throws first in the round after r.

    The round winner throws first. A points tie keeps the order; a confirmed
    no-throw wash hands first throw to the other player.
    """
    if r.winner:
        return r.winner
    if r.washed:
        return other_player(r.first_thrower)
    return r.first_thrower


def _winner_for(player1_score: int, player2_score: int, target: int) -> int | None:
    if player1_score >= target:
        return 1
    if player2_score >= target:
        return 2
    return None


def _apply(state: MatchState, r: Round) -> MatchState:
    p1, p2 = state.player1_score, state.player2_score
    p1_won, p2_won = state.player1_rounds_won, state.player2_rounds_won

    # Cancellation: only the round winner scores, by the difference.
    if r.winner == 1:
        p1 = min(p1 + r.net_score, state.target_score)
        p1_won += 1
    elif r.winner == 2:
        p2 = min(p2 + r.net_score, state.target_score)
        p2_won += 1

    return replace(
        state,
        player1_score=p1,
        player2_score=p2,
        rounds=(*state.rounds, r),
        current_round_number=r.round_number + 1,
        first_thrower=next_first_thrower(r),
        player1_rounds_won=p1_won,
        player2_rounds_won=p2_won,
        winner_player_num=_winner_for(p1, p2, state.target_score),
    )


def append_round(state: MatchState, darts: RoundDarts, *, washed: bool = False) -> MatchState:
    if state.is_over:
        raise RuntimeError("match is already over")
    r = build_round(
        state.current_round_number, darts, first_thrower=state.first_thrower, washed=washed
    )
    return _apply(state, r)


def recompute(state: MatchState, rounds: Iterable[Round]) -> MatchState:
    """
    Rebuild every derived total by replaying the full history from round 1.
    """
    fresh = new_match_state(first_thrower=state.opening_thrower, target_score=state.target_score)
    for r in rounds:
        fresh = _apply(fresh, r)
    return fresh


def edit_last_round(state: MatchState, darts: RoundDarts, *, washed: bool = False) -> MatchState:
    """
    Replace the most recent round and recompute the match from scratch.

    The replaced round keeps its number and its first thrower; the next round's
    first thrower follows the new result.
    """
    old = state.last_round
    if old is None:
        raise RuntimeError("no round to edit")

    new = build_round(old.round_number, darts, first_thrower=old.first_thrower, washed=washed)
    if new.winner != old.winner:
        _LOG.info(
            "round %d winner changed from %d to %d", old.round_number, old.winner, new.winner
        )
    return recompute(state, (*state.rounds[:-1], new))
