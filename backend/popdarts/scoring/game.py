from __future__ import annotations

import logging
from dataclasses import dataclass

from popdarts.scoring.calculator import player_dart_values, score_round
from popdarts.scoring.darts import RoundDarts, RoundInput
from popdarts.scoring.ledger import (
    TARGET_SCORE,
    MatchState,
    Round,
    append_round,
    edit_last_round,
    new_match_state,
)

_LOG = logging.getLogger(__name__)


class WashConfirmationRequired(RuntimeError):
    """
    Raised when a round with no landed darts is submitted without confirmation.
    """


@dataclass(frozen=True)
class Player:
    name: str
    color: str | None = None  # color reference, resolved by the client
    is_bye: bool = False


@dataclass(frozen=True)
class MatchConfig:
    target_score: int = TARGET_SCORE
    advanced_closest_tracking: bool = False

    def __post_init__(self) -> None:
        if self.target_score <= 0:
            raise ValueError("target_score must be > 0")


@dataclass(frozen=True)
class RoundSummary:
    """
    What a submission would record, shown to the players before commit.
    """

    round_number: int
    p1_darts: int
    p2_darts: int
    p1_points: int
    p2_points: int
    p1_breakdown: tuple[int, ...]
    p2_breakdown: tuple[int, ...]
    net_score: int
    winner: int
    needs_wash_confirmation: bool


@dataclass(frozen=True)
class MatchSummary:
    winner_player_num: int
    final_scores: tuple[int, int]
    rounds: tuple[Round, ...]


def check_submittable(darts: RoundDarts, *, confirm_wash: bool = False) -> bool:
    """
    Validate a round for submission. Returns True when it is a confirmed wash.
    """
    if darts.total_landed == 0:
        if not confirm_wash:
            raise WashConfirmationRequired("no darts landed this round; confirm the wash")
        return True

    if darts.closest is None and darts.landed_count(1) and darts.landed_count(2):
        raise ValueError("select who was closest")

    if darts.has_unresolved and not (darts.resolved_count(1) and darts.resolved_count(2)):
        raise ValueError("each player needs at least one landed or missed dart")
    return False


class PopdartsMatch:
    """
    Two-player Popdarts match to 21 with cancellation scoring.

    This module intentionally contains no web/framework imports.

    Rules implemented:
    - Each round both players throw 3 darts; only the player with more points
      scores, by the difference. A tie is a wash.
    - Cumulative scores are capped at the target (21); reaching it wins.
    - The round winner throws first next round. A tie keeps the order; a
      confirmed no-throw wash flips it.
    - The last round can be edited; the whole match is then recomputed.
    """

    def __init__(
        self,
        player1: Player,
        player2: Player,
        *,
        config: MatchConfig | None = None,
        first_thrower: int = 1,
    ) -> None:
        if not player1.name.strip() or not player2.name.strip():
            raise ValueError("please enter both player names")
        self._players = (player1, player2)
        self._config = config or MatchConfig()
        self._state = new_match_state(
            first_thrower=first_thrower, target_score=self._config.target_score
        )
        self._input = RoundInput(advanced=self._config.advanced_closest_tracking)

    @property
    def players(self) -> tuple[Player, Player]:
        return self._players

    @property
    def config(self) -> MatchConfig:
        return self._config

    @property
    def round_input(self) -> RoundInput:
        return self._input

    @property
    def winner(self) -> Player | None:
        if self._state.winner_player_num is None:
            return None
        return self._players[self._state.winner_player_num - 1]

    def state(self) -> MatchState:
        return self._state

    def reset(self, *, first_thrower: int | None = None) -> MatchState:
        """
        Start a rematch between the same players.
        """
        if first_thrower is None:
            first_thrower = self._state.opening_thrower
        self._state = new_match_state(
            first_thrower=first_thrower, target_score=self._config.target_score
        )
        self._input.clear()
        return self._state

    def restore(self, state: MatchState) -> MatchState:
        self._state = state
        self._input.clear()
        return self._state

    def preview_round(self, darts: RoundDarts | None = None) -> RoundSummary:
        darts = darts if darts is not None else self._input.snapshot()
        score = score_round(darts)
        return RoundSummary(
            round_number=self._state.current_round_number,
            p1_darts=darts.landed_count(1),
            p2_darts=darts.landed_count(2),
            p1_points=score.player1_points,
            p2_points=score.player2_points,
            p1_breakdown=player_dart_values(darts, 1),
            p2_breakdown=player_dart_values(darts, 2),
            net_score=score.net_score,
            winner=score.winner,
            needs_wash_confirmation=darts.total_landed == 0,
        )

    def submit_round(self, *, confirm_wash: bool = False) -> MatchState:
        """
        Record the buffered round. The buffer is cleared only on success.
        """
        if self._state.is_over:
            raise RuntimeError("match is already over")

        darts = self._input.snapshot()
        washed = check_submittable(darts, confirm_wash=confirm_wash)
        self._state = append_round(self._state, darts, washed=washed)
        self._input.clear()

        r = self._state.rounds[-1]
        if washed:
            _LOG.info("round %d washed, first throw passes to player %d",
                      r.round_number, self._state.first_thrower)
        else:
            _LOG.info(
                "round %d: %d-%d, winner=%d net=%d",
                r.round_number, r.player1_points, r.player2_points, r.winner, r.net_score,
            )
        self._log_if_won()
        return self._state

    def edit_last_round(self, darts: RoundDarts, *, confirm_wash: bool = False) -> MatchState:
        if self._state.last_round is None:
            raise RuntimeError("no round to edit")
        washed = check_submittable(darts, confirm_wash=confirm_wash)
        self._state = edit_last_round(self._state, darts, washed=washed)
        _LOG.info(
            "round %d edited, scores now %d-%d",
            self._state.rounds[-1].round_number,
            self._state.player1_score,
            self._state.player2_score,
        )
        self._log_if_won()
        return self._state

    def summary(self) -> MatchSummary:
        s = self._state
        if s.winner_player_num is None:
            raise RuntimeError("match is not over yet")
        return MatchSummary(
            winner_player_num=s.winner_player_num,
            final_scores=(s.player1_score, s.player2_score),
            rounds=s.rounds,
        )

    def _log_if_won(self) -> None:
        if self.winner is not None:
            _LOG.info("match won by %s (%d-%d)", self.winner.name,
                      self._state.player1_score, self._state.player2_score)
