from __future__ import annotations

from dataclasses import dataclass

from popdarts.scoring.darts import DartRef, RoundDarts
from popdarts.scoring.shots import (
    CLOSEST_DART_POINTS,
    CLOSEST_LIPPY_POINTS,
    NOBBER_SHOTS,
    ORDINARY_DART_POINTS,
    SpecialtyShot,
    lookup,
)


@dataclass(frozen=True)
class RoundScore:
    """
    Points each player threw in a round, before cancellation.
    """

    player1_points: int
    player2_points: int

    @property
    def net_score(self) -> int:
        return abs(self.player1_points - self.player2_points)

    @property
    def winner(self) -> int:
        """
        1 or 2 for the player with more points, 0 for a wash.
        """
        if self.player1_points > self.player2_points:
            return 1
        if self.player2_points > self.player1_points:
            return 2
        return 0


def _first_ordinary_index(darts: RoundDarts, player: int) -> int | None:
    for i, d in enumerate(darts.darts_for(player)):
        if d.is_ordinary:
            return i
    return None


def dart_value(darts: RoundDarts, ref: DartRef) -> int:
    """
    Value of a single dart in the context of its round.

    - A nobber (T-Nobber or Inch Worm) anywhere in the round cancels the
      closest bonus for everyone.
    - A lippy anywhere in the round cancels the ordinary-dart closest bonus,
      but a closest player's own lippy still scores 4.
    - A wiggle nobber scores double whatever its target scores.
    """
    dart = darts.dart(ref)
    if not dart.is_landed:
        return 0

    shot = dart.modifier
    bonus_allowed = darts.closest_player == ref.player and not darts.has_shot(*NOBBER_SHOTS)

    if shot is None:
        if (
            bonus_allowed
            and not darts.has_shot(SpecialtyShot.LIPPY)
            and _first_ordinary_index(darts, ref.player) == ref.index
        ):
            return CLOSEST_DART_POINTS
        return ORDINARY_DART_POINTS

    if shot == SpecialtyShot.LIPPY:
        return CLOSEST_LIPPY_POINTS if bonus_allowed else lookup(shot).points

    if shot == SpecialtyShot.WIGGLE_NOBBER:
        return 2 * dart_value(darts, dart.target)

    return lookup(shot).points


def player_dart_values(darts: RoundDarts, player: int) -> tuple[int, ...]:
    return tuple(
        dart_value(darts, DartRef(player, i)) for i in range(len(darts.darts_for(player)))
    )


def score_round(darts: RoundDarts) -> RoundScore:
    return RoundScore(
        player1_points=sum(player_dart_values(darts, 1)),
        player2_points=sum(player_dart_values(darts, 2)),
    )
