from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator, Sequence

from popdarts.scoring.shots import SpecialtyShot, lookup

DARTS_PER_ROUND = 3


class DartStatus(str, Enum):
    EMPTY = "empty"  # not resolved yet
    LANDED = "landed"
    MISSED = "missed"


def other_player(player: int) -> int:
    if player == 1:
        return 2
    if player == 2:
        return 1
    raise ValueError("player must be 1 or 2")


def _check_player(player: int) -> None:
    if player not in (1, 2):
        raise ValueError("player must be 1 or 2")


@dataclass(frozen=True)
class DartRef:
    """
    Points at one dart of a round: player 1 or 2, dart index 0-2.
    """

    player: int
    index: int

    def __post_init__(self) -> None:
        _check_player(self.player)
        if not 0 <= self.index < DARTS_PER_ROUND:
            raise ValueError(f"dart index must be between 0 and {DARTS_PER_ROUND - 1}")


@dataclass(frozen=True)
class DartState:
    status: DartStatus = DartStatus.EMPTY
    modifier: SpecialtyShot | None = None
    target: DartRef | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", DartStatus(self.status))
        if self.modifier is not None:
            object.__setattr__(self, "modifier", SpecialtyShot(self.modifier))
            if self.status != DartStatus.LANDED:
                raise ValueError("only a landed dart can carry a specialty shot")

        if self.modifier == SpecialtyShot.WIGGLE_NOBBER:
            if self.target is None:
                raise ValueError("a wiggle nobber must target another landed dart")
        elif self.target is not None:
            raise ValueError("only a wiggle nobber can target another dart")

    @property
    def is_landed(self) -> bool:
        return self.status == DartStatus.LANDED

    @property
    def is_resolved(self) -> bool:
        return self.status != DartStatus.EMPTY

    @property
    def is_ordinary(self) -> bool:
        return self.is_landed and self.modifier is None


@dataclass(frozen=True)
class ClosestSelection:
    """
    The single player judged closest to the target marker this round.

    dart_index names the exact dart in advanced tracking; scoring only looks
    at the player.
    """

    player: int
    dart_index: int | None = None

    def __post_init__(self) -> None:
        _check_player(self.player)
        if self.dart_index is not None and not 0 <= self.dart_index < DARTS_PER_ROUND:
            raise ValueError(f"dart index must be between 0 and {DARTS_PER_ROUND - 1}")


EMPTY_DARTS: tuple[DartState, ...] = (DartState(),) * DARTS_PER_ROUND
MISSED_DARTS: tuple[DartState, ...] = (DartState(DartStatus.MISSED),) * DARTS_PER_ROUND


@dataclass(frozen=True)
class RoundDarts:
    """
    Validated snapshot of both players' darts plus the closest selection.

    Construction enforces every round-scoped rule, so a RoundDarts that exists
    can be scored without further checks:
    - tower, t-nobber, inch-worm and triple-nobber appear at most once per round
    - t-nobber and inch-worm never share a round
    - triple-nobber needs a t-nobber on another dart
    - a wiggle nobber targets a different landed dart that is not itself a
      wiggle nobber
    - the closest player landed at least one dart (and the named dart, if any)
    """

    player1: tuple[DartState, ...] = EMPTY_DARTS
    player2: tuple[DartState, ...] = EMPTY_DARTS
    closest: ClosestSelection | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "player1", tuple(self.player1))
        object.__setattr__(self, "player2", tuple(self.player2))
        for darts in (self.player1, self.player2):
            if len(darts) != DARTS_PER_ROUND:
                raise ValueError(f"each player throws exactly {DARTS_PER_ROUND} darts")

        counts = Counter(d.modifier for _, d in self.items() if d.modifier is not None)
        for shot, n in counts.items():
            info = lookup(shot)
            if info.unique_per_round and n > 1:
                raise ValueError(f"only one {info.name} is allowed per round")
        if counts[SpecialtyShot.T_NOBBER] and counts[SpecialtyShot.INCH_WORM]:
            raise ValueError("a T-Nobber and an Inch Worm cannot be thrown in the same round")
        if counts[SpecialtyShot.TRIPLE_NOBBER] and not counts[SpecialtyShot.T_NOBBER]:
            raise ValueError("a Triple Nobber requires a T-Nobber in the same round")

        for ref, dart in self.items():
            if dart.modifier != SpecialtyShot.WIGGLE_NOBBER:
                continue
            target = dart.target
            if target == ref:
                raise ValueError("a wiggle nobber cannot target itself")
            target_dart = self.dart(target)
            if not target_dart.is_landed:
                raise ValueError("a wiggle nobber must target a landed dart")
            if target_dart.modifier == SpecialtyShot.WIGGLE_NOBBER:
                raise ValueError("a wiggle nobber cannot target another wiggle nobber")

        if self.closest is not None:
            if self.landed_count(self.closest.player) == 0:
                raise ValueError("the closest player must have landed a dart")
            if self.closest.dart_index is not None:
                if not self.darts_for(self.closest.player)[self.closest.dart_index].is_landed:
                    raise ValueError("the closest dart must be a landed dart")

    @classmethod
    def all_missed(cls) -> RoundDarts:
        return cls(player1=MISSED_DARTS, player2=MISSED_DARTS, closest=None)

    def darts_for(self, player: int) -> tuple[DartState, ...]:
        if player == 1:
            return self.player1
        if player == 2:
            return self.player2
        raise ValueError("player must be 1 or 2")

    def dart(self, ref: DartRef) -> DartState:
        return self.darts_for(ref.player)[ref.index]

    def items(self) -> Iterator[tuple[DartRef, DartState]]:
        for player in (1, 2):
            for i, d in enumerate(self.darts_for(player)):
                yield DartRef(player, i), d

    def landed_count(self, player: int) -> int:
        return sum(1 for d in self.darts_for(player) if d.is_landed)

    def resolved_count(self, player: int) -> int:
        return sum(1 for d in self.darts_for(player) if d.is_resolved)

    @property
    def total_landed(self) -> int:
        return self.landed_count(1) + self.landed_count(2)

    @property
    def has_unresolved(self) -> bool:
        return any(not d.is_resolved for _, d in self.items())

    def has_shot(self, *shots: SpecialtyShot) -> bool:
        return any(d.modifier in shots for _, d in self.items())

    @property
    def closest_player(self) -> int | None:
        return self.closest.player if self.closest is not None else None

    def with_player_darts(self, player: int, darts: Sequence[DartState]) -> RoundDarts:
        if player == 1:
            return replace(self, player1=tuple(darts))
        if player == 2:
            return replace(self, player2=tuple(darts))
        raise ValueError("player must be 1 or 2")


def _settle(
    player1: list[DartState], player2: list[DartState], closest: ClosestSelection | None
) -> RoundDarts:
    """
    Drop selections that stopped holding after a dart changed, then validate.
    """
    by_player = {1: player1, 2: player2}
    all_darts = player1 + player2

    if not any(d.modifier == SpecialtyShot.T_NOBBER for d in all_darts):
        for darts in by_player.values():
            for i, d in enumerate(darts):
                if d.modifier == SpecialtyShot.TRIPLE_NOBBER:
                    darts[i] = DartState(DartStatus.LANDED)

    for darts in by_player.values():
        for i, d in enumerate(darts):
            if d.modifier != SpecialtyShot.WIGGLE_NOBBER:
                continue
            if not by_player[d.target.player][d.target.index].is_landed:
                darts[i] = DartState(DartStatus.LANDED)

    if closest is not None:
        own = by_player[closest.player]
        if not any(d.is_landed for d in own):
            closest = None
        elif closest.dart_index is not None and not own[closest.dart_index].is_landed:
            closest = None

    return RoundDarts(player1=tuple(player1), player2=tuple(player2), closest=closest)


class RoundInput:
    """
    In-progress dart buffer for the round being entered.

    Two input modes:
    - casual: tapping a dart cascades by position (tap dart 3 -> all three
      landed, tap it again -> two landed); closest is chosen per player.
    - advanced: each tap cycles one dart empty -> landed -> missed -> empty and
      closest names the exact dart.

    Every mutation builds a fresh RoundDarts; a rejected mutation raises
    ValueError and leaves the buffer as it was.
    """

    def __init__(self, *, advanced: bool = False) -> None:
        self._advanced = advanced
        self._darts = RoundDarts()

    @property
    def advanced(self) -> bool:
        return self._advanced

    def snapshot(self) -> RoundDarts:
        return self._darts

    def clear(self) -> RoundDarts:
        self._darts = RoundDarts()
        return self._darts

    def load(self, darts: RoundDarts) -> RoundDarts:
        self._darts = darts
        return self._darts

    def tap(self, player: int, index: int) -> RoundDarts:
        ref = DartRef(player, index)
        current = self._darts.darts_for(ref.player)
        statuses = [d.status for d in current]

        if self._advanced:
            statuses[index] = {
                DartStatus.EMPTY: DartStatus.LANDED,
                DartStatus.LANDED: DartStatus.MISSED,
                DartStatus.MISSED: DartStatus.EMPTY,
            }[statuses[index]]
        else:
            last_landed = current[index].is_landed and not any(
                d.is_landed for d in current[index + 1 :]
            )
            landed = index if last_landed else index + 1
            statuses = [DartStatus.LANDED] * landed + [DartStatus.MISSED] * (
                DARTS_PER_ROUND - landed
            )

        # Darts that keep their status keep their specialty shot too.
        darts = [d if d.status == s else DartState(s) for d, s in zip(current, statuses)]
        return self._commit(ref.player, darts, self._darts.closest)

    def set_modifier(
        self,
        player: int,
        index: int,
        shot: SpecialtyShot | str | None,
        *,
        target: DartRef | None = None,
    ) -> RoundDarts:
        if shot is None:
            return self.clear_modifier(player, index)
        ref = DartRef(player, index)
        darts = list(self._darts.darts_for(ref.player))
        darts[index] = DartState(DartStatus.LANDED, SpecialtyShot(shot), target)
        return self._commit(ref.player, darts, self._darts.closest)

    def clear_modifier(self, player: int, index: int) -> RoundDarts:
        ref = DartRef(player, index)
        darts = list(self._darts.darts_for(ref.player))
        if darts[index].modifier is not None:
            darts[index] = DartState(DartStatus.LANDED)
        return self._commit(ref.player, darts, self._darts.closest)

    def select_closest(self, player: int, dart_index: int | None = None) -> RoundDarts:
        if self._advanced and dart_index is None:
            raise ValueError("advanced tracking requires the closest dart, not just the player")
        selection = ClosestSelection(player, dart_index if self._advanced else None)
        self._darts = replace(self._darts, closest=selection)
        return self._darts

    def clear_closest(self) -> RoundDarts:
        self._darts = replace(self._darts, closest=None)
        return self._darts

    def _commit(
        self, player: int, darts: list[DartState], closest: ClosestSelection | None
    ) -> RoundDarts:
        player1 = list(darts) if player == 1 else list(self._darts.player1)
        player2 = list(darts) if player == 2 else list(self._darts.player2)
        self._darts = _settle(player1, player2, closest)
        return self._darts
