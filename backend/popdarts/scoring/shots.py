from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SpecialtyShot(str, Enum):
    LIPPY = "lippy"
    TOWER = "tower"
    FENDER_BENDER = "fender-bender"
    T_NOBBER = "t-nobber"
    INCH_WORM = "inch-worm"
    TRIPLE_NOBBER = "triple-nobber"
    WIGGLE_NOBBER = "wiggle-nobber"


@dataclass(frozen=True)
class ShotInfo:
    """
    Static description of a specialty shot.

    - points: base value of a landed dart carrying the shot. Lippy can be
      raised by the closest bonus; wiggle nobber has no value of its own and
      doubles its target instead.
    - unique_per_round: at most one dart across both players may carry it.
    """

    shot: SpecialtyShot
    name: str
    abbr: str
    points: int
    unique_per_round: bool = False


_CATALOG: tuple[ShotInfo, ...] = (
    ShotInfo(SpecialtyShot.LIPPY, "Lippy", "L", 2),
    ShotInfo(SpecialtyShot.WIGGLE_NOBBER, "Wiggle Nobber", "WN", 0),
    ShotInfo(SpecialtyShot.T_NOBBER, "T-Nobber", "TN", 10, unique_per_round=True),
    ShotInfo(SpecialtyShot.TOWER, "Tower", "T", 5, unique_per_round=True),
    ShotInfo(SpecialtyShot.FENDER_BENDER, "Fender Bender", "FB", 2),
    ShotInfo(SpecialtyShot.INCH_WORM, "Inch Worm", "IW", 11, unique_per_round=True),
    ShotInfo(SpecialtyShot.TRIPLE_NOBBER, "Triple Nobber", "TTN", 20, unique_per_round=True),
)

_BY_SHOT: dict[SpecialtyShot, ShotInfo] = {info.shot: info for info in _CATALOG}

# Shots that land on the target marker. Only one of these per round, and their
# presence cancels the closest bonus for everyone.
NOBBER_SHOTS: frozenset[SpecialtyShot] = frozenset(
    {SpecialtyShot.T_NOBBER, SpecialtyShot.INCH_WORM}
)

ORDINARY_DART_POINTS = 1
CLOSEST_DART_POINTS = 3
CLOSEST_LIPPY_POINTS = 4


def catalog() -> tuple[ShotInfo, ...]:
    return _CATALOG


def lookup(shot: SpecialtyShot | str) -> ShotInfo:
    return _BY_SHOT[SpecialtyShot(shot)]
