from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from popdarts.scoring.darts import DARTS_PER_ROUND
from popdarts.scoring.ledger import MatchState, Round
from popdarts.scoring.shots import SpecialtyShot


@dataclass(frozen=True)
class PlayerStats:
    player_id: int
    rounds_played: int
    darts_landed: int
    rounds_won: int
    closest_count: int
    points_thrown: int
    highest_round: int
    specialty_shots: dict[str, int] = field(default_factory=dict)

    @property
    def darts_missed(self) -> int:
        return self.rounds_played * DARTS_PER_ROUND - self.darts_landed

    @property
    def average_darts_per_round(self) -> float:
        if self.rounds_played == 0:
            return 0.0
        return self.darts_landed / self.rounds_played


@dataclass(frozen=True)
class MatchStats:
    player_1: PlayerStats
    player_2: PlayerStats


def _accumulate(player_id: int, rounds: list[Round]) -> PlayerStats:
    shots: Counter[str] = Counter()
    for r in rounds:
        for d in r.darts.darts_for(player_id):
            if d.modifier is not None:
                shots[d.modifier.value] += 1

    points = [r.points_for(player_id) for r in rounds]

    return PlayerStats(
        player_id=player_id,
        rounds_played=len(rounds),
        darts_landed=sum(r.darts.landed_count(player_id) for r in rounds),
        rounds_won=sum(1 for r in rounds if r.winner == player_id),
        closest_count=sum(1 for r in rounds if r.closest_player == player_id),
        points_thrown=sum(points),
        highest_round=max(points) if points else 0,
        specialty_shots={s.value: shots.get(s.value, 0) for s in SpecialtyShot},
    )


def compute_match_stats(state: MatchState) -> MatchStats:
    rounds = list(state.rounds)
    return MatchStats(
        player_1=_accumulate(1, rounds),
        player_2=_accumulate(2, rounds),
    )


def score_progression(state: MatchState) -> list[tuple[int, int]]:
    """
    Running (player1, player2) totals after each round, for a momentum chart.

    Only the round winner moves, by the net score, capped at the target.
    Tied and washed rounds repeat the previous totals.
    """
    p1 = p2 = 0
    out: list[tuple[int, int]] = []
    for r in state.rounds:
        if r.winner == 1:
            p1 = min(p1 + r.net_score, state.target_score)
        elif r.winner == 2:
            p2 = min(p2 + r.net_score, state.target_score)
        out.append((p1, p2))
    return out
