from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator

from popdarts.scoring.game import Player
from popdarts.scoring.ledger import MatchState

BYE = Player(name="BYE", color=None, is_bye=True)


@dataclass(frozen=True)
class BracketMatch:
    """
    One node of a single-elimination bracket.

    Slots later in the bracket start empty (None) and are filled by the winner
    of source_match1_id / source_match2_id. paused_state holds the live match
    when it was left mid-game.
    """

    id: str
    round: int
    match_number: int
    player1: Player | None = None
    player2: Player | None = None
    player1_score: int | None = None
    player2_score: int | None = None
    winner: Player | None = None
    completed: bool = False
    source_match1_id: str | None = None
    source_match2_id: str | None = None
    paused_state: MatchState | None = None

    @property
    def is_ready(self) -> bool:
        """
        Both slots hold real players.
        """
        return (
            self.player1 is not None
            and self.player2 is not None
            and not self.player1.is_bye
            and not self.player2.is_bye
        )

    @property
    def is_paused(self) -> bool:
        return self.paused_state is not None

    @property
    def paused_scores(self) -> tuple[int, int] | None:
        if self.paused_state is None:
            return None
        return (self.paused_state.player1_score, self.paused_state.player2_score)


@dataclass(frozen=True)
class TournamentBracket:
    rounds: tuple[tuple[BracketMatch, ...], ...]
    total_rounds: int
    seed_slots: tuple[Player, ...] = ()  # round-1 slots, byes included
    active_match_id: str | None = None

    @property
    def bracket_size(self) -> int:
        return len(self.seed_slots)

    def matches(self) -> Iterator[BracketMatch]:
        for round_matches in self.rounds:
            yield from round_matches

    def match(self, match_id: str) -> BracketMatch:
        for m in self.matches():
            if m.id == match_id:
                return m
        raise KeyError(f"match {match_id!r} not found")

    @property
    def final_match(self) -> BracketMatch:
        return self.rounds[-1][0]

    @property
    def is_complete(self) -> bool:
        return self.final_match.completed

    @property
    def champion(self) -> Player | None:
        return self.final_match.winner if self.is_complete else None

    @property
    def paused_match(self) -> BracketMatch | None:
        for m in self.matches():
            if m.is_paused:
                return m
        return None

    def with_match(self, updated: BracketMatch) -> TournamentBracket:
        idx = updated.round - 1
        round_matches = tuple(
            updated if m.id == updated.id else m for m in self.rounds[idx]
        )
        rounds = (*self.rounds[:idx], round_matches, *self.rounds[idx + 1 :])
        return replace(self, rounds=rounds)
