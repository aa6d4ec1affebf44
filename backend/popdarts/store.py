from __future__ import annotations

import random
from typing import Sequence

from popdarts.bracket.tournament import TournamentSession
from popdarts.scoring.game import MatchConfig, Player, PopdartsMatch


class InMemoryGameStore:
    """
    Minimal in-memory store for one quick match and one tournament.
    """

    def __init__(self) -> None:
        self._match: PopdartsMatch | None = None
        self._tournament: TournamentSession | None = None

    def clear(self) -> None:
        self._match = None
        self._tournament = None

    def start_match(
        self,
        player1: Player,
        player2: Player,
        *,
        config: MatchConfig | None = None,
        first_thrower: int = 1,
    ) -> PopdartsMatch:
        if self._tournament is not None and self._tournament.live_match is not None:
            raise RuntimeError("a tournament match is in progress; pause or finish it first")
        self._match = PopdartsMatch(player1, player2, config=config, first_thrower=first_thrower)
        return self._match

    def match(self) -> PopdartsMatch | None:
        return self._match

    def active_match(self) -> PopdartsMatch | None:
        """
        The tournament match being played, otherwise the quick match.
        """
        if self._tournament is not None and self._tournament.live_match is not None:
            return self._tournament.live_match
        return self._match

    def start_tournament(
        self,
        players: Sequence[Player],
        *,
        config: MatchConfig | None = None,
        rng: random.Random | None = None,
    ) -> TournamentSession:
        self._tournament = TournamentSession(players, config=config, rng=rng)
        return self._tournament

    def tournament(self) -> TournamentSession | None:
        return self._tournament


_STORE: InMemoryGameStore | None = None


def get_store() -> InMemoryGameStore:
    global _STORE
    if _STORE is None:
        _STORE = InMemoryGameStore()
    return _STORE
