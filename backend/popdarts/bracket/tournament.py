from __future__ import annotations

import random
from typing import Sequence

from popdarts.bracket.advancer import complete_match, pause_match, resume_match, start_match
from popdarts.bracket.builder import build_bracket
from popdarts.bracket.models import TournamentBracket
from popdarts.scoring.game import MatchConfig, Player, PopdartsMatch


class TournamentSession:
    """
    A bracket plus the one match currently being played from it.
    """

    def __init__(
        self,
        players: Sequence[Player],
        *,
        config: MatchConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config or MatchConfig()
        self._bracket = build_bracket(players, rng=rng)
        self._match: PopdartsMatch | None = None

    def bracket(self) -> TournamentBracket:
        return self._bracket

    @property
    def live_match(self) -> PopdartsMatch | None:
        return self._match

    @property
    def champion(self) -> Player | None:
        return self._bracket.champion

    def start_match(self, match_id: str, *, first_thrower: int = 1) -> bool:
        if self._match is not None:
            raise RuntimeError("pause or finish the current match first")
        updated = start_match(self._bracket, match_id)
        if updated is None:
            return False
        m = updated.match(match_id)
        self._match = PopdartsMatch(
            m.player1, m.player2, config=self._config, first_thrower=first_thrower
        )
        self._bracket = updated
        return True

    def pause(self) -> TournamentBracket:
        match_id = self._bracket.active_match_id
        if self._match is None or match_id is None:
            raise RuntimeError("no match in progress")
        self._bracket = pause_match(self._bracket, match_id, self._match.state())
        self._match = None
        return self._bracket

    def resume(self, match_id: str) -> bool:
        if self._match is not None:
            raise RuntimeError("pause or finish the current match first")
        result = resume_match(self._bracket, match_id)
        if result is None:
            return False
        self._bracket, state = result
        m = self._bracket.match(match_id)
        self._match = PopdartsMatch(m.player1, m.player2, config=self._config)
        self._match.restore(state)
        return True

    def finish_match(self) -> TournamentBracket:
        match_id = self._bracket.active_match_id
        if self._match is None or match_id is None:
            raise RuntimeError("no match in progress")
        summary = self._match.summary()
        self._bracket = complete_match(
            self._bracket, match_id, self._match.winner, summary.final_scores
        )
        self._match = None
        return self._bracket
