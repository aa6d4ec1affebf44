from __future__ import annotations

import logging
from dataclasses import replace

from popdarts.bracket.models import BracketMatch, TournamentBracket
from popdarts.scoring.game import Player
from popdarts.scoring.ledger import MatchState

_LOG = logging.getLogger(__name__)


def _clear_paused(bracket: TournamentBracket) -> TournamentBracket:
    paused = bracket.paused_match
    if paused is None:
        return bracket
    _LOG.warning("discarding paused match %s", paused.id)
    return bracket.with_match(replace(paused, paused_state=None))


def start_match(bracket: TournamentBracket, match_id: str) -> TournamentBracket | None:
    """
    Mark a match as the one being played. Returns None (no-op) when a slot is
    still empty, holds a bye, or the match is already completed.
    """
    m = bracket.match(match_id)
    if not m.is_ready or m.completed:
        _LOG.debug("match %s cannot be started", match_id)
        return None
    return replace(_clear_paused(bracket), active_match_id=match_id)


def pause_match(
    bracket: TournamentBracket, match_id: str, state: MatchState
) -> TournamentBracket:
    m = bracket.match(match_id)
    if m.completed:
        raise RuntimeError("match is already completed")
    paused = bracket.paused_match
    if paused is not None and paused.id != match_id:
        raise RuntimeError(f"match {paused.id} is already paused")

    updated = bracket.with_match(replace(m, paused_state=state))
    _LOG.info("match %s paused at %d-%d", match_id, state.player1_score, state.player2_score)
    return replace(updated, active_match_id=None)


def resume_match(
    bracket: TournamentBracket, match_id: str
) -> tuple[TournamentBracket, MatchState] | None:
    """
    Take a paused match back into play. Returns the updated bracket and the
    match state to continue from, or None when the match is not paused.
    """
    m = bracket.match(match_id)
    if m.paused_state is None or m.completed:
        return None
    updated = bracket.with_match(replace(m, paused_state=None))
    return replace(updated, active_match_id=match_id), m.paused_state


def complete_match(
    bracket: TournamentBracket,
    match_id: str,
    winner: Player,
    final_scores: tuple[int, int],
) -> TournamentBracket:
    """
    Record a result and move the winner into the slot of the next-round match
    fed by this one.
    """
    m = bracket.match(match_id)
    if m.completed:
        raise RuntimeError("match is already completed")
    if not m.is_ready:
        raise RuntimeError("match is missing a player")
    if winner != m.player1 and winner != m.player2:
        raise ValueError("winner must be one of the match players")

    done = replace(
        m,
        winner=winner,
        player1_score=final_scores[0],
        player2_score=final_scores[1],
        completed=True,
        paused_state=None,
    )
    updated = bracket.with_match(done)

    if m.round < bracket.total_rounds:
        for nxt in updated.rounds[m.round]:
            if nxt.source_match1_id == m.id:
                updated = updated.with_match(replace(nxt, player1=winner))
            elif nxt.source_match2_id == m.id:
                updated = updated.with_match(replace(nxt, player2=winner))
    else:
        _LOG.info("tournament champion: %s", winner.name)

    _LOG.info("match %s won by %s (%d-%d)", m.id, winner.name, *final_scores)
    if updated.active_match_id == match_id:
        updated = replace(updated, active_match_id=None)
    return updated


def next_playable_match(bracket: TournamentBracket) -> BracketMatch | None:
    for m in bracket.matches():
        if m.is_ready and not m.completed:
            return m
    return None
