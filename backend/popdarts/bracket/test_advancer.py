import random
from dataclasses import replace

import pytest

from popdarts.bracket.advancer import (
    complete_match,
    next_playable_match,
    pause_match,
    resume_match,
    start_match,
)
from popdarts.bracket.builder import build_bracket
from popdarts.bracket.models import BYE, TournamentBracket
from popdarts.scoring.darts import ClosestSelection, DartState, DartStatus, RoundDarts
from popdarts.scoring.game import Player
from popdarts.scoring.ledger import append_round, new_match_state


class _NoShuffle(random.Random):
    def shuffle(self, x) -> None:
        pass


PLAYERS = [Player(f"P{i}") for i in range(4)]


def four_player_bracket() -> TournamentBracket:
    return build_bracket(PLAYERS, rng=_NoShuffle())


def test_start_rejects_unfilled_bye_and_completed_matches() -> None:
    b = four_player_bracket()
    assert start_match(b, "r2-m0") is None

    with_bye = b.with_match(replace(b.match("r1-m0"), player2=BYE))
    assert start_match(with_bye, "r1-m0") is None

    done = complete_match(b, "r1-m0", PLAYERS[0], (21, 5))
    assert start_match(done, "r1-m0") is None

    started = start_match(b, "r1-m0")
    assert started is not None
    assert started.active_match_id == "r1-m0"


def test_unknown_match_id() -> None:
    with pytest.raises(KeyError):
        start_match(four_player_bracket(), "r9-m9")


def test_winners_propagate_to_the_final() -> None:
    b = four_player_bracket()
    b = complete_match(b, "r1-m0", PLAYERS[1], (12, 21))
    b = complete_match(b, "r1-m1", PLAYERS[2], (21, 20))

    final = b.match("r2-m0")
    assert (final.player1, final.player2) == (PLAYERS[1], PLAYERS[2])
    assert b.match("r1-m0").completed
    assert (b.match("r1-m0").player1_score, b.match("r1-m0").player2_score) == (12, 21)
    assert not b.is_complete
    assert next_playable_match(b) == final

    b = complete_match(b, "r2-m0", PLAYERS[2], (3, 21))
    assert b.is_complete
    assert b.champion == PLAYERS[2]
    assert next_playable_match(b) is None


def test_bye_player_waits_in_round_two() -> None:
    ps = [Player(f"P{i}") for i in range(5)]
    b = build_bracket(ps, rng=_NoShuffle())
    b = complete_match(b, "r1-m0", ps[3], (0, 21))
    assert (b.match("r2-m0").player1, b.match("r2-m0").player2) == (ps[3], ps[0])


def test_complete_rejects_bad_results() -> None:
    b = four_player_bracket()
    with pytest.raises(ValueError):
        complete_match(b, "r1-m0", PLAYERS[3], (21, 0))
    with pytest.raises(RuntimeError):
        complete_match(b, "r2-m0", PLAYERS[0], (21, 0))
    b = complete_match(b, "r1-m0", PLAYERS[0], (21, 0))
    with pytest.raises(RuntimeError):
        complete_match(b, "r1-m0", PLAYERS[0], (21, 0))


def test_pause_and_resume_keep_the_match_state() -> None:
    L = DartState(DartStatus.LANDED)
    M = DartState(DartStatus.MISSED)
    state = append_round(new_match_state(), RoundDarts((L, L, M), (M, M, M), ClosestSelection(1)))

    b = start_match(four_player_bracket(), "r1-m0")
    b = pause_match(b, "r1-m0", state)
    assert b.active_match_id is None
    assert b.match("r1-m0").paused_scores == (4, 0)
    assert not b.match("r1-m0").completed

    with pytest.raises(RuntimeError):
        pause_match(b, "r1-m1", new_match_state())

    assert resume_match(b, "r1-m1") is None
    resumed, restored = resume_match(b, "r1-m0")
    assert restored == state
    assert resumed.active_match_id == "r1-m0"
    assert resumed.paused_match is None


def test_starting_another_match_discards_paused_one() -> None:
    b = pause_match(four_player_bracket(), "r1-m0", new_match_state())
    b = start_match(b, "r1-m1")
    assert b.paused_match is None
    assert b.active_match_id == "r1-m1"


def test_completing_clears_pause() -> None:
    b = pause_match(four_player_bracket(), "r1-m0", new_match_state())
    b = complete_match(b, "r1-m0", PLAYERS[0], (21, 4))
    assert b.match("r1-m0").paused_state is None
