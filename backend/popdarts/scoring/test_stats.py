from popdarts.scoring.darts import ClosestSelection, DartRef, DartState, DartStatus, RoundDarts
from popdarts.scoring.ledger import append_round, new_match_state
from popdarts.scoring.shots import SpecialtyShot
from popdarts.scoring.stats import compute_match_stats, score_progression

L = DartState(DartStatus.LANDED)
M = DartState(DartStatus.MISSED)


def test_stats_count_darts_and_rounds() -> None:
    s = new_match_state()
    s = append_round(s, RoundDarts((L, L, L), (L, M, M), ClosestSelection(1)))
    s = append_round(
        s,
        RoundDarts(
            (L, M, M),
            (
                DartState(DartStatus.LANDED, SpecialtyShot.TOWER),
                DartState(DartStatus.LANDED, SpecialtyShot.WIGGLE_NOBBER, DartRef(2, 0)),
                M,
            ),
            ClosestSelection(2),
        ),
    )

    stats = compute_match_stats(s)

    assert stats.player_1.rounds_played == 2
    assert stats.player_1.darts_landed == 4
    assert stats.player_1.darts_missed == 2
    assert stats.player_1.average_darts_per_round == 2.0
    assert stats.player_1.rounds_won == 1
    assert stats.player_1.closest_count == 1
    assert stats.player_1.highest_round == 5

    assert stats.player_2.rounds_won == 1
    assert stats.player_2.points_thrown == 1 + 15
    assert stats.player_2.specialty_shots["tower"] == 1
    assert stats.player_2.specialty_shots["wiggle-nobber"] == 1
    assert stats.player_2.specialty_shots["lippy"] == 0


def test_stats_for_empty_match() -> None:
    stats = compute_match_stats(new_match_state())
    assert stats.player_1.average_darts_per_round == 0.0
    assert stats.player_2.highest_round == 0


def test_score_progression_tracks_running_totals() -> None:
    big = RoundDarts(
        (
            DartState(DartStatus.LANDED, SpecialtyShot.T_NOBBER),
            DartState(DartStatus.LANDED, SpecialtyShot.TRIPLE_NOBBER),
            L,
        ),
        (M, M, M),
    )
    s = new_match_state()
    s = append_round(s, RoundDarts((M, M, M), (M, M, M)), washed=True)
    s = append_round(s, RoundDarts((L, M, M), (L, M, M), ClosestSelection(2)))
    s = append_round(s, big)

    assert score_progression(s) == [(0, 0), (0, 2), (21, 2)]
    assert score_progression(s)[-1] == (s.player1_score, s.player2_score)


def test_score_progression_empty_match() -> None:
    assert score_progression(new_match_state()) == []
