from popdarts.scoring.calculator import dart_value, player_dart_values, score_round
from popdarts.scoring.darts import ClosestSelection, DartRef, DartState, DartStatus, RoundDarts
from popdarts.scoring.shots import SpecialtyShot

L = DartState(DartStatus.LANDED)
M = DartState(DartStatus.MISSED)
E = DartState()


def shot(s: SpecialtyShot, target: DartRef | None = None) -> DartState:
    return DartState(DartStatus.LANDED, s, target)


def test_closest_bonus_on_first_landed_dart() -> None:
    darts = RoundDarts((L, L, L), (L, M, M), ClosestSelection(1))
    score = score_round(darts)
    assert player_dart_values(darts, 1) == (3, 1, 1)
    assert (score.player1_points, score.player2_points) == (5, 1)
    assert score.net_score == 4
    assert score.winner == 1


def test_t_nobber_cancels_closest_bonus() -> None:
    darts = RoundDarts((L, L, M), (shot(SpecialtyShot.T_NOBBER), M, M), ClosestSelection(1))
    score = score_round(darts)
    assert (score.player1_points, score.player2_points) == (2, 10)
    assert score.winner == 2


def test_inch_worm_cancels_closest_lippy_bonus() -> None:
    darts = RoundDarts(
        (shot(SpecialtyShot.LIPPY), L, M), (shot(SpecialtyShot.INCH_WORM), M, M), ClosestSelection(1)
    )
    assert player_dart_values(darts, 1) == (2, 1, 0)
    assert score_round(darts).player2_points == 11


def test_lippy_cancels_ordinary_bonus_but_keeps_its_own() -> None:
    darts = RoundDarts((L, shot(SpecialtyShot.LIPPY), M), (L, M, M), ClosestSelection(1))
    assert player_dart_values(darts, 1) == (1, 4, 0)


def test_opponent_lippy_cancels_ordinary_bonus() -> None:
    darts = RoundDarts((L, L, M), (shot(SpecialtyShot.LIPPY), M, M), ClosestSelection(1))
    score = score_round(darts)
    assert (score.player1_points, score.player2_points) == (2, 2)
    assert score.winner == 0


def test_first_ordinary_dart_skips_misses_and_specialty_shots() -> None:
    darts = RoundDarts((M, shot(SpecialtyShot.TOWER), L), (M, M, M), ClosestSelection(1))
    assert player_dart_values(darts, 1) == (0, 5, 3)


def test_wiggle_nobber_doubles_its_target() -> None:
    darts = RoundDarts(
        (L, shot(SpecialtyShot.WIGGLE_NOBBER, DartRef(1, 0)), M), (L, M, M), ClosestSelection(1)
    )
    assert player_dart_values(darts, 1) == (3, 6, 0)


def test_wiggle_nobber_uses_target_players_context() -> None:
    darts = RoundDarts(
        (shot(SpecialtyShot.WIGGLE_NOBBER, DartRef(2, 0)), M, M),
        (L, shot(SpecialtyShot.TOWER), M),
        ClosestSelection(2),
    )
    # Player 2's first ordinary dart is the closest dart (3), doubled for player 1.
    assert dart_value(darts, DartRef(1, 0)) == 6
    assert dart_value(darts, DartRef(1, 0)) == 2 * dart_value(darts, DartRef(2, 0))


def test_fixed_value_shots() -> None:
    darts = RoundDarts(
        (shot(SpecialtyShot.T_NOBBER), shot(SpecialtyShot.TRIPLE_NOBBER), shot(SpecialtyShot.FENDER_BENDER)),
        (M, M, M),
    )
    assert player_dart_values(darts, 1) == (10, 20, 2)
    assert score_round(darts).net_score == 32


def test_no_closest_means_no_bonus_and_empties_score_nothing() -> None:
    darts = RoundDarts((L, E, E), (L, L, E))
    score = score_round(darts)
    assert (score.player1_points, score.player2_points) == (1, 2)
