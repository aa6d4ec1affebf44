import pytest

from popdarts.config import Settings


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POPDARTS_TARGET_SCORE", "15")
    monkeypatch.setenv("POPDARTS_ADVANCED_CLOSEST", "yes")
    monkeypatch.setenv("POPDARTS_LOG_LEVEL", "debug")

    s = Settings.from_env()
    assert s.target_score == 15
    assert s.advanced_closest_tracking is True
    assert s.log_level == "DEBUG"
    assert s.match_config().target_score == 15


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("POPDARTS_TARGET_SCORE", "POPDARTS_ADVANCED_CLOSEST", "POPDARTS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    assert Settings.from_env() == Settings()


def test_bad_target_score_names_the_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POPDARTS_TARGET_SCORE", "twenty-one")
    with pytest.raises(ValueError, match="POPDARTS_TARGET_SCORE"):
        Settings.from_env()
