"""Unit tests for Settings"""

from reunite.config import Settings


def test_gate_defaults():
    settings = Settings()

    assert settings.MATCH_MIN_SCORE == 65
    assert settings.MATCH_MIN_NAME_SIMILARITY == 4
    assert settings.GPS_PREFILTER_RADIUS_KM == 1.0


def test_environment_overrides_thresholds(monkeypatch):
    monkeypatch.setenv("MATCH_MIN_SCORE", "70")
    monkeypatch.setenv("ABUSE_REJECTION_RATIO", "0.5")

    settings = Settings()

    assert settings.MATCH_MIN_SCORE == 70
    assert settings.ABUSE_REJECTION_RATIO == 0.5


def test_only_used_settings_are_declared():
    assert "DEBUG" not in Settings.model_fields
