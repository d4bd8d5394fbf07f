import logging
from pathlib import Path

import pytest

from sheep_sleep.config import default_user_settings, load_scoring_tuning, load_settings
from sheep_sleep.logging_setup import setup_logging
from sheep_sleep.scoring import DEFAULT_SCORING_TUNING

ENV_KEYS = ("TZ", "SHEEP_LOG_LEVEL", "SHEEP_SCORING_CONFIG", "SHEEP_CHECK_IN_INTERVAL")


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    for key in ENV_KEYS:
        # setenv first so the variable is removed again after the test even
        # when load_settings() writes it from a .env file.
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_missing_scoring_file_gives_defaults(tmp_path: Path) -> None:
    assert load_scoring_tuning(tmp_path / "nope.yaml") == DEFAULT_SCORING_TUNING


def test_scoring_file_overrides_and_bad_values(tmp_path: Path) -> None:
    cfg_file = tmp_path / "scoring.yaml"
    cfg_file.write_text(
        """
expected_check_ins: 8
late_wake_grace_seconds: ninety
phone_minutes_per_point: 10
mystery_key: 3
""".strip()
    )
    tuning = load_scoring_tuning(cfg_file)
    assert tuning["expected_check_ins"] == 8
    assert tuning["phone_minutes_per_point"] == 10
    assert tuning["late_wake_grace_seconds"] == 60
    assert "mystery_key" not in tuning


def test_non_mapping_scoring_file_gives_defaults(tmp_path: Path) -> None:
    cfg_file = tmp_path / "scoring.yaml"
    cfg_file.write_text("- 1\n- 2\n")
    assert load_scoring_tuning(cfg_file) == DEFAULT_SCORING_TUNING


def test_load_settings_defaults(clean_env: Path) -> None:
    settings = load_settings()
    assert settings.tz == "Europe/Oslo"
    assert settings.log_level == "INFO"
    assert settings.check_in_interval_minutes == 30
    assert settings.scoring_tuning == DEFAULT_SCORING_TUNING


def test_load_settings_reads_env_file(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (clean_env / ".env").write_text('TZ="America/New_York"\nSHEEP_CHECK_IN_INTERVAL=90\n# comment\n')
    (clean_env / "tuning.yaml").write_text("clock_skew_seconds: 0\n")
    monkeypatch.setenv("SHEEP_SCORING_CONFIG", str(clean_env / "tuning.yaml"))
    settings = load_settings()
    assert settings.tz == "America/New_York"
    assert settings.check_in_interval_minutes == 60
    assert settings.scoring_tuning["clock_skew_seconds"] == 0


def test_env_file_does_not_override_process_env(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (clean_env / ".env").write_text("SHEEP_LOG_LEVEL=debug\n")
    monkeypatch.setenv("SHEEP_LOG_LEVEL", "warning")
    assert load_settings().log_level == "WARNING"


def test_setup_logging_accepts_level_name(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    setup_logging("debug")
    setup_logging("bogus")
    assert calls[0]["level"] == logging.DEBUG
    assert calls[1]["level"] == logging.INFO


def test_default_user_settings_use_configured_interval(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHEEP_CHECK_IN_INTERVAL", "15")
    user = default_user_settings(load_settings(), bedtime_target="23:00")
    assert user.check_in_interval_minutes == 15
    assert user.bedtime_target == "23:00"
    assert user.wake_time_target == "07:00"
