from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from sheep_sleep.evolution import LifeStage
from sheep_sleep.models import AccountSnapshot, SleepSession
from sheep_sleep.records import (
    account_row,
    parse_account_row,
    parse_session_row,
    parse_settings_row,
    session_row,
)


def test_account_row_defaults_missing_fields() -> None:
    snap = parse_account_row({"total_points": 0, "sheep_stage": None})
    assert snap.stage == LifeStage.BABY
    assert snap.current_streak == 0


def test_account_row_rejects_unknown_stage() -> None:
    with pytest.raises(ValidationError):
        parse_account_row({"total_points": 12, "sheep_stage": "zombie"})


def test_account_row_round_trip() -> None:
    snap = AccountSnapshot(
        total_points=-40,
        current_streak=3,
        longest_streak=8,
        stage=LifeStage.FLUFFY,
        last_sleep_date=date(2026, 2, 4),
        sessions_completed=11,
    )
    row = account_row(snap)
    assert row["sheep_stage"] == "fluffy"
    assert row["last_sleep_date"] == "2026-02-04"
    assert parse_account_row(row) == snap


def test_longest_streak_repaired_on_load() -> None:
    snap = parse_account_row({"total_points": 5, "current_streak": 6, "longest_streak": 2, "sheep_stage": "baby"})
    assert snap.longest_streak == 6


def test_session_row_keeps_negative_counters() -> None:
    session = parse_session_row(
        {
            "id": "abc",
            "bedtime": "2026-02-04T22:05:00+01:00",
            "sleep_date": "2026-02-04",
            "check_ins_missed": -1,
            "snooze_count": 0,
        }
    )
    assert session.check_ins_missed == -1
    assert session.is_open
    assert session.bedtime == datetime(2026, 2, 4, 22, 5, tzinfo=ZoneInfo("Europe/Oslo"))


def test_session_row_round_trip() -> None:
    tz = ZoneInfo("Europe/Oslo")
    session = SleepSession(
        bedtime=datetime(2026, 2, 4, 22, 0, tzinfo=tz),
        sleep_date=date(2026, 2, 4),
        wake_time=datetime(2026, 2, 5, 7, 0, tzinfo=tz),
        snooze_count=1,
        points_earned=12,
    )
    restored = parse_session_row(session_row(session))
    assert restored.bedtime == session.bedtime
    assert restored.wake_time == session.wake_time
    assert restored.points_earned == 12


def test_settings_row_validates_times_and_interval() -> None:
    settings = parse_settings_row({"bedtime_target": "22:00:00", "wake_time_target": "07:00", "check_in_interval": 15})
    assert settings.bedtime_target == "22:00:00"
    assert settings.check_in_interval_minutes == 15
    with pytest.raises(ValidationError):
        parse_settings_row({"bedtime_target": "25:00"})
    with pytest.raises(ValidationError):
        parse_settings_row({"check_in_interval": 2})
