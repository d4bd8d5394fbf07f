from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from sheep_sleep.models import SessionFinalizedError, SessionStateError, SleepSession


def _dt(h: int, minute: int = 0) -> datetime:
    return datetime(2026, 2, 4, h, minute, tzinfo=ZoneInfo("Europe/Oslo"))


def test_start_attributes_session_to_bedtime_date() -> None:
    session = SleepSession.start(_dt(22, 30))
    assert session.sleep_date == date(2026, 2, 4)
    assert session.is_open
    assert session.points_earned is None


def test_check_in_floors_at_zero() -> None:
    session = SleepSession.start(_dt(22)).miss_check_in().check_in().check_in()
    assert session.check_ins_missed == 0


def test_snooze_counts_up() -> None:
    session = SleepSession.start(_dt(22)).snooze().snooze()
    assert session.snooze_count == 2


def test_finished_session_is_immutable() -> None:
    session = SleepSession.start(_dt(22)).finish(_dt(22) + timedelta(hours=8))
    with pytest.raises(SessionFinalizedError):
        session.snooze()
    with pytest.raises(SessionFinalizedError):
        session.check_in()
    with pytest.raises(SessionFinalizedError):
        session.finish(_dt(23))


def test_points_recorded_once_after_finish() -> None:
    open_session = SleepSession.start(_dt(22))
    with pytest.raises(SessionStateError):
        open_session.with_points(10)
    scored = open_session.finish(_dt(22) + timedelta(hours=8)).with_points(12)
    assert scored.points_earned == 12
    with pytest.raises(SessionFinalizedError):
        scored.with_points(3)
