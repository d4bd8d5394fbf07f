from __future__ import annotations

import math
import re
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

DEFAULT_TZ = "Europe/Oslo"

_HHMM_PATTERN = re.compile(r"^(?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?$")


class InvalidTimeFormat(ValueError):
    pass


def parse_hhmm(value: str) -> time:
    match = _HHMM_PATTERN.fullmatch((value or "").strip())
    if not match:
        raise InvalidTimeFormat(f"Time must be in HH:MM format, got {value!r}")
    hour = int(match.group("hour"))
    minute = int(match.group("minute"))
    second = int(match.group("second") or 0)
    if hour > 23 or minute > 59 or second > 59:
        raise InvalidTimeFormat(f"Invalid time values: {value!r}")
    return time(hour=hour, minute=minute, second=second)


def parse_iso_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError as exc:
        raise InvalidTimeFormat(f"Date must be YYYY-MM-DD, got {value!r}") from exc


class LocalClock:
    """Wall-clock helpers pinned to one time zone.

    ``now_fn`` returns the current instant; tests pass a lambda returning a
    fixed aware datetime. Naive values coming back from ``now_fn`` are taken
    as already local.
    """

    def __init__(self, tz_name: str = DEFAULT_TZ, now_fn: Callable[[], datetime] | None = None) -> None:
        self.tz = ZoneInfo(tz_name)
        self._now_fn = now_fn

    def now(self) -> datetime:
        if self._now_fn is None:
            return datetime.now(tz=self.tz)
        current = self._now_fn()
        if current.tzinfo is None:
            return current.replace(tzinfo=self.tz)
        return current.astimezone(self.tz)

    def local_iso_now(self) -> str:
        # Offset-qualified so fromisoformat() gives back the same wall-clock fields.
        return self.now().isoformat()

    def local_date_today(self) -> str:
        return self.now().date().isoformat()

    def local_time_now(self) -> str:
        return self.now().strftime("%H:%M")

    def today_at(self, hhmm: str, on: date | None = None) -> datetime:
        target = parse_hhmm(hhmm)
        day = on or self.now().date()
        return datetime.combine(day, target, tzinfo=self.tz)

    def next_occurrence_at(self, hhmm: str) -> datetime:
        now = self.now()
        candidate = self.today_at(hhmm, on=now.date())
        if candidate <= now:
            candidate = self.today_at(hhmm, on=now.date() + timedelta(days=1))
        return candidate

    def minutes_elapsed_since(self, since: datetime | None) -> float:
        return minutes_elapsed_since(since, self.now())


def minutes_between(a: datetime, b: datetime) -> float:
    return abs((b - a).total_seconds()) / 60


def minutes_elapsed_since(since: datetime | None, now: datetime) -> float:
    if since is None:
        return math.inf
    return (now - since).total_seconds() / 60


def has_minutes_passed(since: datetime | None, minutes: float, now: datetime) -> bool:
    return minutes_elapsed_since(since, now) >= minutes


def sleep_duration_hours(bedtime: datetime, wake_time: datetime) -> float:
    return (wake_time - bedtime).total_seconds() / 3600


def is_near_bedtime(clock: LocalClock, target_hhmm: str, tolerance_minutes: int = 15) -> bool:
    return minutes_between(clock.now(), clock.today_at(target_hhmm)) <= tolerance_minutes


def bedtime_status(clock: LocalClock, target_hhmm: str) -> tuple[str, int]:
    now = clock.now()
    target = clock.today_at(target_hhmm)
    diff = minutes_between(now, target)
    if diff <= 15:
        return "perfect", round(diff)
    if now < target:
        return "until", round(diff)
    return "past", round(diff)
