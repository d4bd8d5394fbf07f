from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from sheep_sleep.models import SleepSession
from sheep_sleep.time_utils import parse_iso_date

STREAK_MILESTONES = (3, 7, 14, 30, 60, 100)


@dataclass(frozen=True)
class StreakInfo:
    current_streak: int
    longest_streak: int
    streak_start_date: date
    is_active: bool


def calculate_streak(
    last_sleep_date: date | str,
    current_date: date | str,
    previous_streak: int,
    longest_streak: int | None = None,
) -> StreakInfo:
    """Continue, hold, or reset a streak given the last tracked sleep date.

    A session attributed to yesterday extends the streak; one attributed to
    today leaves it unchanged so repeated calls on the same day do not drift;
    any other gap resets it to zero.
    """
    last = parse_iso_date(last_sleep_date)
    current = parse_iso_date(current_date)
    previous = max(0, previous_streak)
    longest = max(previous, longest_streak or 0)
    yesterday = current - timedelta(days=1)

    if last == yesterday:
        extended = previous + 1
        return StreakInfo(
            current_streak=extended,
            longest_streak=max(longest, extended),
            streak_start_date=last,
            is_active=True,
        )

    if last == current:
        return StreakInfo(
            current_streak=previous,
            longest_streak=longest,
            streak_start_date=last,
            is_active=True,
        )

    return StreakInfo(
        current_streak=0,
        longest_streak=longest,
        streak_start_date=current,
        is_active=False,
    )


def check_streak_milestone(current_streak: int, previous_streak: int) -> int | None:
    for milestone in STREAK_MILESTONES:
        if current_streak >= milestone and previous_streak < milestone:
            return milestone
    return None


def streak_from_sessions(sessions: Iterable[SleepSession], today: date) -> int:
    """Count consecutive scored nights ending today, newest first."""
    ordered = sorted(sessions, key=lambda s: s.sleep_date, reverse=True)
    streak = 0
    for offset, session in enumerate(ordered):
        expected = today - timedelta(days=offset)
        if session.sleep_date != expected or (session.points_earned or 0) <= 0:
            break
        streak += 1
    return streak
