from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta

from sheep_sleep.models import SleepSession, UserSettings
from sheep_sleep.time_utils import minutes_between, parse_hhmm

logger = logging.getLogger(__name__)

DEFAULT_SCORING_TUNING = {
    "expected_check_ins": 6,
    "phone_minutes_per_point": 5,
    "late_bedtime_seconds_per_point": 2,
    "late_wake_grace_seconds": 60,
    "late_wake_seconds_per_point": 5,
    "clock_skew_seconds": 5,
}

BEDTIME_PERFECT_POINTS = 10
BEDTIME_TIERS = (
    (15, 5),
    (30, 2),
)

CHECK_IN_TIERS = (
    (0.8, 5),
    (0.6, 3),
    (0.4, 1),
)

STREAK_BONUS_TIERS = (
    (30, 50),
    (14, 30),
    (7, 20),
    (3, 10),
)

SIMPLE_STREAK_THRESHOLD = 7
SIMPLE_STREAK_BONUS = 20

LEGACY_MISSED_CHECK_IN_COST = 6
LEGACY_FIRST_SNOOZE_COST = 3
LEGACY_ADDITIONAL_SNOOZE_COST = 5


@dataclass(frozen=True)
class PointsBreakdown:
    bedtime_points: int
    check_in_points: int
    streak_bonus: int
    phone_usage_penalty: int
    snooze_penalty: int
    total: int
    diagnostics: tuple[str, ...] = ()


@dataclass(frozen=True)
class WakeUpSummary:
    sleep_points: int
    wake_up_penalty: int
    total: int


@dataclass(frozen=True)
class LegacyPointsBreakdown:
    time_adherence: int
    check_ins: int
    snoozes: int
    streak_bonus: int
    total: int


def _effective_tuning(tuning: Mapping[str, int] | None = None) -> dict[str, int]:
    merged = dict(DEFAULT_SCORING_TUNING)
    if tuning:
        merged.update(tuning)
    return merged


def _anchor(hhmm: str, moment: datetime) -> datetime:
    """Resolve a daily HH:MM target on the calendar day of ``moment``."""
    return datetime.combine(moment.date(), parse_hhmm(hhmm), tzinfo=moment.tzinfo)


def _nearest_occurrence(hhmm: str, moment: datetime) -> datetime:
    """Resolve a daily HH:MM target to the occurrence closest to ``moment``.

    A 01:30 bedtime against a 22:00 target belongs to the previous evening,
    not to the 22:00 that is still twenty hours away.
    """
    same_day = _anchor(hhmm, moment)
    candidates = (same_day - timedelta(days=1), same_day, same_day + timedelta(days=1))
    return min(candidates, key=lambda c: abs((moment - c).total_seconds()))


def bedtime_adherence_points(
    actual_bedtime: datetime,
    target_hhmm: str,
    tuning: Mapping[str, int] | None = None,
) -> int:
    cfg = _effective_tuning(tuning)
    target = _nearest_occurrence(target_hhmm, actual_bedtime)
    late_seconds = (actual_bedtime - target).total_seconds()
    if late_seconds <= max(0, int(cfg["clock_skew_seconds"])):
        return BEDTIME_PERFECT_POINTS
    diff = minutes_between(target, actual_bedtime)
    for limit, points in BEDTIME_TIERS:
        if diff <= limit:
            return points
    return 0


def check_in_points(check_ins_missed: int, total_expected_check_ins: int = 6) -> int:
    if total_expected_check_ins <= 0:
        return 0
    completed = max(0, total_expected_check_ins - max(0, check_ins_missed))
    rate = completed / total_expected_check_ins
    for floor, points in CHECK_IN_TIERS:
        if rate >= floor:
            return points
    return 0


def streak_bonus_tiered(current_streak: int) -> int:
    for days, bonus in STREAK_BONUS_TIERS:
        if current_streak >= days:
            return bonus
    return 0


def streak_bonus_simple(current_streak: int) -> int:
    # Single-tier bonus of the legacy points engine; kept apart from the
    # tiered one because the two call paths score streaks differently.
    if current_streak >= SIMPLE_STREAK_THRESHOLD:
        return SIMPLE_STREAK_BONUS
    return 0


def phone_usage_penalty(minutes: float, tuning: Mapping[str, int] | None = None) -> int:
    cfg = _effective_tuning(tuning)
    per_point = max(1, int(cfg["phone_minutes_per_point"]))
    return math.floor(max(0.0, minutes) / per_point)


def snooze_penalty(snooze_count: int) -> int:
    if snooze_count <= 0:
        return 0
    if snooze_count == 1:
        return 3
    if snooze_count == 2:
        return 5
    return snooze_count * 3


def late_bedtime_penalty(now: datetime, target_hhmm: str, tuning: Mapping[str, int] | None = None) -> int:
    cfg = _effective_tuning(tuning)
    target = _anchor(target_hhmm, now)
    if now <= target:
        return 0
    late_seconds = math.floor((now - target).total_seconds())
    return late_seconds // max(1, int(cfg["late_bedtime_seconds_per_point"]))


def late_wake_penalty(alarm_fired_at: datetime, now: datetime, tuning: Mapping[str, int] | None = None) -> int:
    """Return the late wake-up deduction as a non-positive number."""
    cfg = _effective_tuning(tuning)
    grace = max(0, int(cfg["late_wake_grace_seconds"]))
    late_seconds = math.floor((now - alarm_fired_at).total_seconds())
    if late_seconds <= grace:
        return 0
    return -((late_seconds - grace) // max(1, int(cfg["late_wake_seconds_per_point"])))


def sleep_duration_points(bedtime: datetime, wake_target_hhmm: str, now: datetime) -> int:
    """One point per second slept, capped at the scheduled wake target."""
    wake_target = _anchor(wake_target_hhmm, now)
    if wake_target < bedtime:
        wake_target += timedelta(days=1)
    scheduled = (wake_target - bedtime).total_seconds()
    actual = (now - bedtime).total_seconds()
    return math.floor(max(0.0, min(actual, scheduled)))


def wake_up_summary(
    bedtime: datetime,
    wake_target_hhmm: str,
    alarm_fired_at: datetime,
    now: datetime,
    tuning: Mapping[str, int] | None = None,
) -> WakeUpSummary:
    """Points for getting out of bed: seconds slept plus the late wake-up deduction.

    This is a separate scoring path from ``session_points``; the caller decides
    which one feeds the account and folds the total through ``add_points``.
    """
    slept = sleep_duration_points(bedtime, wake_target_hhmm, now)
    penalty = late_wake_penalty(alarm_fired_at, now, tuning=tuning)
    return WakeUpSummary(sleep_points=slept, wake_up_penalty=penalty, total=slept + penalty)


def session_points(
    session: SleepSession,
    settings: UserSettings,
    current_streak: int,
    phone_usage_minutes: float = 0,
    tuning: Mapping[str, int] | None = None,
) -> PointsBreakdown:
    cfg = _effective_tuning(tuning)
    diagnostics: list[str] = []
    missed = session.check_ins_missed
    snoozes = session.snooze_count
    phone = phone_usage_minutes
    if missed < 0:
        diagnostics.append(f"check_ins_missed clamped from {missed} to 0")
        missed = 0
    if snoozes < 0:
        diagnostics.append(f"snooze_count clamped from {snoozes} to 0")
        snoozes = 0
    if phone < 0:
        diagnostics.append(f"phone_usage_minutes clamped from {phone} to 0")
        phone = 0
    for note in diagnostics:
        logger.warning("session scoring anomaly: %s", note)

    bedtime = bedtime_adherence_points(session.bedtime, settings.bedtime_target, tuning=cfg)
    check_ins = check_in_points(missed, int(cfg["expected_check_ins"]))
    streak = streak_bonus_tiered(current_streak)
    phone_penalty = phone_usage_penalty(phone, tuning=cfg)
    snooze = snooze_penalty(snoozes)
    total = max(0, bedtime + check_ins + streak - phone_penalty - snooze)
    return PointsBreakdown(
        bedtime_points=bedtime,
        check_in_points=check_ins,
        streak_bonus=streak,
        phone_usage_penalty=phone_penalty,
        snooze_penalty=snooze,
        total=total,
        diagnostics=tuple(diagnostics),
    )


def legacy_session_points(
    target_bedtime: datetime,
    actual_sleep_time: datetime,
    missed_check_ins: int,
    snooze_count: int,
    current_streak: int,
) -> LegacyPointsBreakdown:
    diff = minutes_between(target_bedtime, actual_sleep_time)
    if diff <= 0:
        adherence = BEDTIME_PERFECT_POINTS
    elif diff <= 15:
        adherence = 5
    else:
        adherence = 0

    check_ins = -(max(0, missed_check_ins) * LEGACY_MISSED_CHECK_IN_COST)

    snoozes = 0
    if snooze_count == 1:
        snoozes = -LEGACY_FIRST_SNOOZE_COST
    elif snooze_count > 1:
        snoozes = -LEGACY_FIRST_SNOOZE_COST - (snooze_count - 1) * LEGACY_ADDITIONAL_SNOOZE_COST

    bonus = streak_bonus_simple(current_streak)
    return LegacyPointsBreakdown(
        time_adherence=adherence,
        check_ins=check_ins,
        snoozes=snoozes,
        streak_bonus=bonus,
        total=adherence + check_ins + snoozes + bonus,
    )
