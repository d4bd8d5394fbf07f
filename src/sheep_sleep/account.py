from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from datetime import date, datetime

from sheep_sleep.achievements import check_achievements
from sheep_sleep.evolution import (
    DEATH_THRESHOLD,
    REVIVAL_POINTS,
    LifeStage,
    Mood,
    evolution_message,
    level_number,
    sheep_mood,
    should_evolve,
    stage_for,
)
from sheep_sleep.config import Settings
from sheep_sleep.i18n import t
from sheep_sleep.models import (
    EVENT_ACHIEVEMENT,
    EVENT_DEATH,
    EVENT_EVOLUTION,
    EVENT_MILESTONE,
    AccountEvent,
    AccountResult,
    AccountSnapshot,
    SessionFinalizedError,
    SessionResult,
    SessionStateError,
    SleepSession,
    UserSettings,
    WakeUpResult,
)
from sheep_sleep.scoring import (
    late_bedtime_penalty,
    late_wake_penalty,
    session_points,
    wake_up_summary,
)
from sheep_sleep.streaks import calculate_streak, check_streak_milestone
from sheep_sleep.time_utils import LocalClock

logger = logging.getLogger(__name__)

PET_REWARD_POINTS = 1


class SessionAccount:
    """Running totals for one user: points, streak, sheep stage.

    This is the only place where point/streak/stage state changes. Every
    public operation takes the account lock, so concurrent callers for the
    same user cannot race past the death threshold check. Separate accounts
    share nothing.
    """

    def __init__(
        self,
        total_points: int = 0,
        current_streak: int = 0,
        longest_streak: int = 0,
        stage: LifeStage | None = None,
        last_sleep_date: date | None = None,
        sessions_completed: int = 0,
        clock: LocalClock | None = None,
        tuning: Mapping[str, int] | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._clock = clock or LocalClock()
        self._tuning = dict(tuning) if tuning else None
        self._total_points = int(total_points)
        self._current_streak = max(0, int(current_streak))
        self._longest_streak = max(self._current_streak, int(longest_streak))
        self._stage = stage if stage is not None else stage_for(self._total_points)
        self._last_sleep_date = last_sleep_date
        self._sessions_completed = max(0, int(sessions_completed))
        self._mood = sheep_mood(self._total_points, self._current_streak)
        self._revived = False

    @classmethod
    def from_snapshot(
        cls,
        snapshot: AccountSnapshot,
        clock: LocalClock | None = None,
        tuning: Mapping[str, int] | None = None,
    ) -> SessionAccount:
        return cls(
            total_points=snapshot.total_points,
            current_streak=snapshot.current_streak,
            longest_streak=snapshot.longest_streak,
            stage=snapshot.stage,
            last_sleep_date=snapshot.last_sleep_date,
            sessions_completed=snapshot.sessions_completed,
            clock=clock,
            tuning=tuning,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        snapshot: AccountSnapshot | None = None,
        now_fn: Callable[[], datetime] | None = None,
    ) -> SessionAccount:
        clock = LocalClock(settings.tz, now_fn=now_fn)
        if snapshot is None:
            return cls(clock=clock, tuning=settings.scoring_tuning)
        return cls.from_snapshot(snapshot, clock=clock, tuning=settings.scoring_tuning)

    def snapshot(self) -> AccountSnapshot:
        with self._lock:
            return AccountSnapshot(
                total_points=self._total_points,
                current_streak=self._current_streak,
                longest_streak=self._longest_streak,
                stage=self._stage,
                last_sleep_date=self._last_sleep_date,
                sessions_completed=self._sessions_completed,
            )

    @property
    def total_points(self) -> int:
        return self._total_points

    @property
    def current_streak(self) -> int:
        return self._current_streak

    @property
    def longest_streak(self) -> int:
        return self._longest_streak

    @property
    def stage(self) -> LifeStage:
        return self._stage

    @property
    def mood(self) -> Mood:
        return self._mood

    @property
    def sessions_completed(self) -> int:
        return self._sessions_completed

    @property
    def alive(self) -> bool:
        # Death resets and continues; there is no frozen dead state.
        return True

    def _result(self, events: list[AccountEvent]) -> AccountResult:
        return AccountResult(
            total_points=self._total_points,
            stage=self._stage,
            streak=self._current_streak,
            mood=self._mood,
            events=events,
        )

    def _die(self, points_at_death: int) -> AccountEvent:
        logger.info("sheep died at %s points; reviving with %s", points_at_death, REVIVAL_POINTS)
        self._stage = LifeStage.BABY
        self._mood = Mood.SAD
        self._current_streak = 0
        self._total_points = REVIVAL_POINTS
        self._revived = True
        return AccountEvent(
            kind=EVENT_DEATH,
            message=t("death"),
            payload={"points_at_death": points_at_death, "revival_points": REVIVAL_POINTS},
        )

    def _apply_delta(self, delta: int) -> list[AccountEvent]:
        self._total_points += int(delta)
        logger.debug("points %+d -> %s", delta, self._total_points)

        if self._total_points <= DEATH_THRESHOLD:
            return [self._die(self._total_points)]

        self._mood = sheep_mood(self._total_points, self._current_streak)

        if self._revived:
            self._revived = False
            if self._total_points == REVIVAL_POINTS:
                return []

        if not should_evolve(self._stage, self._total_points):
            return []

        previous = self._stage
        self._stage = stage_for(self._total_points)
        self._mood = Mood.EXCITED
        direction = "up" if level_number(self._stage) > level_number(previous) else "down"
        logger.info("sheep stage %s -> %s", previous.value, self._stage.value)
        return [
            AccountEvent(
                kind=EVENT_EVOLUTION,
                message=evolution_message(self._stage),
                payload={
                    "from": previous,
                    "to": self._stage,
                    "level": level_number(self._stage),
                    "direction": direction,
                },
            )
        ]

    def _advance_streak(self, sleep_date: date, today: date) -> list[AccountEvent]:
        previous = self._current_streak
        info = calculate_streak(sleep_date, today, previous, self._longest_streak)
        self._current_streak = info.current_streak
        self._longest_streak = max(self._longest_streak, info.longest_streak)
        self._last_sleep_date = sleep_date

        milestone = check_streak_milestone(info.current_streak, previous)
        if milestone is None:
            return []
        logger.info("streak milestone reached: %s days", milestone)
        return [
            AccountEvent(
                kind=EVENT_MILESTONE,
                message=t("milestone", days=milestone),
                payload={"milestone": milestone, "streak": info.current_streak},
            )
        ]

    def add_points(self, delta: int) -> AccountResult:
        with self._lock:
            events = self._apply_delta(delta)
            return self._result(events)

    def advance_streak(self, sleep_date: date, today: date | None = None) -> AccountResult:
        with self._lock:
            events = self._advance_streak(sleep_date, today or self._clock.now().date())
            self._mood = sheep_mood(self._total_points, self._current_streak)
            return self._result(events)

    def complete_sleep_session(
        self,
        session: SleepSession,
        settings: UserSettings,
        phone_usage_minutes: float = 0,
        today: date | None = None,
    ) -> SessionResult:
        if session.is_open:
            raise SessionStateError("Sleep session must end before it is scored")
        if session.points_earned is not None:
            raise SessionFinalizedError("Sleep session already scored")

        with self._lock:
            current_day = today or self._clock.now().date()
            previous_streak = self._current_streak
            previous_stage = self._stage

            breakdown = session_points(
                session,
                settings,
                previous_streak,
                phone_usage_minutes,
                tuning=self._tuning,
            )
            milestone_events = self._advance_streak(session.sleep_date, current_day)
            self._sessions_completed += 1
            point_events = self._apply_delta(breakdown.total)

            events = list(point_events)
            if not any(e.kind == EVENT_DEATH for e in point_events):
                events.extend(milestone_events)
                for achievement in check_achievements(
                    self._total_points,
                    self._current_streak,
                    previous_streak,
                    self._sessions_completed,
                    self._stage,
                    previous_stage,
                ):
                    events.append(
                        AccountEvent(
                            kind=EVENT_ACHIEVEMENT,
                            message=f"{achievement.icon} {achievement.name}",
                            payload={"achievement": achievement},
                        )
                    )

            scored = session.with_points(breakdown.total)
            return SessionResult(
                total_points=self._total_points,
                stage=self._stage,
                streak=self._current_streak,
                mood=self._mood,
                events=events,
                breakdown=breakdown,
                session=scored,
            )

    def apply_late_bedtime_penalty(self, now: datetime | None, target_hhmm: str) -> AccountResult:
        """Deduct for starting the night after the target; ``now=None`` reads the clock."""
        moment = now or self._clock.now()
        penalty = late_bedtime_penalty(moment, target_hhmm, tuning=self._tuning)
        if penalty:
            logger.info("late bedtime penalty: -%s points", penalty)
        return self.add_points(-penalty)

    def apply_late_wake_penalty(self, alarm_fired_at: datetime, now: datetime | None = None) -> AccountResult:
        moment = now or self._clock.now()
        penalty = late_wake_penalty(alarm_fired_at, moment, tuning=self._tuning)
        if penalty:
            logger.info("late wake-up penalty: %s points", penalty)
        return self.add_points(penalty)

    def apply_wake_up(
        self,
        bedtime: datetime,
        wake_target_hhmm: str,
        alarm_fired_at: datetime,
        now: datetime | None = None,
    ) -> WakeUpResult:
        """Fold the seconds-slept reward and the late wake-up deduction in one step.

        Use instead of ``apply_late_wake_penalty`` when the night is scored this
        way; calling both deducts the late wake-up twice.
        """
        moment = now or self._clock.now()
        summary = wake_up_summary(bedtime, wake_target_hhmm, alarm_fired_at, moment, tuning=self._tuning)
        logger.info(
            "wake-up: %s sleep points, %s penalty",
            summary.sleep_points,
            summary.wake_up_penalty,
        )
        result = self.add_points(summary.total)
        return WakeUpResult(
            total_points=result.total_points,
            stage=result.stage,
            streak=result.streak,
            mood=result.mood,
            events=result.events,
            summary=summary,
        )

    def pet(self) -> AccountResult:
        return self.add_points(PET_REWARD_POINTS)
