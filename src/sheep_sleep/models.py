from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from sheep_sleep.evolution import LifeStage, Mood

if TYPE_CHECKING:
    from sheep_sleep.scoring import PointsBreakdown, WakeUpSummary


EVENT_EVOLUTION = "evolution"
EVENT_DEATH = "death"
EVENT_ACHIEVEMENT = "achievement"
EVENT_MILESTONE = "milestone"


class SessionStateError(RuntimeError):
    pass


class SessionFinalizedError(SessionStateError):
    pass


@dataclass(frozen=True)
class SleepSession:
    bedtime: datetime
    sleep_date: date
    wake_time: datetime | None = None
    check_ins_missed: int = 0
    snooze_count: int = 0
    points_earned: int | None = None

    @classmethod
    def start(cls, bedtime: datetime, sleep_date: date | None = None) -> SleepSession:
        return cls(bedtime=bedtime, sleep_date=sleep_date or bedtime.date())

    @property
    def is_open(self) -> bool:
        return self.wake_time is None

    def _require_open(self) -> None:
        if not self.is_open:
            raise SessionFinalizedError("Sleep session already ended")

    def check_in(self) -> SleepSession:
        self._require_open()
        return replace(self, check_ins_missed=max(0, self.check_ins_missed - 1))

    def miss_check_in(self) -> SleepSession:
        self._require_open()
        return replace(self, check_ins_missed=self.check_ins_missed + 1)

    def snooze(self) -> SleepSession:
        self._require_open()
        return replace(self, snooze_count=self.snooze_count + 1)

    def finish(self, wake_time: datetime) -> SleepSession:
        self._require_open()
        return replace(self, wake_time=wake_time)

    def with_points(self, points: int) -> SleepSession:
        if self.is_open:
            raise SessionStateError("Sleep session must end before it is scored")
        if self.points_earned is not None:
            raise SessionFinalizedError("Sleep session already scored")
        return replace(self, points_earned=int(points))


@dataclass(frozen=True)
class UserSettings:
    bedtime_target: str
    wake_time_target: str
    notification_enabled: bool = True
    check_in_interval_minutes: int = 30


@dataclass(frozen=True)
class AccountEvent:
    kind: str
    message: str
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AccountResult:
    total_points: int
    stage: LifeStage
    streak: int
    mood: Mood
    events: list[AccountEvent]

    def has_event(self, kind: str) -> bool:
        return any(e.kind == kind for e in self.events)


@dataclass(frozen=True)
class SessionResult(AccountResult):
    breakdown: PointsBreakdown | None = None
    session: SleepSession | None = None


@dataclass(frozen=True)
class WakeUpResult(AccountResult):
    summary: WakeUpSummary | None = None


@dataclass(frozen=True)
class AccountSnapshot:
    total_points: int
    current_streak: int
    longest_streak: int
    stage: LifeStage
    last_sleep_date: date | None = None
    sessions_completed: int = 0
