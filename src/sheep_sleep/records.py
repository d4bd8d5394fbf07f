"""Persisted shapes of the account, sleep sessions and user settings.

Rows coming back from storage are validated here, so an unknown sheep stage
or a malformed HH:MM target fails at load time instead of deep inside the
scoring code.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sheep_sleep.evolution import LifeStage, parse_stage
from sheep_sleep.models import AccountSnapshot, SleepSession, UserSettings
from sheep_sleep.time_utils import parse_hhmm


class AccountRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    total_points: int = 0
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    sheep_stage: LifeStage = LifeStage.BABY
    last_sleep_date: date | None = None
    sessions_completed: int = Field(default=0, ge=0)

    @field_validator("sheep_stage", mode="before")
    @classmethod
    def _validate_stage(cls, v: Any) -> LifeStage:
        if v is None or v == "":
            return LifeStage.BABY
        return parse_stage(v)


class SleepSessionRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    bedtime: datetime
    sleep_date: date
    wake_time: datetime | None = None
    # Negative counters are accepted and clamped by the scoring code.
    check_ins_missed: int = 0
    snooze_count: int = 0
    points_earned: int | None = None


class UserSettingsRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    bedtime_target: str = "22:00"
    wake_time_target: str = "07:00"
    notification_enabled: bool = True
    check_in_interval: int = Field(default=30, ge=5, le=60)

    @field_validator("bedtime_target", "wake_time_target")
    @classmethod
    def _validate_hhmm(cls, v: str) -> str:
        parse_hhmm(v)
        return v


def parse_account_row(row: dict[str, Any]) -> AccountSnapshot:
    record = AccountRecord.model_validate(row)
    return AccountSnapshot(
        total_points=record.total_points,
        current_streak=record.current_streak,
        longest_streak=max(record.longest_streak, record.current_streak),
        stage=record.sheep_stage,
        last_sleep_date=record.last_sleep_date,
        sessions_completed=record.sessions_completed,
    )


def account_row(snapshot: AccountSnapshot) -> dict[str, Any]:
    record = AccountRecord(
        total_points=snapshot.total_points,
        current_streak=snapshot.current_streak,
        longest_streak=snapshot.longest_streak,
        sheep_stage=snapshot.stage,
        last_sleep_date=snapshot.last_sleep_date,
        sessions_completed=snapshot.sessions_completed,
    )
    return record.model_dump(mode="json")


def parse_session_row(row: dict[str, Any]) -> SleepSession:
    record = SleepSessionRecord.model_validate(row)
    return SleepSession(
        bedtime=record.bedtime,
        sleep_date=record.sleep_date,
        wake_time=record.wake_time,
        check_ins_missed=record.check_ins_missed,
        snooze_count=record.snooze_count,
        points_earned=record.points_earned,
    )


def session_row(session: SleepSession) -> dict[str, Any]:
    record = SleepSessionRecord(
        bedtime=session.bedtime,
        sleep_date=session.sleep_date,
        wake_time=session.wake_time,
        check_ins_missed=session.check_ins_missed,
        snooze_count=session.snooze_count,
        points_earned=session.points_earned,
    )
    return record.model_dump(mode="json")


def parse_settings_row(row: dict[str, Any]) -> UserSettings:
    record = UserSettingsRecord.model_validate(row)
    return UserSettings(
        bedtime_target=record.bedtime_target,
        wake_time_target=record.wake_time_target,
        notification_enabled=record.notification_enabled,
        check_in_interval_minutes=record.check_in_interval,
    )
