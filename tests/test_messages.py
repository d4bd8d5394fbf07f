from __future__ import annotations

from sheep_sleep.account import SessionAccount
from sheep_sleep.achievements import ACHIEVEMENTS
from sheep_sleep.evolution import LifeStage
from sheep_sleep.messages import breakdown_message, event_message, stage_progress_ratio, status_message
from sheep_sleep.models import AccountEvent, AccountSnapshot
from sheep_sleep.scoring import PointsBreakdown


def _snap(points: int, stage: LifeStage, streak: int = 0) -> AccountSnapshot:
    return AccountSnapshot(total_points=points, current_streak=streak, longest_streak=streak, stage=stage)


def test_breakdown_message_skips_zero_penalties() -> None:
    text = breakdown_message(PointsBreakdown(10, 5, 0, 0, 0, 15))
    assert "Total: 15 points" in text
    assert "Snoozes" not in text
    penalised = breakdown_message(PointsBreakdown(2, 3, 0, 1, 5, 0))
    assert "Snoozes: -5" in penalised
    assert "Phone usage: -1" in penalised


def test_status_message_shows_progress_and_warning() -> None:
    text = status_message(_snap(-120, LifeStage.BABY, streak=0))
    assert "Baby Sheep (Level 1)" in text
    assert "170 points to next stage" in text
    assert "WARNING" in text


def test_status_message_at_max_stage() -> None:
    text = status_message(_snap(900, LifeStage.CLOUD_GUARDIAN, streak=12), lang="en")
    assert "Max stage reached" in text
    assert "Streak: 12 (best 12)" in text


def test_stage_progress_ratio() -> None:
    assert stage_progress_ratio(_snap(125, LifeStage.FLUFFY)) == 0.5
    assert stage_progress_ratio(_snap(-30, LifeStage.BABY)) == 0.0
    assert stage_progress_ratio(_snap(700, LifeStage.CLOUD_GUARDIAN)) == 1.0


def test_event_messages_from_account() -> None:
    account = SessionAccount(total_points=195)
    evolution = account.add_points(10).events[0]
    assert event_message(evolution) == "Your sheep evolved to Level 3! 🐑🌙"
    assert event_message(evolution, lang="uk").startswith("Твоя вівця")

    death = SessionAccount(total_points=-199).add_points(-5).events[0]
    assert event_message(death).startswith("💀")


def test_achievement_event_message() -> None:
    event = AccountEvent(kind="achievement", message="", payload={"achievement": ACHIEVEMENTS["WEEK_WARRIOR"]})
    assert event_message(event) == "⚔️ Achievement unlocked: Week Warrior (+50)"
