from __future__ import annotations

from dataclasses import dataclass

from sheep_sleep.evolution import LifeStage


@dataclass(frozen=True)
class Achievement:
    id: str
    name: str
    description: str
    point_reward: int
    icon: str


@dataclass(frozen=True)
class Unlockable:
    type: str
    id: str


ACHIEVEMENTS = {
    "FIRST_SLEEP": Achievement("first_sleep", "First Sleep", "Complete your first sleep session", 10, "🌙"),
    "EARLY_BIRD": Achievement("early_bird", "Early Bird", "Sleep on time for 3 days in a row", 25, "🐦"),
    "WEEK_WARRIOR": Achievement("week_warrior", "Week Warrior", "Maintain a 7-day streak", 50, "⚔️"),
    # Catalogued but not awarded by check_achievements.
    "PERFECT_WEEK": Achievement("perfect_week", "Perfect Week", "Sleep perfectly on time for 7 days", 100, "⭐"),
    "MONTH_MASTER": Achievement("month_master", "Month Master", "Maintain a 30-day streak", 200, "👑"),
    "SHEEP_EVOLVER": Achievement("sheep_evolver", "Sheep Evolver", "Evolve your sheep to the next stage", 75, "🐑"),
}

STREAK_ACHIEVEMENTS = (
    (3, "EARLY_BIRD"),
    (7, "WEEK_WARRIOR"),
    (30, "MONTH_MASTER"),
)

ACCESSORY_UNLOCKS = (
    (50, "hat_simple"),
    (100, "scarf_cozy"),
    (150, "glasses_cute"),
    (200, "blanket_warm"),
)
THEME_UNLOCKS = (
    (7, "meadow"),
    (14, "moonlit_hill"),
    (30, "cloud_realm"),
)
SOUND_UNLOCKS = (
    (100, "alarm_harp"),
    (250, "alarm_xylophone"),
    (500, "alarm_chime"),
)


def check_achievements(
    total_points: int,
    current_streak: int,
    previous_streak: int,
    sessions_completed: int,
    stage: LifeStage,
    previous_stage: LifeStage,
) -> list[Achievement]:
    earned: list[Achievement] = []
    if sessions_completed == 1:
        earned.append(ACHIEVEMENTS["FIRST_SLEEP"])
    for days, key in STREAK_ACHIEVEMENTS:
        if current_streak >= days and previous_streak < days:
            earned.append(ACHIEVEMENTS[key])
    if stage != previous_stage:
        earned.append(ACHIEVEMENTS["SHEEP_EVOLVER"])
    return earned


def unlockable_items(total_points: int, streak: int) -> list[Unlockable]:
    items = [Unlockable("accessory", item) for need, item in ACCESSORY_UNLOCKS if total_points >= need]
    items += [Unlockable("theme", item) for need, item in THEME_UNLOCKS if streak >= need]
    items += [Unlockable("sound", item) for need, item in SOUND_UNLOCKS if total_points >= need]
    return items
