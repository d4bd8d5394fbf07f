from __future__ import annotations

from enum import Enum


class LifeStage(str, Enum):
    BABY = "baby"
    FLUFFY = "fluffy"
    DREAMY = "dreamy"
    CLOUD_GUARDIAN = "cloud_guardian"


class Mood(str, Enum):
    HAPPY = "happy"
    SAD = "sad"
    EXCITED = "excited"
    SLEEPING = "sleeping"


# Ascending; stage_for walks it from the top.
STAGE_THRESHOLDS: tuple[tuple[LifeStage, int], ...] = (
    (LifeStage.BABY, 0),
    (LifeStage.FLUFFY, 50),
    (LifeStage.DREAMY, 200),
    (LifeStage.CLOUD_GUARDIAN, 500),
)

STAGE_LEVELS = {
    LifeStage.BABY: 1,
    LifeStage.FLUFFY: 2,
    LifeStage.DREAMY: 3,
    LifeStage.CLOUD_GUARDIAN: 4,
}

STAGE_NAMES = {
    LifeStage.BABY: "Baby Sheep",
    LifeStage.FLUFFY: "Fluffy Sheep",
    LifeStage.DREAMY: "Dreamy Sheep",
    LifeStage.CLOUD_GUARDIAN: "Cloud Guardian",
}

EVOLUTION_EMOJI = {
    LifeStage.FLUFFY: "🐑✨",
    LifeStage.DREAMY: "🐑🌙",
    LifeStage.CLOUD_GUARDIAN: "🐑👑",
}

DEATH_THRESHOLD = -200
REVIVAL_POINTS = 10

HEALTH_WARNINGS = (
    (-150, "critical"),
    (-100, "warning"),
    (-50, "caution"),
)


def parse_stage(raw: str | LifeStage) -> LifeStage:
    if isinstance(raw, LifeStage):
        return raw
    value = str(raw or "").strip().lower()
    try:
        return LifeStage(value)
    except ValueError:
        raise ValueError(f"Unknown sheep stage: {raw!r}") from None


def stage_for(points: int) -> LifeStage:
    for stage, threshold in reversed(STAGE_THRESHOLDS):
        if points >= threshold:
            return stage
    # Negative totals still belong to the lowest stage.
    return LifeStage.BABY


def should_evolve(current_stage: LifeStage, points: int) -> bool:
    return stage_for(points) != current_stage


def points_to_next_stage(current_stage: LifeStage, points: int) -> int:
    stages = [stage for stage, _ in STAGE_THRESHOLDS]
    idx = stages.index(current_stage)
    if idx == len(stages) - 1:
        return 0
    next_threshold = STAGE_THRESHOLDS[idx + 1][1]
    return max(0, next_threshold - points)


def level_number(stage: LifeStage) -> int:
    return STAGE_LEVELS[stage]


def stage_name_with_level(stage: LifeStage) -> str:
    return f"{STAGE_NAMES[stage]} (Level {level_number(stage)})"


def evolution_message(new_stage: LifeStage) -> str:
    level = level_number(new_stage)
    emoji = EVOLUTION_EMOJI.get(new_stage, "🎉")
    return f"Your sheep evolved to Level {level}! {emoji}"


def sheep_mood(points: int, streak: int) -> Mood:
    if streak >= 7:
        return Mood.EXCITED
    if points < 10:
        return Mood.SAD
    return Mood.HAPPY


def health_warning(points: int) -> str | None:
    for limit, level in HEALTH_WARNINGS:
        if points <= limit:
            return level
    return None
