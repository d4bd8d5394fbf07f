from __future__ import annotations

from sheep_sleep.achievements import Achievement
from sheep_sleep.evolution import (
    EVOLUTION_EMOJI,
    STAGE_THRESHOLDS,
    health_warning,
    level_number,
    points_to_next_stage,
    stage_name_with_level,
)
from sheep_sleep.i18n import localize, t
from sheep_sleep.models import (
    EVENT_ACHIEVEMENT,
    EVENT_DEATH,
    EVENT_EVOLUTION,
    EVENT_MILESTONE,
    AccountEvent,
    AccountSnapshot,
)
from sheep_sleep.scoring import PointsBreakdown


def _bar(ratio: float, width: int = 20) -> str:
    filled = max(0, min(width, int(round(ratio * width))))
    return "█" * filled + "░" * (width - filled)


def stage_progress_ratio(snapshot: AccountSnapshot) -> float:
    thresholds = dict(STAGE_THRESHOLDS)
    floor = thresholds[snapshot.stage]
    remaining = points_to_next_stage(snapshot.stage, snapshot.total_points)
    if remaining == 0:
        return 1.0
    span = (snapshot.total_points + remaining) - floor
    return max(0.0, min(1.0, (snapshot.total_points - floor) / span))


def breakdown_message(breakdown: PointsBreakdown, lang: str = "en") -> str:
    lines = [
        localize(lang, "🌙 Sleep summary", "🌙 Підсумок сну"),
        localize(lang, "Bedtime: +{n}", "Час сну: +{n}", n=breakdown.bedtime_points),
        localize(lang, "Check-ins: +{n}", "Перевірки: +{n}", n=breakdown.check_in_points),
    ]
    if breakdown.streak_bonus:
        lines.append(localize(lang, "Streak bonus: +{n}", "Бонус серії: +{n}", n=breakdown.streak_bonus))
    if breakdown.phone_usage_penalty:
        lines.append(localize(lang, "Phone usage: -{n}", "Телефон: -{n}", n=breakdown.phone_usage_penalty))
    if breakdown.snooze_penalty:
        lines.append(localize(lang, "Snoozes: -{n}", "Відкладання: -{n}", n=breakdown.snooze_penalty))
    lines.append(localize(lang, "Total: {n} points", "Разом: {n} балів", n=breakdown.total))
    return "\n".join(lines)


def status_message(snapshot: AccountSnapshot, lang: str = "en") -> str:
    ratio = stage_progress_ratio(snapshot)
    remaining = points_to_next_stage(snapshot.stage, snapshot.total_points)
    lines = [
        f"🐑 {stage_name_with_level(snapshot.stage)}",
        localize(lang, "⭐ Points: {n}", "⭐ Бали: {n}", n=snapshot.total_points),
        f"{_bar(ratio)} {ratio * 100:.1f}%",
    ]
    if remaining:
        lines.append(localize(lang, "{n} points to next stage", "{n} балів до наступної стадії", n=remaining))
    else:
        lines.append(localize(lang, "Max stage reached", "Досягнуто максимальної стадії"))
    lines.append(
        localize(
            lang,
            "🔥 Streak: {current} (best {longest})",
            "🔥 Серія: {current} (рекорд {longest})",
            current=snapshot.current_streak,
            longest=snapshot.longest_streak,
        )
    )
    warning = health_warning(snapshot.total_points)
    if warning:
        lines.append(t(f"warning_{warning}", lang))
    return "\n".join(lines)


def event_message(event: AccountEvent, lang: str = "en") -> str:
    if event.kind == EVENT_EVOLUTION:
        stage = event.payload["to"]
        if event.payload.get("direction") == "down":
            return t("devolution", lang, level=level_number(stage))
        return t("evolution", lang, level=level_number(stage), emoji=EVOLUTION_EMOJI.get(stage, "🎉"))
    if event.kind == EVENT_DEATH:
        return t("death", lang)
    if event.kind == EVENT_MILESTONE:
        return t("milestone", lang, days=event.payload["milestone"])
    if event.kind == EVENT_ACHIEVEMENT:
        achievement: Achievement = event.payload["achievement"]
        return t("achievement", lang, icon=achievement.icon, name=achievement.name, points=achievement.point_reward)
    return event.message
