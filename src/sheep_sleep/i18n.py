from __future__ import annotations

from typing import Final

SUPPORTED_LANGUAGES: Final[set[str]] = {"en", "uk"}

MESSAGES: Final[dict[str, dict[str, str]]] = {
    "en": {
        "evolution": "Your sheep evolved to Level {level}! {emoji}",
        "devolution": "Your sheep shrank back to Level {level}.",
        "death": "💀 Your sheep has died from poor sleep habits! Resurrected as a baby sheep.",
        "milestone": "🔥 {days}-day streak!",
        "achievement": "{icon} Achievement unlocked: {name} (+{points})",
        "warning_caution": "😰 CAUTION: Sheep is getting sick!",
        "warning_warning": "⚠️ WARNING: Sheep is very sick!",
        "warning_critical": "💀 CRITICAL: Sheep is dying!",
    },
    "uk": {
        "evolution": "Твоя вівця еволюціонувала до Рівня {level}! {emoji}",
        "devolution": "Твоя вівця повернулася до Рівня {level}.",
        "death": "💀 Твоя вівця загинула через поганий сон! Відроджена як маленьке ягня.",
        "milestone": "🔥 Серія {days} днів!",
        "achievement": "{icon} Досягнення: {name} (+{points})",
        "warning_caution": "😰 ОБЕРЕЖНО: Вівця захворює!",
        "warning_warning": "⚠️ УВАГА: Вівця дуже хвора!",
        "warning_critical": "💀 КРИТИЧНО: Вівця помирає!",
    },
}


def normalize_language_code(raw: str | None, default: str = "en") -> str:
    # "uk-UA", "en_GB" and friends collapse to their primary subtag.
    primary = (raw or "").strip().lower().replace("_", "-").split("-", 1)[0]
    if primary in SUPPORTED_LANGUAGES:
        return primary
    return default if default in SUPPORTED_LANGUAGES else "en"


def _render(template: str, values: dict[str, object]) -> str:
    try:
        return template.format(**values)
    except (KeyError, IndexError, ValueError):
        return template


def t(key: str, lang: str = "en", **kwargs: object) -> str:
    table = MESSAGES[normalize_language_code(lang)]
    return _render(table.get(key) or MESSAGES["en"].get(key, key), kwargs)


def localize(lang: str, en: str, uk: str | None = None, **kwargs: object) -> str:
    """Pick between inline English and Ukrainian text; English when ``uk`` is missing."""
    use_uk = uk is not None and normalize_language_code(lang) == "uk"
    return _render(uk if use_uk else en, kwargs)
