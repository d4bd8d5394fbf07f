from __future__ import annotations

from sheep_sleep.i18n import MESSAGES, localize, normalize_language_code, t


def test_normalize_language_code() -> None:
    assert normalize_language_code("en-US") == "en"
    assert normalize_language_code("uk-UA") == "uk"
    assert normalize_language_code("de") == "en"
    assert normalize_language_code("en_GB") == "en"
    assert normalize_language_code(None) == "en"


def test_translation_fallback() -> None:
    assert "Resurrected" in t("death", "en")
    assert "Відроджена" in t("death", "uk")
    assert t("milestone", "de", days=7) == "🔥 7-day streak!"
    assert t("missing.key", "uk") == "missing.key"


def test_every_key_translated() -> None:
    assert set(MESSAGES["en"]) == set(MESSAGES["uk"])


def test_localize_formats_chosen_template() -> None:
    assert localize("uk", "Hi {n}", "Привіт {n}", n=1) == "Привіт 1"
    assert localize("uk", "Hi {n}", n=2) == "Hi 2"
    assert localize("en", "Hi {missing}") == "Hi {missing}"
