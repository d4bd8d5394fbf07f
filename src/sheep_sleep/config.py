from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from sheep_sleep.models import UserSettings
from sheep_sleep.scoring import DEFAULT_SCORING_TUNING
from sheep_sleep.time_utils import DEFAULT_TZ

logger = logging.getLogger(__name__)

CHECK_IN_INTERVAL_MIN = 5
CHECK_IN_INTERVAL_MAX = 60


@dataclass(frozen=True)
class Settings:
    tz: str
    log_level: str
    scoring_config_path: Path
    check_in_interval_minutes: int
    scoring_tuning: dict[str, int]


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return
    for line in path.read_text().splitlines():
        raw = line.strip()
        if not raw or raw.startswith("#") or "=" not in raw:
            continue
        key, value = raw.split("=", maxsplit=1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def get_int(cfg: dict[str, Any], key: str, default: int, min_value: int = 0) -> int:
    try:
        value = int(cfg.get(key, default))
    except (TypeError, ValueError):
        logger.warning("invalid value for %s: %r, using %s", key, cfg.get(key), default)
        value = default
    return max(min_value, value)


def load_scoring_tuning(path: Path) -> dict[str, int]:
    tuning = dict(DEFAULT_SCORING_TUNING)
    if not path.exists():
        return tuning

    raw = yaml.safe_load(path.read_text()) or {}
    if not isinstance(raw, dict):
        logger.warning("scoring config %s is not a mapping, using defaults", path)
        return tuning

    for key, default in DEFAULT_SCORING_TUNING.items():
        tuning[key] = get_int(raw, key, default)
    unknown = sorted(set(raw) - set(DEFAULT_SCORING_TUNING))
    if unknown:
        logger.warning("ignoring unknown scoring keys: %s", ", ".join(map(str, unknown)))
    return tuning


def load_settings() -> Settings:
    _load_env_file(Path(".env"))

    tz = os.getenv("TZ", DEFAULT_TZ)
    scoring_path = Path(os.getenv("SHEEP_SCORING_CONFIG", "./scoring.yaml"))
    interval_raw = os.getenv("SHEEP_CHECK_IN_INTERVAL", "30")
    try:
        interval = int(interval_raw)
    except ValueError:
        interval = 30
    interval = min(CHECK_IN_INTERVAL_MAX, max(CHECK_IN_INTERVAL_MIN, interval))

    return Settings(
        tz=tz,
        log_level=os.getenv("SHEEP_LOG_LEVEL", "INFO").upper(),
        scoring_config_path=scoring_path,
        check_in_interval_minutes=interval,
        scoring_tuning=load_scoring_tuning(scoring_path),
    )


def default_user_settings(
    settings: Settings,
    bedtime_target: str = "22:00",
    wake_time_target: str = "07:00",
) -> UserSettings:
    """Settings for a user who has not picked their own check-in interval yet."""
    return UserSettings(
        bedtime_target=bedtime_target,
        wake_time_target=wake_time_target,
        check_in_interval_minutes=settings.check_in_interval_minutes,
    )
