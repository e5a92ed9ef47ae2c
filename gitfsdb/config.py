"""Persistent JSON config helpers.

Stores the tree visibility defaults, the git timeout and the watch poll
interval. Malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .git import DEFAULT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

APP_NAME = "gitfsdb"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_POLL_INTERVAL_SECONDS = 2.0


@dataclass(frozen=True)
class Settings:
    show_hidden: bool = False
    hide_clean: bool = False
    git_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning(f"Ignoring unreadable config {CONFIG_PATH}: {exc}")
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Write failures are logged and otherwise ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning(f"Could not save config {CONFIG_PATH}: {exc}")


def _load_bool(data: dict[str, object], key: str, default: bool) -> bool:
    """Only explicit booleans are accepted."""
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _load_positive_float(data: dict[str, object], key: str, default: float) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if value <= 0:
        return default
    return float(value)


def load_settings() -> Settings:
    data = load_config()
    return Settings(
        show_hidden=_load_bool(data, "show_hidden", False),
        hide_clean=_load_bool(data, "hide_clean", False),
        git_timeout_seconds=_load_positive_float(data, "git_timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
        poll_interval_seconds=_load_positive_float(
            data,
            "poll_interval_seconds",
            DEFAULT_POLL_INTERVAL_SECONDS,
        ),
    )


def save_settings(settings: Settings) -> None:
    """Merge ``settings`` into the stored config, keeping unrelated keys."""
    config = load_config()
    config["show_hidden"] = bool(settings.show_hidden)
    config["hide_clean"] = bool(settings.hide_clean)
    config["git_timeout_seconds"] = float(settings.git_timeout_seconds)
    config["poll_interval_seconds"] = float(settings.poll_interval_seconds)
    save_config(config)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "Settings",
    "load_config",
    "save_config",
    "load_settings",
    "save_settings",
]
