"""Settings storage for application configuration."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


SETTINGS_PATH = Path(
    os.environ.get(
        "WINDOWSFIX_SETTINGS_PATH",
        Path.home() / ".config" / "windowsfix" / "settings.json",
    )
)

# Default values - use these constants instead of hardcoding values elsewhere
DEFAULT_EXPLORER_RESTART_DELAY_NETWORK = 3.0
DEFAULT_EXPLORER_RESTART_DELAY_GROUPING = 1.0
DEFAULT_EXPLORER_RESTART_DELAY_ICONS = 1.0
DEFAULT_QUICK_ACCESS_KEEP_PINNED = ["Desktop", "Downloads", "Pictures"]
DEFAULT_REFRESH_PER_SECOND = 10
DEFAULT_INPUT_POLL_INTERVAL = 0.05

DEFAULT_SETTINGS: dict[str, Any] = {
    "explorer_restart_delay_network": DEFAULT_EXPLORER_RESTART_DELAY_NETWORK,
    "explorer_restart_delay_grouping": DEFAULT_EXPLORER_RESTART_DELAY_GROUPING,
    "explorer_restart_delay_icons": DEFAULT_EXPLORER_RESTART_DELAY_ICONS,
    "quick_access_keep_pinned": list(DEFAULT_QUICK_ACCESS_KEEP_PINNED),
    "refresh_per_second": DEFAULT_REFRESH_PER_SECOND,
    "input_poll_interval": DEFAULT_INPUT_POLL_INTERVAL,
}


@dataclass
class SettingsStore:
    values: dict[str, Any] = field(default_factory=dict)


settings_store = SettingsStore()


def load_settings() -> None:
    settings_store.values = json.loads(json.dumps(DEFAULT_SETTINGS))
    if not SETTINGS_PATH.exists():
        return
    try:
        data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return
    if isinstance(data, dict):
        settings_store.values.update(data)


def save_settings() -> None:
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(settings_store.values, indent=2, sort_keys=True),
        encoding="utf-8",
    )


def get_setting(key: str, default: Any | None = None) -> Any:
    return settings_store.values.get(key, default)


def set_setting(key: str, value: Any) -> None:
    settings_store.values[key] = value
    save_settings()


def get_float(key: str, default: float = 0.0) -> float:
    value = get_setting(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def get_list(key: str, default: list[str] | None = None) -> list[str]:
    value = get_setting(key, default)
    if not isinstance(value, list):
        return list(default or [])
    return [str(item) for item in value]


load_settings()
