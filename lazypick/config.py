"""Persistent JSON config helpers.

Stores the ranking-engine command, theme, overlay geometry, and key overrides.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "lazypick"
CONFIG_FILENAME = "config.json"
CONFIG_ENV = "LAZYPICK_CONFIG"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_OVERLAY_PERCENT = 80
DEFAULT_STYLE = "monokai"


@dataclass(frozen=True)
class PickerConfig:
    """Resolved picker settings after validation."""

    engine_command: tuple[str, ...] | None = None
    theme: str | None = None
    style: str = DEFAULT_STYLE
    overlay_percent: int = DEFAULT_OVERLAY_PERCENT
    show_preview: bool = True
    async_refresh: bool = True
    navigation_keys: dict[str, str] = field(default_factory=dict)
    text_entry_keys: dict[str, str] = field(default_factory=dict)


def _config_path() -> Path:
    """Return config path, honoring the ``LAZYPICK_CONFIG`` override."""
    override = os.environ.get(CONFIG_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return CONFIG_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = _config_path()
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception as exc:
        logger.warning("ignoring unreadable config %s: %s", config_path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is logged and otherwise ignored to keep
    runtime behavior non-fatal when config cannot be written.
    """
    config_path = _config_path()
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as exc:
        logger.warning("could not write config %s: %s", config_path, exc)


def parse_engine_command(value: object) -> tuple[str, ...] | None:
    """Normalize an engine command given as a string or list of strings."""
    if isinstance(value, str):
        try:
            parts = shlex.split(value)
        except ValueError:
            return None
        return tuple(parts) or None
    if isinstance(value, (list, tuple)) and value and all(isinstance(part, str) for part in value):
        return tuple(value)
    return None


def _coerce_percent(value: object) -> int:
    """Clamp overlay percentage into ``[1, 100]``; invalid values use the default."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_OVERLAY_PERCENT
    return max(1, min(100, int(value)))


def _coerce_bool(value: object, default: bool) -> bool:
    """Only explicit booleans are accepted."""
    return value if isinstance(value, bool) else default


def _coerce_key_map(value: object) -> dict[str, str]:
    """Keep only ``{key: action}`` string pairs."""
    if not isinstance(value, dict):
        return {}
    return {
        key: action
        for key, action in value.items()
        if isinstance(key, str) and key and isinstance(action, str) and action
    }


def load_picker_config() -> PickerConfig:
    """Build a validated :class:`PickerConfig` from the persisted JSON object."""
    data = load_config()
    theme = data.get("theme")
    style = data.get("style")
    keys = data.get("keys")
    keys = keys if isinstance(keys, dict) else {}
    return PickerConfig(
        engine_command=parse_engine_command(data.get("engine_command")),
        theme=theme if isinstance(theme, str) and theme else None,
        style=style if isinstance(style, str) and style else DEFAULT_STYLE,
        overlay_percent=_coerce_percent(data.get("overlay_percent", DEFAULT_OVERLAY_PERCENT)),
        show_preview=_coerce_bool(data.get("show_preview"), True),
        async_refresh=_coerce_bool(data.get("async_refresh"), True),
        navigation_keys=_coerce_key_map(keys.get("navigation")),
        text_entry_keys=_coerce_key_map(keys.get("text_entry")),
    )


def default_config_data() -> dict[str, object]:
    """Return the JSON object written by ``lazypick --init-config``."""
    defaults = PickerConfig()
    return {
        "engine_command": None,
        "theme": "default",
        "style": defaults.style,
        "overlay_percent": defaults.overlay_percent,
        "show_preview": defaults.show_preview,
        "async_refresh": defaults.async_refresh,
        "keys": {"navigation": {}, "text_entry": {}},
    }


def config_path() -> Path:
    """Return the config file location currently in effect."""
    return _config_path()
