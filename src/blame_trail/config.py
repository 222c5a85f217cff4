"""blame-trail configuration.

Config files:
  - Global:  ~/.config/blame-trail/config.json
  - Project: .blame-trail.json (current directory)

Merge order: defaults → global → project → environment variables (highest priority).
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict

from blame_trail.dates import DEFAULT_WINDOW, DateWindow, week_start_index
from blame_trail.sources.factory import MODES

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = Path.home() / ".config" / "blame-trail" / "blame-trail.log"


class Scope(str, Enum):
    GLOBAL = "global"
    PROJECT = "project"


def config_path(scope: Scope) -> Path:
    if scope is Scope.PROJECT:
        return Path.cwd() / ".blame-trail.json"
    return Path.home() / ".config" / "blame-trail" / "config.json"


@dataclass(frozen=True)
class Settings:
    mode: str = "line"
    max_workers: int = 8
    window: DateWindow = DEFAULT_WINDOW
    week_start: str = "sunday"
    git: str = "git"
    timeout: float = 30.0
    debug: bool = False
    log_file: Path = DEFAULT_LOG_FILE


# config key -> env var name
_ENV_OVERRIDES: list[tuple[str, str]] = [
    ("debug", "BLAME_TRAIL_DEBUG"),
    ("mode", "BLAME_TRAIL_MODE"),
    ("max_workers", "BLAME_TRAIL_MAX_WORKERS"),
    ("window", "BLAME_TRAIL_WINDOW"),
    ("log_file", "BLAME_TRAIL_LOG_FILE"),
    ("git", "BLAME_TRAIL_GIT"),
]


def _as_bool(value: Any) -> bool | None:
    """JSON booleans as-is; "true"/"false" strings case-insensitively; anything else is None."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def _read_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a JSON object", path)
        return {}
    return data


def load_config() -> Dict[str, Any]:
    """Load merged raw config: global → project → env vars."""
    merged: Dict[str, Any] = {**_read_json(config_path(Scope.GLOBAL))}
    merged.update(_read_json(config_path(Scope.PROJECT)))
    _apply_env_overrides(merged)
    return merged


def _apply_env_overrides(merged: Dict[str, Any]) -> None:
    for config_key, env_var in _ENV_OVERRIDES:
        val = os.environ.get(env_var)
        if not val:
            continue
        if config_key == "max_workers":
            try:
                merged[config_key] = int(val)
            except ValueError:
                logger.warning("Invalid %s value %r; ignoring", env_var, val)
        elif config_key == "debug":
            merged[config_key] = _as_bool(val) is True
        else:
            merged[config_key] = val


def load_settings(raw: Dict[str, Any] | None = None) -> Settings:
    """Validate merged config into Settings; bad values fall back to defaults."""
    raw = load_config() if raw is None else raw
    defaults = Settings()
    values: Dict[str, Any] = {}

    mode = raw.get("mode")
    if mode is not None:
        if mode in MODES:
            values["mode"] = mode
        else:
            logger.warning("Unknown mode %r; using %s", mode, defaults.mode)

    for key in ("max_workers", "timeout"):
        if key in raw:
            try:
                number = float(raw[key]) if key == "timeout" else int(raw[key])
            except (TypeError, ValueError):
                logger.warning("Invalid %s %r; ignoring", key, raw[key])
                continue
            if number > 0:
                values[key] = number
            else:
                logger.warning("%s must be positive, got %r; ignoring", key, raw[key])

    if "window" in raw:
        try:
            window = DateWindow(raw["window"])
        except ValueError:
            logger.warning("Unknown date window %r; using %s", raw["window"], defaults.window.value)
        else:
            if window is DateWindow.CUSTOM:
                logger.warning("custom cannot be the default window; using %s", defaults.window.value)
            else:
                values["window"] = window

    if "week_start" in raw:
        try:
            week_start_index(str(raw["week_start"]))
            values["week_start"] = str(raw["week_start"]).lower()
        except ValueError:
            logger.warning("Unknown week_start %r; ignoring", raw["week_start"])

    if raw.get("git"):
        values["git"] = str(raw["git"])
    if "debug" in raw:
        debug = _as_bool(raw["debug"])
        if debug is None:
            logger.warning("Invalid debug %r; expected true or false", raw["debug"])
        else:
            values["debug"] = debug
    if raw.get("log_file"):
        values["log_file"] = Path(str(raw["log_file"])).expanduser()

    return Settings(**{**_as_dict(defaults), **values})


def _as_dict(settings: Settings) -> Dict[str, Any]:
    return {name: getattr(settings, name) for name in Settings.__dataclass_fields__}
