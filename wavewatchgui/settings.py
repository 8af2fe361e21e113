"""Persistent viewer configuration (wavewatch.config.json).

On first launch the file is created in the OS-specific user preferences
directory with all built-in defaults.  On subsequent launches it is
loaded, merged with the current defaults so that newly added keys always
receive a value, and validated.

The config file has two sections::

    {
        "viewer": { "raster_width": 2000, "debounce_ms": 250, ... },
        "colors": { "background": "#fafaf7", ... }
    }

Locations:
    Windows : %APPDATA%\\wavewatch\\wavewatch.config.json
    macOS   : ~/Library/Application Support/wavewatch/wavewatch.config.json
    Linux   : $XDG_CONFIG_HOME/wavewatch/wavewatch.config.json
              (defaults to ~/.config/wavewatch/wavewatch.config.json)

``WAVEWATCH_CONFIG`` overrides the location.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import platform
from typing import Any

from wavewatchlib.config import (
    COLOR_KEYS,
    default_config,
    validate_colors,
    validate_param_values,
    VIEWER_PARAMS,
)
from .theme import DEFAULT_COLORS

log = logging.getLogger(__name__)

CONFIG_FILENAME = "wavewatch.config.json"


def build_defaults() -> dict[str, Any]:
    return {
        "viewer": default_config(),
        "colors": copy.deepcopy(DEFAULT_COLORS),
    }


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

def _config_dir() -> str:
    """Return the OS-specific configuration directory for wavewatch."""
    system = platform.system()
    if system == "Windows":
        base = os.environ.get("APPDATA")
        if not base:
            base = os.path.expanduser("~")
        return os.path.join(base, "wavewatch")
    elif system == "Darwin":
        return os.path.join(
            os.path.expanduser("~"),
            "Library",
            "Application Support",
            "wavewatch",
        )
    else:  # Linux / BSD / …
        base = os.environ.get("XDG_CONFIG_HOME")
        if not base:
            base = os.path.join(os.path.expanduser("~"), ".config")
        return os.path.join(base, "wavewatch")


def config_path() -> str:
    """Return the full path to the config file."""
    override = os.environ.get("WAVEWATCH_CONFIG")
    if override:
        return override
    return os.path.join(_config_dir(), CONFIG_FILENAME)


# ---------------------------------------------------------------------------
# Load / Save
# ---------------------------------------------------------------------------

def load_config() -> dict[str, Any]:
    """Load the config, creating it with defaults if needed.

    If the file is corrupt or fails validation it is backed up as
    ``*.bak`` and recreated from defaults.
    """
    path = config_path()
    defaults = build_defaults()

    if not os.path.isfile(path):
        log.info("Config file not found - creating %s", path)
        try:
            save_config(defaults)
        except OSError as exc:
            log.warning("Cannot create config (%s) - using defaults", exc)
        return copy.deepcopy(defaults)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        log.warning("Cannot read config (%s) - recreating from defaults", exc)
        _reset(path, defaults)
        return copy.deepcopy(defaults)

    if not isinstance(data, dict):
        log.warning("Config root is %s, expected object - recreating",
                    type(data).__name__)
        _reset(path, defaults)
        return copy.deepcopy(defaults)

    merged = _merge(defaults, data)

    errors = (validate_param_values(VIEWER_PARAMS, merged["viewer"])
              + validate_colors(merged["colors"]))
    if errors:
        msgs = "; ".join(e.message for e in errors)
        log.warning("Config validation failed (%s) - resetting to defaults", msgs)
        _reset(path, defaults)
        return copy.deepcopy(defaults)

    # Persist if merge introduced new keys (e.g. new defaults)
    if merged != data:
        try:
            save_config(merged)
        except OSError as exc:
            log.warning("Cannot update config (%s)", exc)

    return merged


def save_config(config: dict[str, Any]) -> str:
    """Save the config to the user preferences file.

    Returns the path written.
    """
    path = config_path()
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4, ensure_ascii=False)
        f.write("\n")

    log.info("Config saved to %s", path)
    return path


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _merge(defaults: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge known keys of *overrides* into a copy of *defaults*.

    Unknown sections and keys are dropped.
    """
    merged = copy.deepcopy(defaults)
    viewer = overrides.get("viewer")
    if isinstance(viewer, dict):
        for k, v in viewer.items():
            if k in merged["viewer"]:
                merged["viewer"][k] = v
    colors = overrides.get("colors")
    if isinstance(colors, dict):
        for k in COLOR_KEYS:
            if k in colors:
                merged["colors"][k] = colors[k]
    return merged


def _reset(path: str, defaults: dict[str, Any]) -> None:
    _backup_corrupt(path)
    try:
        save_config(defaults)
    except OSError as exc:
        log.warning("Cannot rewrite config (%s)", exc)


def _backup_corrupt(path: str) -> None:
    """Rename a corrupt config file to ``*.bak`` (best-effort)."""
    backup = path + ".bak"
    try:
        if os.path.isfile(backup):
            os.remove(backup)
        os.rename(path, backup)
        log.info("Backed up corrupt config to %s", backup)
    except OSError:
        pass
