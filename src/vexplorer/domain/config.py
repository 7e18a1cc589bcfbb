from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of user preferences using JSON in the
per-user data directory. Unknown or corrupted files fall back to the
defaults; missing keys are filled from the defaults on every load.
"""

import json
import logging
import os
from typing import Any, Dict

from vexplorer.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_ARCHIVE_NAME,
    DEFAULT_FILE_NAME,
    DEFAULT_FOLDER_NAME,
    DEFAULT_TTL_HOURS,
    SNAPSHOT_DB_FILENAME,
)
from vexplorer.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE = os.path.join(get_user_data_dir(), "config.json")


def get_default_settings() -> Dict[str, Any]:
    """
    Generate the default application settings.

    Returns:
        Dict[str, Any]: Default settings values.
    """
    return {
        "snapshot_ttl_hours": DEFAULT_TTL_HOURS,
        "archive_name": DEFAULT_ARCHIVE_NAME,
        "default_file_name": DEFAULT_FILE_NAME,
        "default_folder_name": DEFAULT_FOLDER_NAME,
        "log_level": "INFO",
        "skip_hidden": False,
        "log_file": "",
    }


def get_default_app_state() -> Dict[str, Any]:
    """
    Generate the complete default structure stored in config.json.

    Returns:
        Dict[str, Any]: Versioned configuration document.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,
        "app_settings": get_default_settings(),
    }


def get_snapshot_db_path() -> str:
    """Default location of the session snapshot database."""
    return os.path.join(get_user_data_dir(), SNAPSHOT_DB_FILENAME)

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_app_state() -> Dict[str, Any]:
    """
    Load the configuration document from disk.

    Returns:
        Dict[str, Any]: The loaded state merged over defaults, or the
        defaults on any failure.
    """
    default_state = get_default_app_state()

    if not os.path.exists(CONFIG_FILE):
        logger.debug("Config file not found. Returning defaults.")
        return default_state

    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return default_state

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return default_state

    settings = data.get("app_settings")
    if isinstance(settings, dict):
        default_state["app_settings"].update(settings)

    default_state["version"] = CURRENT_CONFIG_VERSION
    return default_state


def save_app_state(state: Dict[str, Any]) -> None:
    """
    Persist the configuration document to disk.

    Args:
        state: The document to save.
    """
    try:
        os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
        state["version"] = CURRENT_CONFIG_VERSION
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {CONFIG_FILE}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")

# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------
def load_settings() -> Dict[str, Any]:
    """
    Retrieve the active settings directly.
    """
    return load_app_state()["app_settings"]


def save_settings(settings: Dict[str, Any]) -> None:
    """
    Merge and persist the provided settings.
    """
    state = load_app_state()
    state["app_settings"].update(settings)
    save_app_state(state)

# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------
_TRUE_WORDS = ("1", "true", "yes", "on")
_FALSE_WORDS = ("0", "false", "no", "off")


def coerce_setting(key: str, raw: str) -> Any:
    """
    Convert a textual value to the type of the setting's default.

    Args:
        key: Setting name (must exist in the defaults).
        raw: Value as typed by the user.

    Returns:
        Any: The typed value.

    Raises:
        KeyError: If the setting is unknown.
        ValueError: If raw does not fit the setting's type.
    """
    defaults = get_default_settings()
    if key not in defaults:
        raise KeyError(key)

    default = defaults[key]
    text = raw.strip()
    if isinstance(default, bool):
        lowered = text.lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
        raise ValueError(f"'{key}' expects a boolean, got {raw!r}")
    if isinstance(default, (int, float)):
        value = float(text)
        if value < 0:
            raise ValueError(f"'{key}' must not be negative")
        return int(value) if isinstance(default, int) and value.is_integer() else value
    return text
