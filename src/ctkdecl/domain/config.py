from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of user preferences (appearance, reload polling,
diagnostics) as JSON in the user data directory, with default fallback.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from ctkdecl.domain import constants as const
from ctkdecl.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILENAME = "config.json"

APPEARANCE_MODES = ("system", "light", "dark")
COLOR_THEMES = ("blue", "green", "dark-blue")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
MIN_POLL_INTERVAL_MS = 10


def get_config_path() -> str:
    return os.path.join(get_user_data_dir(), CONFIG_FILENAME)


# -----------------------------------------------------------------------------
# Configuration Model (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Appearance
        "appearance_mode": "system",
        "color_theme": "blue",

        # Hot reload
        "poll_interval_ms": const.DEFAULT_POLL_INTERVAL_MS,

        # Diagnostics
        "log_level": "INFO",
        "log_to_file": False,
        "snapshot_path": const.DEFAULT_SNAPSHOT_PATH,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load preferences from disk merged over the defaults.

    Args:
        path: Explicit config file; defaults to the user data directory.

    Returns:
        Dict[str, Any]: The loaded configuration, or defaults on failure.
    """
    config_file = path or get_config_path()
    config = get_default_config()

    if not os.path.exists(config_file):
        logger.debug("Config file not found. Returning defaults.")
        return config

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            logger.warning("Corrupted config file. Resetting to defaults.")
            return config

        config.update({k: v for k, v in data.items() if k in config})
        return config

    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return get_default_config()


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> None:
    """
    Persist preferences to disk.

    Args:
        config: The configuration dictionary to save.
        path: Explicit config file; defaults to the user data directory.
    """
    config_file = path or get_config_path()
    try:
        os.makedirs(os.path.dirname(os.path.abspath(config_file)), exist_ok=True)
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(config, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_file}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
