from __future__ import annotations

"""
Configuration Validation Service.

Ensures that configuration dictionaries coming from disk or the command line
conform to the expected schema. Handles type coercion, enumerated values and
default injection so the application shell always receives usable settings.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

from ctkdecl.domain.config import (
    APPEARANCE_MODES,
    COLOR_THEMES,
    LOG_LEVELS,
    MIN_POLL_INTERVAL_MS,
    get_default_config,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on invalid values instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and a
                                          list of warnings.

    Raises:
        TypeError: In strict mode, on a type mismatch.
        ValueError: In strict mode, on an out-of-range or unknown value.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    # 2. Field Processing & Normalization
    merged["appearance_mode"] = _as_choice(
        merged.get("appearance_mode"), APPEARANCE_MODES, defaults["appearance_mode"],
        "appearance_mode", warnings, strict, lower=True,
    )
    merged["color_theme"] = _as_choice(
        merged.get("color_theme"), COLOR_THEMES, defaults["color_theme"],
        "color_theme", warnings, strict, lower=True,
    )
    merged["log_level"] = _as_choice(
        merged.get("log_level"), LOG_LEVELS, defaults["log_level"],
        "log_level", warnings, strict, lower=False,
    )
    merged["poll_interval_ms"] = _as_interval(
        merged.get("poll_interval_ms"), defaults["poll_interval_ms"], warnings, strict,
    )
    merged["log_to_file"] = _as_bool(
        merged.get("log_to_file"), defaults["log_to_file"], "log_to_file", warnings, strict,
    )
    merged["snapshot_path"] = _as_str(
        merged.get("snapshot_path"), defaults["snapshot_path"], "snapshot_path", warnings, strict,
    )

    # 3. Unknown keys are dropped
    for key in sorted(set(merged) - set(defaults)):
        warnings.append(f"Unknown config key '{key}' ignored.")
        del merged[key]

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_choice(
        value: Any,
        choices: Sequence[str],
        fallback: str,
        field: str,
        warnings: List[str],
        strict: bool,
        *,
        lower: bool,
) -> str:
    """Normalize case and check membership in an enumerated set."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip().lower() if lower else value.strip().upper()
        if v in choices:
            return v
        msg = f"Invalid field '{field}': '{value}' is not one of {', '.join(choices)}."
        if strict:
            raise ValueError(msg)
    else:
        msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_interval(value: Any, fallback: int, warnings: List[str], strict: bool) -> int:
    """Polling interval in milliseconds, clamped to the minimum."""
    if value is None:
        return fallback
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        msg = f"Invalid field 'poll_interval_ms': expected int, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    try:
        ms = int(value)
    except ValueError:
        msg = f"Invalid field 'poll_interval_ms': '{value}' is not a number."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    if ms < MIN_POLL_INTERVAL_MS:
        msg = f"Field 'poll_interval_ms' below {MIN_POLL_INTERVAL_MS} ms."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Clamped.")
        return MIN_POLL_INTERVAL_MS
    return ms
