from __future__ import annotations

"""
Unit tests for the Configuration Validation Service.

Verifies coercion, clamping and strict-mode failures.
"""

import pytest

from ctkdecl.core.validator import validate_config
from ctkdecl.domain.config import MIN_POLL_INTERVAL_MS, get_default_config


def test_valid_config_passes_untouched() -> None:
    """TC-01: Verify a default configuration produces no warnings."""
    clean, warnings = validate_config(get_default_config())

    assert clean == get_default_config()
    assert warnings == []


def test_non_dict_falls_back_to_defaults() -> None:
    """TC-02: Verify a non-dict input yields defaults plus a warning."""
    clean, warnings = validate_config(["not", "a", "dict"])

    assert clean == get_default_config()
    assert len(warnings) == 1


def test_non_dict_strict_raises() -> None:
    """TC-03: Verify strict mode rejects a non-dict input."""
    with pytest.raises(TypeError):
        validate_config("oops", strict=True)


def test_enumerations_are_normalized() -> None:
    """TC-04: Verify case normalization of enumerated values."""
    clean, warnings = validate_config({"appearance_mode": " Dark ", "log_level": "debug"})

    assert clean["appearance_mode"] == "dark"
    assert clean["log_level"] == "DEBUG"
    assert warnings == []


def test_unknown_enumeration_uses_fallback() -> None:
    """TC-05: Verify an unknown theme is replaced and reported."""
    clean, warnings = validate_config({"color_theme": "purple"})

    assert clean["color_theme"] == "blue"
    assert any("color_theme" in w for w in warnings)


def test_poll_interval_is_coerced_and_clamped() -> None:
    """TC-06: Verify numeric strings are accepted and tiny intervals clamped."""
    assert validate_config({"poll_interval_ms": "250"})[0]["poll_interval_ms"] == 250

    clean, warnings = validate_config({"poll_interval_ms": 1})
    assert clean["poll_interval_ms"] == MIN_POLL_INTERVAL_MS
    assert warnings


def test_poll_interval_strict_rejects_too_small() -> None:
    """TC-07: Verify strict mode refuses to clamp."""
    with pytest.raises(ValueError):
        validate_config({"poll_interval_ms": 1}, strict=True)


def test_bool_coercion_from_strings() -> None:
    """TC-08: Verify common truthy strings are converted for log_to_file."""
    clean, warnings = validate_config({"log_to_file": "yes"})

    assert clean["log_to_file"] is True
    assert warnings


def test_unknown_keys_are_dropped() -> None:
    """TC-09: Verify keys outside the schema are removed with a warning."""
    clean, warnings = validate_config({"window_alpha": 0.5})

    assert "window_alpha" not in clean
    assert any("window_alpha" in w for w in warnings)
