from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the asynchronous QueueListener architecture, idempotency
of configuration, and log file rotation logic.
"""

import logging
import time
from pathlib import Path
from logging.handlers import QueueListener

import pytest

from ctkdecl.infra.logging import LoggingConfig, configure_logging, get_default_log_path, shutdown_logging
from ctkdecl.infra.logging.config import NOISY_LIBRARIES
from ctkdecl.infra.logging.core import _CONFIGURED_FLAG_ATTR, _QUEUE_LISTENER_ATTR
from ctkdecl.infra.logging.handlers import _HANDLER_TAG_ATTR


@pytest.fixture(autouse=True)
def reset_logging() -> None:
    """Clean up root logger handlers before and after each test."""
    def _reset() -> None:
        root = logging.getLogger()
        listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
        if listener and isinstance(listener, QueueListener):
            listener.stop()
            setattr(root, _QUEUE_LISTENER_ATTR, None)
        for h in list(root.handlers):
            if getattr(h, _HANDLER_TAG_ATTR, False):
                root.removeHandler(h)
                h.close()
        if hasattr(root, _CONFIGURED_FLAG_ATTR):
            delattr(root, _CONFIGURED_FLAG_ATTR)
        for name in NOISY_LIBRARIES:
            logging.getLogger(name).setLevel(logging.NOTSET)

    _reset()
    yield
    _reset()


def test_logging_idempotency() -> None:
    """TC-01: Verify that multiple config calls do not duplicate handlers."""
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    root = logging.getLogger()
    initial_handler_count = len(root.handlers)

    configure_logging(cfg)
    assert len(root.handlers) == initial_handler_count, "Handlers were duplicated."


def test_log_rotation(tmp_path: Path) -> None:
    """TC-02: Verify file rotation when size limit is exceeded."""
    log_file = tmp_path / "test_rotate.log"
    cfg = LoggingConfig(
        level="DEBUG",
        console=False,
        log_file=str(log_file),
        max_bytes=100,
        backup_count=1,
    )

    configure_logging(cfg)
    logger = logging.getLogger("test_rotate")

    for _ in range(10):
        logger.debug("Reload: This is a long log message to trigger rotation." * 5)

    # Give time for the QueueListener to process
    time.sleep(0.5)

    assert log_file.exists()
    assert (tmp_path / "test_rotate.log.1").exists(), "Rotation backup file was not created."


def test_queue_listener_architecture() -> None:
    """TC-03: Verify that the root logger uses a QueueHandler-based architecture."""
    configure_logging(LoggingConfig(level="INFO", console=True))

    root = logging.getLogger()
    tagged = [h for h in root.handlers if getattr(h, _HANDLER_TAG_ATTR, False)]

    assert len(tagged) > 0
    assert getattr(root, _QUEUE_LISTENER_ATTR) is not None


def test_force_reconfigures_level() -> None:
    """TC-04: Verify force=True replaces the existing configuration."""
    configure_logging(LoggingConfig(level="INFO", console=True))
    configure_logging(LoggingConfig(level="DEBUG", console=True), force=True)

    assert logging.getLogger().level == logging.DEBUG


def test_shutdown_allows_fresh_configuration() -> None:
    """TC-05: Verify shutdown_logging() detaches handlers and clears the flag."""
    configure_logging(LoggingConfig(level="INFO", console=True))
    shutdown_logging()

    root = logging.getLogger()
    assert not any(getattr(h, _HANDLER_TAG_ATTR, False) for h in root.handlers)
    assert getattr(root, _CONFIGURED_FLAG_ATTR) is False


def test_default_log_path_in_user_dir(tmp_path: Path, monkeypatch) -> None:
    """TC-06: Verify the default log file lives under the data directory's logs/."""
    monkeypatch.setattr("ctkdecl.infra.logging.core.get_user_data_dir", lambda: str(tmp_path))

    assert get_default_log_path() == str(tmp_path / "logs" / "ctkdecl.log")


def test_config_from_app_settings(tmp_path: Path) -> None:
    """TC-07: Verify log_level and log_to_file map onto the logging settings."""
    target = str(tmp_path / "app.log")

    enabled = LoggingConfig.from_app_config({"log_level": "DEBUG", "log_to_file": True}, target)
    disabled = LoggingConfig.from_app_config({"log_level": "WARNING", "log_to_file": False}, target)

    assert (enabled.level, enabled.log_file) == ("DEBUG", target)
    assert (disabled.level, disabled.log_file) == ("WARNING", None)


@pytest.mark.parametrize("name, expected", [
    ("debug", logging.DEBUG),
    ("WARN", logging.WARNING),
    ("", logging.INFO),
    ("LOUD", logging.INFO),
])
def test_level_names_resolve(name: str, expected: int) -> None:
    """TC-08: Verify level names are case-insensitive and unknown ones mean INFO."""
    assert LoggingConfig(level=name).level_number() == expected


def test_debug_keeps_library_loggers_at_warning() -> None:
    """TC-09: Verify watchdog chatter stays hidden when the app logs at DEBUG."""
    configure_logging(LoggingConfig(level="DEBUG", console=True))

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("watchdog").level == logging.WARNING
    assert not logging.getLogger("watchdog.observers").isEnabledFor(logging.DEBUG)
