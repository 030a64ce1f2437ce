from __future__ import annotations

"""
Logging lifecycle: configure once, reconfigure on demand, shut down cleanly.

The root logger only holds a QueueHandler. A QueueListener thread drains
the queue into the console and file sinks, so neither the UI thread nor
the watchdog observer thread waits on stream or disk writes.
"""

import atexit
import logging
import os
import queue
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

from ctkdecl.infra.fs import get_user_data_dir
from ctkdecl.infra.logging.config import LoggingConfig
from ctkdecl.infra.logging.handlers import (
    _is_our_handler,
    _tag_handler,
    build_sink_handlers,
    fallback_console_handler,
)

_CONFIGURED_FLAG_ATTR: str = "_ctkdecl_configured"
_QUEUE_LISTENER_ATTR: str = "_ctkdecl_queue_listener"


def get_default_log_path(file_name: str = "ctkdecl.log") -> str:
    """Log file location inside the per-user data directory."""
    return os.path.join(get_user_data_dir(), "logs", file_name)


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Route the root logger through a queue to the sinks described by `cfg`.

    A second call is ignored unless `force` is given; forcing replaces the
    handlers installed here and keeps every foreign handler.

    Args:
        cfg: Logging settings.
        force: Apply `cfg` even when logging is already configured.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    _detach(root)
    try:
        root.setLevel(cfg.level_number())
        _quiet_libraries(cfg)
        sinks = build_sink_handlers(cfg)
        if not sinks:
            return root

        records: queue.Queue[logging.LogRecord] = queue.Queue()
        listener = QueueListener(records, *sinks, respect_handler_level=True)
        listener.start()
        atexit.register(_stop_listener, listener)

        root.addHandler(_tag_handler(QueueHandler(records)))
        setattr(root, _QUEUE_LISTENER_ATTR, listener)
        setattr(root, _CONFIGURED_FLAG_ATTR, True)
    except Exception as e:
        _detach(root)
        root.setLevel(logging.INFO)
        root.addHandler(fallback_console_handler())
        root.warning(f"Logging: Queue setup failed ({e}); using a direct console handler.")
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Flush pending records and remove our handlers; configure_logging may run again."""
    root = logging.getLogger()
    _detach(root)
    setattr(root, _CONFIGURED_FLAG_ATTR, False)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _quiet_libraries(cfg: LoggingConfig) -> None:
    for name in cfg.quiet_libraries:
        lib = logging.getLogger(name)
        lib.setLevel(max(cfg.level_number(), logging.WARNING))


def _detach(root: logging.Logger) -> None:
    # Stop the listener first so queued records still reach their sinks
    _stop_listener(getattr(root, _QUEUE_LISTENER_ATTR, None))
    setattr(root, _QUEUE_LISTENER_ATTR, None)
    for handler in list(root.handlers):
        if _is_our_handler(handler):
            root.removeHandler(handler)
            handler.close()


def _stop_listener(listener: Optional[QueueListener]) -> None:
    if listener is not None and getattr(listener, "_thread", None) is not None:
        listener.stop()
