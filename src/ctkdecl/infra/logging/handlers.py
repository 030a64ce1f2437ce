from __future__ import annotations

"""
Handler factories for the logging core.

Every handler created here is tagged, so reconfiguration removes exactly
the handlers this package installed and leaves pytest's or an embedding
application's handlers alone.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from ctkdecl.infra.logging.config import LoggingConfig

_HANDLER_TAG_ATTR: str = "_ctkdecl_handler"


def _tag_handler(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG_ATTR, True)
    return handler


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def build_sink_handlers(cfg: LoggingConfig) -> List[logging.Handler]:
    """
    Create the handlers that perform the actual output.

    They are driven by a QueueListener, never attached to a logger directly.

    Returns:
        List[logging.Handler]: Possibly empty when console is off and the
        log file cannot be opened.
    """
    level = cfg.level_number()
    sinks: List[logging.Handler] = []
    if cfg.console:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(level)
        console.setFormatter(logging.Formatter(cfg.console_fmt))
        sinks.append(_tag_handler(console))
    if cfg.log_file:
        rotating = _open_rotating_file(cfg, level)
        if rotating is not None:
            sinks.append(rotating)
    return sinks


def _open_rotating_file(cfg: LoggingConfig, level: int) -> Optional[RotatingFileHandler]:
    # A log file we cannot open downgrades to console-only output
    try:
        os.makedirs(os.path.dirname(os.path.abspath(cfg.log_file)), exist_ok=True)
        handler = RotatingFileHandler(
            cfg.log_file,
            maxBytes=int(cfg.max_bytes),
            backupCount=int(cfg.backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Log file '{cfg.log_file}' unavailable ({e}); logging to console only.\n")
        return None
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt))
    _tag_handler(handler)
    return handler


def fallback_console_handler() -> logging.Handler:
    """Plain stderr handler used when queue-based setup fails."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s (fallback) %(name)s: %(message)s"))
    return _tag_handler(handler)
