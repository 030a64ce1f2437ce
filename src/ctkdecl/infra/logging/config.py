from __future__ import annotations

"""
Logging Settings.

`LoggingConfig` is usually derived from the validated application config
(`log_level`, `log_to_file`) through `LoggingConfig.from_app_config`.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

# Third-party loggers that flood DEBUG output with per-event chatter
# (watchdog's observer emitters, Pillow's plugin probing).
NOISY_LIBRARIES: Tuple[str, ...] = ("watchdog", "PIL")


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings applied by configure_logging().

    Attributes:
        level: Root level name ('DEBUG', 'INFO', ...). Unknown names mean INFO.
        console: Echo records to stderr.
        log_file: Rotating log file path, or None for console only.
        max_bytes: Size at which the log file rolls over.
        backup_count: Rolled-over files kept next to the active one.
        quiet_libraries: Loggers capped at WARNING whatever the root level.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 512 * 1024
    backup_count: int = 3

    quiet_libraries: Tuple[str, ...] = NOISY_LIBRARIES

    console_fmt: str = "%(levelname)-7s %(name)s: %(message)s"
    file_fmt: str = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"
    datefmt: str = "%H:%M:%S"

    @classmethod
    def from_app_config(cls, conf: Mapping[str, Any], log_file: Optional[str] = None) -> "LoggingConfig":
        """
        Build settings from a validated application config.

        Args:
            conf: Output of validate_config().
            log_file: Path used when `log_to_file` is enabled.
        """
        return cls(
            level=str(conf.get("log_level", "INFO")),
            console=True,
            log_file=log_file if conf.get("log_to_file") else None,
        )

    def level_number(self) -> int:
        """Numeric level; anything logging does not know maps to INFO."""
        value = logging.getLevelName(str(self.level or "").strip().upper())
        return value if isinstance(value, int) else logging.INFO
