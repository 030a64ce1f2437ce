from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides the per-user data directory and small text I/O helpers shared by
the configuration layer, the loaders and the snapshot exporter.
"""

import os

from ctkdecl.domain import constants as const

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

WINDOWS_APP_DIR_NAME = "ctkdecl"
UNIX_APP_DIR_NAME = f".{const.APP_DIR_NAME}"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/ctkdecl
    - Linux/Mac: ~/.ctkdecl

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, WINDOWS_APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def watch_target(path: str) -> str:
    """Absolute, normalized form of a watched file path."""
    return os.path.normcase(os.path.abspath(path))


# -----------------------------------------------------------------------------
# TEXT I/O API
# -----------------------------------------------------------------------------

def read_text(path: str) -> str:
    """
    Read a UTF-8 text file (a leading BOM is tolerated).

    Raises:
        OSError: If the file cannot be opened.
        UnicodeDecodeError: If the content is not valid UTF-8.
    """
    with open(path, "r", encoding="utf-8-sig") as f:
        return f.read()


def write_text(path: str, content: str) -> None:
    """Write UTF-8 text, creating parent directories as needed."""
    parent = os.path.dirname(os.path.abspath(path))
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
