from __future__ import annotations

"""
Domain Constants and Static Lookup Tables.

Centralizes versioning, reload timing defaults, and the bounded enumeration
tables (fonts, alignment bits, trigger bits) that description files address
by raw integer.
"""

from typing import Dict, List, Tuple

CURRENT_VERSION = "0.3.0"
APP_DIR_NAME = "ctkdecl"

DEFAULT_POLL_INTERVAL_MS = 100
DEFAULT_SNAPSHOT_PATH = "temp.svg"
DEFAULT_WINDOW_SIZE: Tuple[int, int] = (400, 300)

# Extension -> loader format name
FORMAT_BY_EXTENSION: Dict[str, str] = {
    ".json": "json",
    ".json5": "json5",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".xml": "xml",
}

# -----------------------------------------------------------------------------
# FONT TABLE
# -----------------------------------------------------------------------------
# Index -> (family, weight, slant). Order follows the toolkit's built-in fonts.
FONT_TABLE: List[Tuple[str, str, str]] = [
    ("Helvetica", "normal", "roman"),
    ("Helvetica", "bold", "roman"),
    ("Helvetica", "normal", "italic"),
    ("Helvetica", "bold", "italic"),
    ("Courier", "normal", "roman"),
    ("Courier", "bold", "roman"),
    ("Courier", "normal", "italic"),
    ("Courier", "bold", "italic"),
    ("Times", "normal", "roman"),
    ("Times", "bold", "roman"),
    ("Times", "normal", "italic"),
    ("Times", "bold", "italic"),
    ("Symbol", "normal", "roman"),
    ("Fixed", "normal", "roman"),
    ("Fixed", "bold", "roman"),
    ("Dingbats", "normal", "roman"),
]

# -----------------------------------------------------------------------------
# ALIGNMENT BITS
# -----------------------------------------------------------------------------
ALIGN_CENTER = 0
ALIGN_TOP = 1
ALIGN_BOTTOM = 2
ALIGN_LEFT = 4
ALIGN_RIGHT = 8
ALIGN_INSIDE = 16
ALIGN_TEXT_OVER_IMAGE = 32
ALIGN_CLIP = 64
ALIGN_WRAP = 128
ALIGN_IMAGE_NEXT_TO_TEXT = 256
ALIGN_TEXT_NEXT_TO_IMAGE = 512
ALIGN_IMAGE_BACKDROP = 1024

ALIGN_KNOWN_BITS = 2047

# -----------------------------------------------------------------------------
# TRIGGER (WHEN) BITS
# -----------------------------------------------------------------------------
WHEN_NEVER = 0
WHEN_CHANGED = 1
WHEN_NOT_CHANGED = 2
WHEN_RELEASE = 4
WHEN_ENTER_KEY = 8

WHEN_KNOWN_BITS = 15

# -----------------------------------------------------------------------------
# SHORTCUT MODIFIER BITS
# -----------------------------------------------------------------------------
SHORTCUT_SHIFT = 0x00010000
SHORTCUT_CTRL = 0x00040000
SHORTCUT_ALT = 0x00080000
SHORTCUT_META = 0x00400000
SHORTCUT_KEY_MASK = 0x0000FFFF

# Non-printable key codes understood by the shortcut decoder
SPECIAL_KEYS: Dict[int, str] = {
    0xFF08: "BackSpace",
    0xFF09: "Tab",
    0xFF0D: "Return",
    0xFF1B: "Escape",
    0xFF50: "Home",
    0xFF51: "Left",
    0xFF52: "Up",
    0xFF53: "Right",
    0xFF54: "Down",
    0xFF55: "Prior",
    0xFF56: "Next",
    0xFF57: "End",
    0xFF63: "Insert",
    0xFFFF: "Delete",
}
