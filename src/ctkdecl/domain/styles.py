from __future__ import annotations

"""
Style Tables and Bounded Attribute Decoders.

Converts raw description values (hex colour strings, frame style names,
integer font indices, alignment/trigger bit-masks, encoded shortcut keys)
into validated values. Every decoder returns None for input it cannot map;
callers treat None as "leave the attribute unchanged".
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from ctkdecl.domain import constants as const

_HEX_RE = re.compile(r"^(?:#|0x)([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

_PUNCTUATION_KEYSYMS: Dict[str, str] = {
    ",": "comma",
    ".": "period",
    "/": "slash",
    ";": "semicolon",
    "-": "minus",
    "=": "equal",
    "+": "plus",
    "[": "bracketleft",
    "]": "bracketright",
}


# -----------------------------------------------------------------------------
# COLOURS
# -----------------------------------------------------------------------------

def parse_hex_color(value: Optional[str]) -> Optional[str]:
    """
    Normalize a hex colour string into Tk's '#rrggbb' form.

    Args:
        value: Raw colour string ('#f00', '#ff0000' or '0xff0000').

    Returns:
        Optional[str]: Lower-case '#rrggbb' string, or None if malformed.
    """
    if not isinstance(value, str):
        return None
    m = _HEX_RE.match(value.strip())
    if not m:
        return None
    digits = m.group(1).lower()
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return f"#{digits}"


# -----------------------------------------------------------------------------
# FRAME STYLES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FrameStyle:
    """
    A named box/frame type of the toolkit.

    Attributes:
        name: Registry key used by description files.
        index: Position in the style table.
        relief: Tk relief used by plain Tk widgets.
        border_width: Border thickness in pixels.
        corner_radius: Rounding applied by customtkinter widgets.
    """
    name: str
    index: int
    relief: str
    border_width: int
    corner_radius: int = 0


def _build_frame_table() -> List[FrameStyle]:
    specs: List[Tuple[str, str, int, int]] = [
        ("NoBox", "flat", 0, 0),
        ("FlatBox", "flat", 0, 0),
        ("UpBox", "raised", 2, 0),
        ("DownBox", "sunken", 2, 0),
        ("UpFrame", "raised", 2, 0),
        ("DownFrame", "sunken", 2, 0),
        ("ThinUpBox", "raised", 1, 0),
        ("ThinDownBox", "sunken", 1, 0),
        ("ThinUpFrame", "raised", 1, 0),
        ("ThinDownFrame", "sunken", 1, 0),
        ("EngravedBox", "groove", 2, 0),
        ("EmbossedBox", "ridge", 2, 0),
        ("EngravedFrame", "groove", 2, 0),
        ("EmbossedFrame", "ridge", 2, 0),
        ("BorderBox", "solid", 1, 0),
        ("ShadowBox", "solid", 3, 0),
        ("BorderFrame", "solid", 1, 0),
        ("ShadowFrame", "solid", 3, 0),
        ("RoundedBox", "solid", 1, 8),
        ("RShadowBox", "solid", 3, 8),
        ("RoundedFrame", "solid", 1, 8),
        ("RFlatBox", "flat", 0, 8),
        ("RoundUpBox", "raised", 2, 12),
        ("RoundDownBox", "sunken", 2, 12),
        ("DiamondUpBox", "raised", 2, 0),
        ("DiamondDownBox", "sunken", 2, 0),
        ("OvalBox", "solid", 1, 16),
        ("OShadowBox", "solid", 3, 16),
        ("OvalFrame", "solid", 1, 16),
        ("OFlatFrame", "flat", 0, 16),
        ("PlasticUpBox", "raised", 1, 4),
        ("PlasticDownBox", "sunken", 1, 4),
        ("PlasticUpFrame", "raised", 1, 4),
        ("PlasticDownFrame", "sunken", 1, 4),
        ("PlasticThinUpBox", "raised", 1, 2),
        ("PlasticThinDownBox", "sunken", 1, 2),
        ("PlasticRoundUpBox", "raised", 1, 12),
        ("PlasticRoundDownBox", "sunken", 1, 12),
        ("GtkUpBox", "raised", 1, 3),
        ("GtkDownBox", "sunken", 1, 3),
        ("GtkUpFrame", "raised", 1, 3),
        ("GtkDownFrame", "sunken", 1, 3),
        ("GtkThinUpBox", "raised", 1, 2),
        ("GtkThinDownBox", "sunken", 1, 2),
        ("GtkThinUpFrame", "raised", 1, 2),
        ("GtkThinDownFrame", "sunken", 1, 2),
        ("GtkRoundUpFrame", "raised", 1, 12),
        ("GtkRoundDownFrame", "sunken", 1, 12),
        ("GleamUpBox", "raised", 1, 4),
        ("GleamDownBox", "sunken", 1, 4),
        ("GleamUpFrame", "raised", 1, 4),
        ("GleamDownFrame", "sunken", 1, 4),
        ("GleamThinUpBox", "raised", 1, 2),
        ("GleamThinDownBox", "sunken", 1, 2),
        ("GleamRoundUpBox", "raised", 1, 12),
        ("GleamRoundDownBox", "sunken", 1, 12),
    ]
    return [
        FrameStyle(name=name, index=i, relief=relief, border_width=bw, corner_radius=cr)
        for i, (name, relief, bw, cr) in enumerate(specs)
    ]


FRAME_TABLE: List[FrameStyle] = _build_frame_table()
_FRAMES_BY_NAME: Dict[str, FrameStyle] = {f.name.lower(): f for f in FRAME_TABLE}


def lookup_frame(key: Union[str, int, None]) -> Optional[FrameStyle]:
    """
    Resolve a frame style by registry name or table index.

    Names are matched case-insensitively. Integer indices (or numeric strings)
    outside the table are rejected rather than reinterpreted.

    Args:
        key: Style name (e.g. 'FlatBox') or index.

    Returns:
        Optional[FrameStyle]: The style, or None if unknown/out of range.
    """
    if key is None or isinstance(key, bool):
        return None
    if isinstance(key, int):
        return FRAME_TABLE[key] if 0 <= key < len(FRAME_TABLE) else None
    if isinstance(key, str):
        s = key.strip()
        if s.isdigit():
            return lookup_frame(int(s))
        return _FRAMES_BY_NAME.get(s.lower())
    return None


# -----------------------------------------------------------------------------
# FONTS
# -----------------------------------------------------------------------------

def lookup_font(index: Optional[int]) -> Optional[Tuple[str, str, str]]:
    """Return (family, weight, slant) for a font index, or None when out of range."""
    if index is None or isinstance(index, bool) or not isinstance(index, int):
        return None
    if 0 <= index < len(const.FONT_TABLE):
        return const.FONT_TABLE[index]
    return None


# -----------------------------------------------------------------------------
# BIT-MASK ENUMERATIONS
# -----------------------------------------------------------------------------

def validate_align(mask: Optional[int]) -> Optional[int]:
    """Accept an alignment mask only if every set bit is a known flag."""
    return _validate_mask(mask, const.ALIGN_KNOWN_BITS)


def validate_when(mask: Optional[int]) -> Optional[int]:
    """Accept a trigger mask only if every set bit is a known flag."""
    return _validate_mask(mask, const.WHEN_KNOWN_BITS)


def align_to_anchor(mask: int) -> str:
    """
    Translate an alignment mask into a Tk anchor ('n', 'sw', 'center', ...).
    """
    vertical = ""
    horizontal = ""
    if mask & const.ALIGN_TOP:
        vertical = "n"
    elif mask & const.ALIGN_BOTTOM:
        vertical = "s"
    if mask & const.ALIGN_LEFT:
        horizontal = "w"
    elif mask & const.ALIGN_RIGHT:
        horizontal = "e"
    return (vertical + horizontal) or "center"


def _validate_mask(mask: Optional[int], known: int) -> Optional[int]:
    if mask is None or isinstance(mask, bool) or not isinstance(mask, int):
        return None
    if mask < 0 or mask & ~known:
        return None
    return mask


# -----------------------------------------------------------------------------
# SHORTCUTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Shortcut:
    """
    Decoded keyboard shortcut.

    Attributes:
        code: Raw integer key code (modifier bits | key).
        sequence: Equivalent Tk event sequence, e.g. '<Control-s>'.
    """
    code: int
    sequence: str


def parse_shortcut(value: Optional[str]) -> Optional[Shortcut]:
    """
    Decode a string-encoded integer key code into a Tk binding sequence.

    Accepts decimal or '0x'-prefixed hex. The low 16 bits carry the key,
    higher bits carry Shift/Ctrl/Alt/Meta modifiers.

    Args:
        value: Encoded shortcut, e.g. '262259' (Ctrl+s) or '0x40073'.

    Returns:
        Optional[Shortcut]: Decoded shortcut, or None if malformed.
    """
    if value is None:
        return None
    try:
        code = int(str(value).strip(), 0)
    except ValueError:
        return None
    if code <= 0:
        return None

    known_mods = const.SHORTCUT_SHIFT | const.SHORTCUT_CTRL | const.SHORTCUT_ALT | const.SHORTCUT_META
    if code & ~(known_mods | const.SHORTCUT_KEY_MASK):
        return None

    key_name = _key_name(code & const.SHORTCUT_KEY_MASK)
    if key_name is None:
        return None

    mods: List[str] = []
    if code & const.SHORTCUT_CTRL:
        mods.append("Control")
    if code & const.SHORTCUT_ALT:
        mods.append("Alt")
    if code & const.SHORTCUT_META:
        mods.append("Meta")
    if code & const.SHORTCUT_SHIFT:
        mods.append("Shift")

    return Shortcut(code=code, sequence="<" + "-".join(mods + [key_name]) + ">")


def _key_name(key: int) -> Optional[str]:
    if key in const.SPECIAL_KEYS:
        return const.SPECIAL_KEYS[key]
    # Function keys F1..F12
    if 0xFFBE <= key <= 0xFFC9:
        return f"F{key - 0xFFBD}"
    if 0x21 <= key <= 0x7E:
        ch = chr(key)
        if ch.isdigit():
            # Bare digits denote mouse buttons in Tk sequences
            return f"Key-{ch}"
        if ch.isalpha():
            return ch
        return _PUNCTUATION_KEYSYMS.get(ch)
    if key == 0x20:
        return "space"
    return None
