from __future__ import annotations

"""
Description File Loaders.

One loader per supported text format. Every loader has the signature
`load(path) -> Optional[WidgetNode]`: read or parse failures are logged and
reported as None so that callers can keep their previous tree. The
`parse_*` helpers work on in-memory text and raise instead.
"""

import json
import logging
import os
import tomllib
import xml.etree.ElementTree as ET
from typing import Any, Callable, Dict, List, Optional

import json5
import yaml

from ctkdecl.domain import constants as const
from ctkdecl.domain.model import WidgetNode
from ctkdecl.infra.fs import read_text

logger = logging.getLogger(__name__)

Loader = Callable[[str], Optional[WidgetNode]]


# -----------------------------------------------------------------------------
# TEXT PARSERS
# -----------------------------------------------------------------------------

def parse_json(text: str) -> WidgetNode:
    return WidgetNode.from_dict(json.loads(text))


def parse_json5(text: str) -> WidgetNode:
    return WidgetNode.from_dict(json5.loads(text))


def parse_yaml(text: str) -> WidgetNode:
    data = yaml.safe_load(text)
    if data is None:
        raise ValueError("YAML document is empty.")
    return WidgetNode.from_dict(data)


def parse_toml(text: str) -> WidgetNode:
    return WidgetNode.from_dict(tomllib.loads(text))


def parse_xml(text: str) -> WidgetNode:
    """
    Parse an XML description.

    The root element's tag is not significant. Attributes and scalar child
    elements become fields; every `<children>` element is one child, in
    document order.
    """
    return WidgetNode.from_dict(_element_to_dict(ET.fromstring(text)))


_PARSERS: Dict[str, Callable[[str], WidgetNode]] = {
    "json": parse_json,
    "json5": parse_json5,
    "yaml": parse_yaml,
    "toml": parse_toml,
    "xml": parse_xml,
}

# Exceptions raised by the parsers on malformed input
_PARSE_ERRORS = (
    ValueError,
    TypeError,
    yaml.YAMLError,
    tomllib.TOMLDecodeError,
    ET.ParseError,
)


def parse(text: str, fmt: str) -> WidgetNode:
    """
    Parse description text in the named format.

    Raises:
        ValueError: If the format is unknown or the text is not a valid tree.
    """
    parser = _PARSERS.get(fmt)
    if parser is None:
        raise ValueError(f"Unsupported description format '{fmt}'.")
    try:
        return parser(text)
    except _PARSE_ERRORS as e:
        raise ValueError(f"Invalid {fmt} description: {e}") from e


# -----------------------------------------------------------------------------
# FILE LOADERS
# -----------------------------------------------------------------------------

def _load(path: str, fmt: str) -> Optional[WidgetNode]:
    try:
        text = read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Loader: Cannot read '{path}': {e}")
        return None
    try:
        node = parse(text, fmt)
    except ValueError as e:
        logger.error(f"Loader: {e} ({path})")
        return None
    logger.debug(f"Loader: Parsed {node.count()} node(s) from '{path}' as {fmt}.")
    return node


def load_json(path: str) -> Optional[WidgetNode]:
    return _load(path, "json")


def load_json5(path: str) -> Optional[WidgetNode]:
    return _load(path, "json5")


def load_yaml(path: str) -> Optional[WidgetNode]:
    return _load(path, "yaml")


def load_toml(path: str) -> Optional[WidgetNode]:
    return _load(path, "toml")


def load_xml(path: str) -> Optional[WidgetNode]:
    return _load(path, "xml")


LOADERS: Dict[str, Loader] = {
    "json": load_json,
    "json5": load_json5,
    "yaml": load_yaml,
    "toml": load_toml,
    "xml": load_xml,
}


def format_for_path(path: str) -> Optional[str]:
    _, ext = os.path.splitext(path)
    return const.FORMAT_BY_EXTENSION.get(ext.lower())


def loader_for_path(path: str, fmt: Optional[str] = None) -> Loader:
    """
    Select a loader by explicit format name or by file extension.

    Raises:
        ValueError: If no loader matches.
    """
    name = fmt or format_for_path(path)
    if name is None or name not in LOADERS:
        raise ValueError(f"Cannot determine description format for '{path}'.")
    return LOADERS[name]


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _element_to_dict(elem: ET.Element) -> Dict[str, Any]:
    data: Dict[str, Any] = dict(elem.attrib)
    children: List[Dict[str, Any]] = []
    for sub in elem:
        if sub.tag == "children":
            children.append(_element_to_dict(sub))
        elif len(sub):
            data[sub.tag] = _element_to_dict(sub)
        else:
            data[sub.tag] = (sub.text or "").strip()
    if children:
        data["children"] = children
    return data
