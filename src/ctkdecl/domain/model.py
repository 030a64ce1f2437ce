from __future__ import annotations

"""
Widget Description Model.

Defines the recursive, serializable record that describes a widget tree.
A tree is produced once by a loader, consumed once by the factory, and never
mutated afterwards; reloads always produce a fresh tree.
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

# Serialized key of the type tag; 'kind' is accepted as an alias on input.
KIND_KEY = "widget"
KIND_ALIASES = ("widget", "kind")

_TRUE_STRINGS = ("true", "1", "yes", "on")
_FALSE_STRINGS = ("false", "0", "no", "off")


# -----------------------------------------------------------------------------
# CORE DATA MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class WidgetNode:
    """
    One node of a declarative widget tree.

    Only `kind` is required; every other attribute is optional and left as
    None when absent. Children are kept in document order, which is also the
    construction and tab order.

    Attributes:
        kind: Type tag resolved against the widget registry.
        children: Ordered child nodes (empty for leaf kinds).
    """
    kind: str

    # Identity and labelling
    id: Optional[str] = None
    label: Optional[str] = None
    tooltip: Optional[str] = None

    # Geometry
    x: Optional[int] = None
    y: Optional[int] = None
    w: Optional[int] = None
    h: Optional[int] = None
    fixed: Optional[int] = None

    # Flexible container spacing
    margin: Optional[int] = None
    left: Optional[int] = None
    top: Optional[int] = None
    right: Optional[int] = None
    bottom: Optional[int] = None
    pad: Optional[int] = None

    # Visuals
    color: Optional[str] = None
    labelcolor: Optional[str] = None
    selectioncolor: Optional[str] = None
    textcolor: Optional[str] = None
    image: Optional[str] = None
    deimage: Optional[str] = None
    labelfont: Optional[int] = None
    labelsize: Optional[int] = None
    textfont: Optional[int] = None
    textsize: Optional[int] = None
    frame: Optional[str] = None
    downframe: Optional[str] = None
    align: Optional[int] = None
    when: Optional[int] = None

    # Behaviour
    shortcut: Optional[str] = None
    resizable: Optional[bool] = None
    hide: Optional[bool] = None
    deactivate: Optional[bool] = None
    visible: Optional[bool] = None

    # Numeric range controls
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    step: Optional[float] = None
    slidersize: Optional[float] = None

    children: Tuple["WidgetNode", ...] = field(default_factory=tuple)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WidgetNode":
        """
        Build a node (and its subtree) from a deserialized mapping.

        Scalar values are coerced to the field type so that text-only formats
        (XML) produce the same tree as typed formats. Values that cannot be
        coerced are dropped with a debug log; unknown keys are ignored.

        Args:
            data: Mapping produced by a format parser.

        Returns:
            WidgetNode: The parsed node.

        Raises:
            ValueError: If the mapping has no usable type tag.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Widget description must be a mapping, got {type(data).__name__}.")

        kind = None
        for key in KIND_ALIASES:
            if data.get(key) is not None:
                kind = str(data[key]).strip()
                break
        if not kind:
            raise ValueError("Widget description is missing its 'widget' type tag.")

        kwargs: Dict[str, Any] = {"kind": kind}
        for key, value in data.items():
            if key in KIND_ALIASES or value is None:
                continue
            if key == "children":
                kwargs["children"] = tuple(
                    cls.from_dict(c) for c in _as_child_list(value) if _has_kind(c)
                )
                continue
            target = _FIELD_TYPES.get(key)
            if target is None:
                logger.debug(f"Model: Ignoring unknown attribute '{key}' on '{kind}'.")
                continue
            coerced = _coerce(value, target)
            if coerced is None:
                logger.debug(f"Model: Dropping '{key}'={value!r} on '{kind}' (expected {target}).")
                continue
            kwargs[key] = coerced

        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the subtree, omitting unset attributes."""
        out: Dict[str, Any] = {KIND_KEY: self.kind}
        for f in fields(self):
            if f.name in ("kind", "children"):
                continue
            value = getattr(self, f.name)
            if value is not None:
                out[f.name] = value
        if self.children:
            out["children"] = [c.to_dict() for c in self.children]
        return out

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def walk(self) -> Iterator["WidgetNode"]:
        """Yield this node and its descendants in document (pre-)order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def count(self) -> int:
        return sum(1 for _ in self.walk())


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

_FIELD_TYPES: Dict[str, str] = {
    "id": "str", "label": "str", "tooltip": "str",
    "x": "int", "y": "int", "w": "int", "h": "int", "fixed": "int",
    "margin": "int", "left": "int", "top": "int", "right": "int", "bottom": "int",
    "pad": "int",
    "color": "str", "labelcolor": "str", "selectioncolor": "str", "textcolor": "str",
    "image": "str", "deimage": "str",
    "labelfont": "int", "labelsize": "int", "textfont": "int", "textsize": "int",
    "frame": "str", "downframe": "str",
    "align": "int", "when": "int",
    "shortcut": "str",
    "resizable": "bool", "hide": "bool", "deactivate": "bool", "visible": "bool",
    "minimum": "float", "maximum": "float", "step": "float", "slidersize": "float",
}


def _coerce(value: Any, target: str) -> Any:
    """Coerce a raw scalar into the declared field type, or None."""
    if target == "str":
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            return str(value)
        return None

    if target == "bool":
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            s = value.strip().lower()
            if s in _TRUE_STRINGS:
                return True
            if s in _FALSE_STRINGS:
                return False
        return None

    if target == "int":
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip(), 0)
            except ValueError:
                return None
        return None

    if target == "float":
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                return None
        return None

    return None


def _has_kind(data: Mapping[str, Any]) -> bool:
    if any(data.get(key) not in (None, "") for key in KIND_ALIASES):
        return True
    logger.warning("Model: Discarding child without a 'widget' type tag (and its subtree).")
    return False


def _as_child_list(value: Any) -> List[Mapping[str, Any]]:
    # A lone mapping is a single child (single-element XML/YAML lists collapse)
    if isinstance(value, Mapping):
        return [value]
    if isinstance(value, (list, tuple)):
        return [c for c in value if isinstance(c, Mapping)]
    return []
