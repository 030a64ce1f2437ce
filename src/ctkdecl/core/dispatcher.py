from __future__ import annotations

"""
Capability-Based Attribute Dispatcher.

Applies the attributes of a description node to a freshly constructed handle.
An attribute is read only when the handle implements the capability that
owns it, so a `minimum` on a button is never consulted. Attribute-level
failures (bad colour, unknown frame, missing image) skip that attribute and
processing continues. Containers are kept open while their children are
built and closed afterwards.
"""

import logging
from typing import Any, Callable, Optional

from ctkdecl.domain.model import WidgetNode
from ctkdecl.domain.styles import (
    lookup_font,
    lookup_frame,
    parse_hex_color,
    parse_shortcut,
    validate_align,
    validate_when,
)
from ctkdecl.toolkit.capabilities import (
    Activatable,
    Alignable,
    ButtonCapable,
    Colorable,
    FlexChild,
    FlexContainer,
    FrameStyleable,
    Identifiable,
    Imageable,
    LabelColorable,
    LabelStyleable,
    Positionable,
    RangeCapable,
    ResizableParticipant,
    SelectionColorable,
    TextCapable,
    TooltipCapable,
    Triggerable,
    Visible,
)
from ctkdecl.toolkit.widgets import Group, Widget

logger = logging.getLogger(__name__)

BuildChild = Callable[[WidgetNode], Optional[Widget]]

# Failures that are absorbed per attribute
_ATTRIBUTE_ERRORS = (ValueError, TypeError, OSError, IndexError)


def apply_attributes(handle: Widget, node: WidgetNode, build_child: BuildChild) -> None:
    """
    Apply every supported attribute of `node` to `handle`, build the node's
    children inside it, then close its scope.

    Args:
        handle: Newly constructed handle for `node`.
        node: Description node the handle was built from.
        build_child: Callback building one child node in the open scope.
    """
    if isinstance(handle, TextCapable):
        handle.ensure_buffer()
        _apply_text(handle, node)

    if isinstance(handle, Identifiable) and node.id is not None:
        handle.set_id(node.id)
    if node.label is not None:
        handle.set_label(node.label)

    if isinstance(handle, Positionable):
        _apply_geometry(handle, node)
    if isinstance(handle, FlexChild) and node.fixed is not None:
        _apply_fixed(handle, node.fixed)
    if isinstance(handle, FlexContainer):
        _apply_margins(handle, node)

    if isinstance(handle, Colorable):
        _apply_color(handle, node.color, handle.set_color, "color")
    if isinstance(handle, SelectionColorable):
        _apply_color(handle, node.selectioncolor, handle.set_selection_color, "selectioncolor")
    if isinstance(handle, LabelColorable):
        _apply_color(handle, node.labelcolor, handle.set_label_color, "labelcolor")

    if node.children:
        _build_children(handle, node, build_child)

    if isinstance(handle, Visible):
        _apply_visibility(handle, node)
    if isinstance(handle, Activatable) and node.deactivate:
        handle.deactivate()
    if isinstance(handle, ResizableParticipant) and node.resizable:
        _apply_resizable(handle)

    if isinstance(handle, TooltipCapable) and node.tooltip is not None:
        handle.set_tooltip(node.tooltip)
    if isinstance(handle, Imageable):
        _apply_images(handle, node)
    if isinstance(handle, LabelStyleable):
        _apply_label_style(handle, node)
    if isinstance(handle, Alignable) and node.align is not None:
        _apply_checked(handle, "align", validate_align(node.align), node.align, handle.set_align)
    if isinstance(handle, Triggerable) and node.when is not None:
        _apply_checked(handle, "when", validate_when(node.when), node.when, handle.set_trigger)
    if isinstance(handle, FrameStyleable) and node.frame is not None:
        _apply_checked(handle, "frame", lookup_frame(node.frame), node.frame, handle.set_frame)
    if isinstance(handle, ButtonCapable):
        _apply_button(handle, node)
    if isinstance(handle, RangeCapable):
        _apply_range(handle, node)
    if isinstance(handle, FlexContainer) and node.pad is not None:
        handle.set_pad(node.pad)

    if isinstance(handle, Group):
        handle.toolkit.end(handle)


# -----------------------------------------------------------------------------
# CAPABILITY APPLIERS
# -----------------------------------------------------------------------------

def _apply_text(handle: TextCapable, node: WidgetNode) -> None:
    if node.textcolor is not None:
        _apply_color(handle, node.textcolor, handle.set_text_color, "textcolor")
    if node.textfont is not None:
        _apply_checked(handle, "textfont", lookup_font(node.textfont), node.textfont,
                       lambda _f: handle.set_text_font(node.textfont))
    if node.textsize is not None:
        _guarded(handle, "textsize", handle.set_text_size, node.textsize)


def _apply_geometry(handle: Widget, node: WidgetNode) -> None:
    if node.x is None and node.y is None and node.w is None and node.h is None:
        return
    # Missing coordinates keep the handle's current value
    handle.resize(
        handle.x if node.x is None else node.x,
        handle.y if node.y is None else node.y,
        handle.w if node.w is None else node.w,
        handle.h if node.h is None else node.h,
    )


def _apply_fixed(handle: Widget, size: int) -> None:
    parent = handle.parent
    if isinstance(parent, FlexContainer):
        parent.fixed(handle, size)
    else:
        logger.debug(f"Dispatcher: 'fixed' ignored on '{handle.kind}' (parent is not a flex container).")


def _apply_margins(handle: FlexContainer, node: WidgetNode) -> None:
    if node.margin is not None:
        handle.set_margin(node.margin)
    if any(v is not None for v in (node.left, node.top, node.right, node.bottom)):
        left, top, right, bottom = handle.margins()
        handle.set_margins(
            left if node.left is None else node.left,
            top if node.top is None else node.top,
            right if node.right is None else node.right,
            bottom if node.bottom is None else node.bottom,
        )


def _apply_color(handle: Any, raw: Optional[str], setter: Callable[[str], None], name: str) -> None:
    if raw is None:
        return
    _apply_checked(handle, name, parse_hex_color(raw), raw, setter)


def _build_children(handle: Widget, node: WidgetNode, build_child: BuildChild) -> None:
    if not isinstance(handle, Group):
        logger.warning(f"Dispatcher: '{handle.kind}' cannot hold children; {len(node.children)} ignored.")
        return
    for child in node.children:
        build_child(child)


def _apply_visibility(handle: Widget, node: WidgetNode) -> None:
    # 'visible' toggles visibility only; 'hide' takes precedence
    if node.visible is not None:
        if node.visible:
            handle.show()
        else:
            handle.hide()
    if node.hide:
        handle.hide()


def _apply_resizable(handle: Widget) -> None:
    if isinstance(handle, Group):
        handle.make_resizable(True)
    elif handle.parent is not None:
        handle.parent.set_resizable(handle)


def _apply_images(handle: Widget, node: WidgetNode) -> None:
    backend = handle.toolkit.backend
    for name, path, setter in (
            ("image", node.image, handle.set_image),
            ("deimage", node.deimage, handle.set_deimage),
    ):
        if path is None:
            continue
        try:
            setter(backend.load_image(path))
        except _ATTRIBUTE_ERRORS as e:
            logger.debug(f"Dispatcher: Skipping {name} '{path}' on '{handle.kind}': {e}")


def _apply_label_style(handle: Widget, node: WidgetNode) -> None:
    if node.labelsize is not None:
        _guarded(handle, "labelsize", handle.set_label_size, node.labelsize)
    if node.labelfont is not None:
        _apply_checked(handle, "labelfont", lookup_font(node.labelfont), node.labelfont,
                       lambda _f: handle.set_label_font(node.labelfont))


def _apply_button(handle: ButtonCapable, node: WidgetNode) -> None:
    if node.downframe is not None:
        _apply_checked(handle, "downframe", lookup_frame(node.downframe), node.downframe, handle.set_down_frame)
    if node.shortcut is not None:
        _apply_checked(handle, "shortcut", parse_shortcut(node.shortcut), node.shortcut, handle.set_shortcut)


def _apply_range(handle: RangeCapable, node: WidgetNode) -> None:
    if node.minimum is not None:
        handle.set_minimum(node.minimum)
    if node.maximum is not None:
        handle.set_maximum(node.maximum)
    if node.slidersize is not None:
        handle.set_slider_size(node.slidersize)
    if node.step is not None:
        _guarded(handle, "step", handle.set_step, node.step, 1)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _apply_checked(handle: Any, name: str, resolved: Any, raw: Any, setter: Callable[[Any], None]) -> None:
    """Apply a looked-up value, or skip the attribute when the lookup failed."""
    if resolved is None:
        logger.debug(f"Dispatcher: Skipping invalid {name}={raw!r} on '{handle.kind}'.")
        return
    _guarded(handle, name, setter, resolved)


def _guarded(handle: Any, name: str, setter: Callable[..., None], *args: Any) -> None:
    try:
        setter(*args)
    except _ATTRIBUTE_ERRORS as e:
        logger.debug(f"Dispatcher: Skipping {name} on '{handle.kind}': {e}")
