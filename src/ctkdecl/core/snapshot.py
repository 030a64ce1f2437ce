from __future__ import annotations

"""
SVG Snapshot Export.

Renders the retained state of a built hierarchy to a static SVG document:
one rectangle per visible widget (with its frame border), plus its label.
Works with any backend since it reads handle state only, which makes it
usable for regression snapshots on machines without a display.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Optional

from ctkdecl.domain import constants as const
from ctkdecl.domain.styles import align_to_anchor
from ctkdecl.infra.fs import write_text
from ctkdecl.toolkit.widgets import Group, Widget, Window

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"

_DEFAULT_FILL = "#d4d4d4"
_DEFAULT_INK = "#000000"
_ANCHOR_TO_SVG = {"w": "start", "nw": "start", "sw": "start", "e": "end", "ne": "end", "se": "end"}


def render_svg(window: Window) -> str:
    """
    Serialize the window's hierarchy as SVG markup on a white background.

    Args:
        window: Built top-level window.

    Returns:
        str: The SVG document.
    """
    svg = ET.Element("svg", {
        "xmlns": SVG_NS,
        "width": str(window.w),
        "height": str(window.h),
        "viewBox": f"0 0 {window.w} {window.h}",
    })
    if window.title:
        ET.SubElement(svg, "title").text = window.title
    ET.SubElement(svg, "rect", {"x": "0", "y": "0", "width": str(window.w), "height": str(window.h),
                                "fill": "#ffffff"})
    for handle in window.walk():
        if handle.visible_r():
            _draw(svg, handle)
    ET.indent(svg)
    return ET.tostring(svg, encoding="unicode", xml_declaration=True)


def dump_svg(window: Window, path: Optional[str] = None) -> str:
    """
    Write the window snapshot to `path`.

    Returns:
        str: The path written.
    """
    target = path or const.DEFAULT_SNAPSHOT_PATH
    write_text(target, render_svg(window))
    logger.info(f"Snapshot: Wrote '{target}'.")
    return target


def _draw(svg: ET.Element, handle: Widget) -> None:
    x, y = handle.absolute_position()
    attrs = {
        "x": str(x),
        "y": str(y),
        "width": str(handle.w),
        "height": str(handle.h),
        "data-kind": handle.kind,
    }
    if handle.id:
        attrs["id"] = handle.id

    frame = handle.frame
    # Plain groups without an explicit colour are transparent
    if handle.color is None and (isinstance(handle, Group) or (frame is not None and frame.name == "NoBox")):
        attrs["fill"] = "none"
    else:
        attrs["fill"] = handle.color or _DEFAULT_FILL
    if frame is not None and frame.border_width > 0:
        attrs["stroke"] = "#808080"
        attrs["stroke-width"] = str(frame.border_width)
        if frame.corner_radius:
            attrs["rx"] = str(frame.corner_radius)
    if not handle.active:
        attrs["opacity"] = "0.5"
    ET.SubElement(svg, "rect", attrs)

    if handle.label and not isinstance(handle, Group):
        anchor = _ANCHOR_TO_SVG.get(align_to_anchor(handle.align), "middle")
        tx = {"start": x + 4, "end": x + handle.w - 4}.get(anchor, x + handle.w // 2)
        text = ET.SubElement(svg, "text", {
            "x": str(tx),
            "y": str(y + handle.h // 2),
            "text-anchor": anchor,
            "dominant-baseline": "middle",
            "font-size": str(handle.label_size),
            "fill": handle.label_color or _DEFAULT_INK,
        })
        text.text = handle.label
