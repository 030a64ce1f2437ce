from __future__ import annotations

"""
Unit tests for the SVG Snapshot Export.

Builds small hierarchies headlessly and inspects the generated markup.
"""

import xml.etree.ElementTree as ET

from ctkdecl.core.snapshot import SVG_NS, dump_svg, render_svg
from ctkdecl.domain.model import WidgetNode

_NS = {"svg": SVG_NS}


def _build(factory, window, data) -> None:
    factory.build(WidgetNode.from_dict(data))
    window.toolkit.end(window)
    window.fit_first_child()


def test_render_includes_visible_widgets(factory, window) -> None:
    """TC-01: Verify each visible widget is a rectangle and labels become text."""
    _build(factory, window, {
        "widget": "Column",
        "children": [
            {"widget": "Button", "id": "go", "label": "Go", "color": "#00ff00"},
            {"widget": "Frame", "label": "hidden", "hide": True},
        ],
    })

    root = ET.fromstring(render_svg(window))
    rects = root.findall("svg:rect", _NS)
    texts = [t.text for t in root.findall("svg:text", _NS)]

    assert root.get("width") == "400"
    assert rects[0].get("fill") == "#ffffff"
    assert [r.get("data-kind") for r in rects[1:]] == ["Column", "Button"]
    assert root.find("svg:rect[@id='go']", _NS).get("fill") == "#00ff00"
    assert texts == ["Go"]


def test_render_marks_inactive_and_frames(factory, window) -> None:
    """TC-02: Verify deactivated widgets are faded and frame borders drawn."""
    _build(factory, window, {
        "widget": "Frame", "id": "f", "frame": "RoundedBox", "deactivate": True,
    })

    rect = ET.fromstring(render_svg(window)).find("svg:rect[@id='f']", _NS)

    assert rect.get("opacity") == "0.5"
    assert rect.get("stroke-width") == "1"
    assert rect.get("rx") == "8"


def test_dump_svg_writes_file(factory, window, tmp_path) -> None:
    """TC-03: Verify the snapshot is written to the requested path."""
    _build(factory, window, {"widget": "Frame", "label": "hello"})
    target = tmp_path / "out" / "snap.svg"

    assert dump_svg(window, str(target)) == str(target)
    assert "hello" in target.read_text(encoding="utf-8")
