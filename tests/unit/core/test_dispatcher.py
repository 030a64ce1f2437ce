from __future__ import annotations

"""
Unit tests for the Capability-Based Attribute Dispatcher.

Each test builds a one-node (or small) description through the factory and
inspects the resulting handle. Verifies:
1. Attributes reach only the handles implementing their capability.
2. Invalid attribute values are skipped without aborting the node.
3. Visibility, activation, resizing and scope closing.
"""

from ctkdecl.domain import constants as const
from ctkdecl.domain.model import WidgetNode
from ctkdecl.toolkit.headless import native_of


def _node(data) -> WidgetNode:
    return WidgetNode.from_dict(data)


def test_identity_label_and_colors(factory, window) -> None:
    """TC-01: Verify id, label and colour attributes are applied."""
    handle = factory.build(_node({
        "widget": "Button",
        "id": "ok",
        "label": "OK",
        "color": "#F00",
        "labelcolor": "0x00ff00",
        "selectioncolor": "#0000ff",
    }))

    assert handle.id == "ok"
    assert handle.label == "OK"
    assert handle.color == "#ff0000"
    assert handle.label_color == "#00ff00"
    assert handle.selection_color == "#0000ff"
    assert native_of(handle).options["label"] == "OK"


def test_invalid_color_is_skipped_but_node_completes(factory, window) -> None:
    """TC-02: Verify a bad colour leaves the default and later attributes apply."""
    handle = factory.build(_node({"widget": "Frame", "color": "crimson", "tooltip": "tip"}))

    assert handle.color is None
    assert handle.tooltip == "tip"


def test_geometry_overrides_keep_missing_values(factory, window) -> None:
    """TC-03: Verify partial geometry keeps the current value of absent fields."""
    handle = factory.build(_node({"widget": "Frame", "x": 10, "w": 50}))

    assert handle.geometry() == (10, 0, 50, window.h)


def test_range_attributes_only_on_range_kinds(factory, window) -> None:
    """TC-04: Verify minimum/maximum/step reach sliders but not buttons."""
    slider = factory.build(_node({
        "widget": "HorSlider", "minimum": 0, "maximum": 10, "step": 2, "slidersize": 0.2,
    }))
    button = factory.build(_node({"widget": "Button", "minimum": 5}))

    assert (slider.minimum, slider.maximum, slider.step) == (0.0, 10.0, 2.0)
    assert slider.slider_size == 0.2
    assert native_of(slider).options["range"] == (0.0, 10.0, 2.0)
    assert not hasattr(button, "minimum")


def test_font_indices_are_bounds_checked(factory, window) -> None:
    """TC-05: Verify out-of-range font indices are skipped."""
    good = factory.build(_node({"widget": "Frame", "labelfont": 1, "labelsize": 20}))
    bad = factory.build(_node({"widget": "Frame", "labelfont": 99}))

    assert good.label_font == 1
    assert good.label_size == 20
    assert bad.label_font == 0


def test_frame_styles_and_shortcut(factory, window, backend) -> None:
    """TC-06: Verify frame lookup, down frame and shortcut binding on buttons."""
    handle = factory.build(_node({
        "widget": "Button",
        "frame": "RoundedBox",
        "downframe": "DownBox",
        "shortcut": "0x40073",
    }))
    unknown = factory.build(_node({"widget": "Frame", "frame": "CloudBox"}))

    assert handle.frame.name == "RoundedBox"
    assert handle.down_frame.name == "DownBox"
    assert handle.shortcut.sequence == "<Control-s>"
    assert native_of(handle).shortcuts == ["<Control-s>"]
    assert unknown.frame is None


def test_align_and_when_masks(factory, window) -> None:
    """TC-07: Verify masks are applied when valid and skipped otherwise."""
    handle = factory.build(_node({"widget": "Button", "align": 5, "when": const.WHEN_NEVER}))
    invalid = factory.build(_node({"widget": "Button", "align": 4096, "when": 99}))

    assert handle.align == 5
    assert handle.trigger == const.WHEN_NEVER
    assert invalid.align == const.ALIGN_CENTER
    assert invalid.trigger == const.WHEN_RELEASE


def test_visible_false_and_hide_precedence(factory, window) -> None:
    """TC-08: Verify 'visible' toggles visibility and 'hide' wins over it."""
    hidden = factory.build(_node({"widget": "Frame", "visible": False}))
    shown = factory.build(_node({"widget": "Frame", "visible": True}))
    both = factory.build(_node({"widget": "Frame", "visible": True, "hide": True}))

    assert not hidden.visible
    assert hidden.active
    assert shown.visible
    assert not both.visible


def test_deactivate(factory, window) -> None:
    """TC-09: Verify deactivation is forwarded to the native widget."""
    handle = factory.build(_node({"widget": "Button", "deactivate": True}))

    assert not handle.active
    assert native_of(handle).active is False


def test_text_attributes_create_buffer_first(factory, window) -> None:
    """TC-10: Verify buffer-backed kinds own a buffer before text styling."""
    editor = factory.build(_node({
        "widget": "TextEditor", "textcolor": "#123456", "textfont": 4, "textsize": 18,
    }))

    assert editor.buffer is not None
    assert editor.text_color == "#123456"
    assert editor.text_font == 4
    assert editor.text_size == 18


def test_missing_image_is_skipped(factory, window, tmp_path) -> None:
    """TC-11: Verify an image that cannot be loaded is ignored."""
    present = tmp_path / "icon.png"
    present.write_bytes(b"not really a png")
    handle = factory.build(_node({
        "widget": "Button",
        "image": str(present),
        "deimage": str(tmp_path / "missing.png"),
    }))

    assert handle.image is not None
    assert handle.deimage is None


def test_children_on_leaf_are_ignored(factory, window) -> None:
    """TC-12: Verify a leaf kind does not gain children."""
    handle = factory.build(_node({
        "widget": "Button",
        "children": [{"widget": "Frame"}],
    }))

    assert handle is not None
    assert window.count_descendants() == 1


def test_container_scope_is_closed(factory, toolkit, window) -> None:
    """TC-13: Verify a container is closed after its children are built."""
    column = factory.build(_node({
        "widget": "Column",
        "children": [{"widget": "Button"}, {"widget": "Frame"}],
    }))
    sibling = factory.build(_node({"widget": "Frame"}))

    assert toolkit.current() is window
    assert len(column.children) == 2
    assert sibling.parent is window


def test_resizable_on_child_sets_parent_anchor(factory, window) -> None:
    """TC-14: Verify a resizable leaf becomes its parent's resize anchor."""
    group = factory.build(_node({
        "widget": "Group",
        "children": [{"widget": "Frame", "id": "grow", "resizable": True}],
    }))
    scaled = factory.build(_node({"widget": "Group", "resizable": True}))

    assert window.resizable_anchor is None
    assert group.resizable_anchor is group.find("grow")
    assert scaled.resizable_anchor is scaled


def test_fixed_outside_flex_is_ignored(factory, window) -> None:
    """TC-15: Verify 'fixed' has no effect when the parent is not flexible."""
    handle = factory.build(_node({"widget": "Frame", "fixed": 40}))

    assert handle.h == window.h
