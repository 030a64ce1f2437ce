from __future__ import annotations

"""
Unit tests for the retained-mode widget handles.

Verifies scope handling, callbacks, value semantics of the leaf kinds and
the headless backend's simulation helpers.
"""

from unittest.mock import MagicMock

import pytest

from ctkdecl.domain import constants as const
from ctkdecl.domain.errors import ScopeError
from ctkdecl.toolkit.capabilities import TextBuffer
from ctkdecl.toolkit.headless import native_of
from ctkdecl.toolkit.widgets import (
    Browser,
    Button,
    Choice,
    Flex,
    Frame,
    Input,
    MenuBar,
    TextDisplay,
    Tree,
    Valuator,
    Window,
)


# -----------------------------------------------------------------------------
# Scope and hierarchy
# -----------------------------------------------------------------------------

def test_new_widgets_attach_to_open_container(toolkit, window) -> None:
    """TC-01: Verify construction attaches to the innermost open container."""
    col = Flex(toolkit)
    inner = Frame(toolkit)
    col.end()
    outer = Frame(toolkit)

    assert inner.parent is col
    assert outer.parent is window
    assert inner.window() is window


def test_closing_out_of_order_raises(toolkit, window) -> None:
    """TC-02: Verify mismatched container closes are rejected."""
    Flex(toolkit)
    with pytest.raises(ScopeError):
        toolkit.end(window)


def test_second_window_is_not_nested(toolkit, window) -> None:
    """TC-03: Verify a top-level window never attaches to an open container."""
    other = Window(toolkit, 100, 100, "Other")

    assert other.parent is None
    assert other not in window.children


def test_find_and_clear(toolkit, window, backend) -> None:
    """TC-04: Verify id lookup over descendants and destruction on clear."""
    col = Flex(toolkit)
    target = Frame(toolkit)
    target.set_id("target")
    col.end()

    assert window.find("target") is target
    assert window.find("absent") is None

    window.clear()

    assert window.children == []
    assert window.find("target") is None
    assert [n.kind for n in backend.live()] == ["window"]


def test_absolute_position_sums_offsets(toolkit, window) -> None:
    """TC-05: Verify window-relative coordinates accumulate parent offsets."""
    from ctkdecl.toolkit.widgets import Group

    group = Group(toolkit, 10, 20, 100, 100)
    child = Frame(toolkit, 5, 5, 10, 10)
    group.end()

    assert child.absolute_position() == (15, 25)


# -----------------------------------------------------------------------------
# Callbacks
# -----------------------------------------------------------------------------

def test_callback_runs_on_click(toolkit, window, backend) -> None:
    """TC-06: Verify a simulated click runs the callback with the handle."""
    button = Button(toolkit, label="Go")
    cb = MagicMock()
    button.set_callback(cb)

    backend.click(button)

    cb.assert_called_once_with(button)


def test_when_never_and_inactive_suppress_callbacks(toolkit, window, backend) -> None:
    """TC-07: Verify WHEN_NEVER and deactivation block user-triggered callbacks."""
    never = Button(toolkit)
    never.set_trigger(const.WHEN_NEVER)
    inactive = Button(toolkit)
    inactive.deactivate()
    cb = MagicMock()
    never.set_callback(cb)
    inactive.set_callback(cb)

    backend.click(never)
    backend.click(inactive)
    never.do_callback()

    cb.assert_not_called()


def test_hidden_widgets_ignore_clicks(toolkit, window, backend) -> None:
    """TC-08: Verify clicks on hidden widgets are dropped."""
    button = Button(toolkit)
    cb = MagicMock()
    button.set_callback(cb)
    window.hide()

    backend.click(button)

    cb.assert_not_called()


def test_shortcut_press_fires_bound_button(toolkit, window, backend) -> None:
    """TC-09: Verify pressing a bound sequence runs the button callback."""
    from ctkdecl.domain.styles import parse_shortcut

    button = Button(toolkit)
    cb = MagicMock()
    button.set_callback(cb)
    button.set_shortcut(parse_shortcut("0x40073"))

    assert backend.press("<Control-s>") == 1
    cb.assert_called_once_with(button)
    assert backend.press("<Control-q>") == 0


# -----------------------------------------------------------------------------
# Leaf values
# -----------------------------------------------------------------------------

def test_toggle_and_radio_buttons(toolkit, window, backend) -> None:
    """TC-10: Verify toggles flip and radio buttons are mutually exclusive."""
    toggle = Button(toolkit, toggle=True)
    r1 = Button(toolkit, radio=True)
    r2 = Button(toolkit, radio=True)

    backend.click(toggle)
    backend.click(r1)
    backend.click(r2)

    assert toggle.value() is True
    assert r1.value() is False
    assert r2.value() is True


def test_numeric_inputs_validate(toolkit, window) -> None:
    """TC-11: Verify int inputs reject non-integers and accept numbers."""
    field = Input(toolkit, input_type="int")
    field.set_value(42)

    assert field.value() == "42"
    with pytest.raises(ValueError):
        field.set_value("4.2")


def test_choice_entries_and_selection(toolkit, window) -> None:
    """TC-12: Verify '|'-separated entries and index-based selection."""
    choice = Choice(toolkit)
    choice.add_choice("JAN|FEB|MAR")

    assert choice.choice() is None
    choice.set_value(1)
    assert choice.choice() == "FEB"
    with pytest.raises(IndexError):
        choice.set_value(3)
    assert native_of(choice).options["items"] == ["JAN", "FEB", "MAR"]


def test_menubar_items_dispatch(toolkit, window) -> None:
    """TC-13: Verify menu items run their own callback then the widget callback."""
    menu = MenuBar(toolkit)
    item_cb, widget_cb = MagicMock(), MagicMock()
    menu.add("File/Open", item_cb)
    menu.set_callback(widget_cb)

    assert menu.activate_item("File/Open") is True
    assert menu.activate_item("File/Close") is False
    item_cb.assert_called_once_with(menu)
    widget_cb.assert_called_once_with(menu)


def test_valuator_clamps_to_range(toolkit, window) -> None:
    """TC-14: Verify valuator values are clamped to [minimum, maximum]."""
    slider = Valuator(toolkit)
    slider.set_minimum(0)
    slider.set_maximum(10)

    slider.set_value(25)
    assert slider.value() == 10.0
    slider.set_value(-3)
    assert slider.value() == 0.0


def test_browser_single_and_multi_selection(toolkit, window) -> None:
    """TC-15: Verify single browsers replace and multi browsers accumulate."""
    single = Browser(toolkit)
    multi = Browser(toolkit, multi=True)
    for b in (single, multi):
        b.add("a")
        b.add("b")
        b.select(0)
        b.select(1)

    assert single.value() == [1]
    assert multi.value() == [0, 1]


def test_tree_adds_intermediate_paths(toolkit, window) -> None:
    """TC-16: Verify slash paths create their parent items."""
    tree = Tree(toolkit)
    tree.add("/a/b/c")
    tree.add("a/d")

    assert tree.items() == ["a", "a/b", "a/b/c", "a/d"]


def test_text_display_buffer_sync(toolkit, window) -> None:
    """TC-17: Verify buffer edits propagate to the native widget."""
    display = TextDisplay(toolkit, editable=True)
    display.set_buffer(TextBuffer("hello"))
    display.buffer.append(" world")

    assert display.value() == "hello world"
    assert native_of(display).options["text"] == "hello world"
