from __future__ import annotations

"""
Retained-Mode Widget Handles.

Handles hold the state of one live widget (geometry, label, styling,
callbacks) and mirror it to the backend's native object. Constructing a
handle attaches it to the toolkit's currently open container, sized to fill
that container; constructing a container opens it until it is closed.
"""

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ctkdecl.domain import constants as const
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
    TextBuffer,
    TextCapable,
    TooltipCapable,
    Triggerable,
    Visible,
)
from ctkdecl.toolkit.context import Toolkit

logger = logging.getLogger(__name__)

Callback = Callable[["Widget"], None]

TAB_BAR_HEIGHT = 25


# -----------------------------------------------------------------------------
# BASE HANDLE
# -----------------------------------------------------------------------------

class Widget(
    Identifiable,
    Positionable,
    FlexChild,
    Colorable,
    LabelColorable,
    SelectionColorable,
    Visible,
    Activatable,
    ResizableParticipant,
    TooltipCapable,
    Imageable,
    LabelStyleable,
    Alignable,
    Triggerable,
    FrameStyleable,
):
    """
    Base handle carrying the capabilities every widget kind supports.

    Args:
        toolkit: Context providing the backend and the open container.
        x, y, w, h: Parent-relative geometry; omitted values fill the parent.
        label: Initial label text.
        kind: Registry tag the handle was built from.
        native_kind: Backend widget family (defaults to the class attribute).
        native_options: Extra construction hints for the backend.
    """

    native_kind: str = "frame"
    is_container: bool = False
    is_toplevel: bool = False

    def __init__(
            self,
            toolkit: Toolkit,
            x: Optional[int] = None,
            y: Optional[int] = None,
            w: Optional[int] = None,
            h: Optional[int] = None,
            label: Optional[str] = None,
            *,
            kind: Optional[str] = None,
            native_kind: Optional[str] = None,
            **native_options: Any,
    ) -> None:
        self.toolkit = toolkit
        self.kind = kind or type(self).__name__
        self.native_kind = native_kind or type(self).native_kind
        self.native_options: Dict[str, Any] = native_options
        self.native: Any = None
        self.parent: Optional[Group] = None if self.is_toplevel else toolkit.current()

        pw, ph = (self.parent.w, self.parent.h) if self.parent else const.DEFAULT_WINDOW_SIZE
        self._x = 0 if x is None else x
        self._y = 0 if y is None else y
        self._w = pw if w is None else w
        self._h = ph if h is None else h

        self._label = label or ""
        self._visible = True
        self._active = True
        self._callback: Optional[Callback] = None

        self.native = toolkit.backend.create(self)
        try:
            toolkit.backend.place(self)
            if self._label:
                self._sync(label=self._label)
        except Exception:
            self.destroy()
            raise

        # Only fully realized handles become visible to the parent
        if self.parent is not None:
            self.parent._attach(self)

    def __repr__(self) -> str:
        ident = f" id={self.id!r}" if self.id else ""
        return f"<{self.kind}{ident} {self._x},{self._y} {self._w}x{self._h}>"

    # -------------------------------------------------------------------------
    # Backend bridge
    # -------------------------------------------------------------------------

    def _sync(self, **options: Any) -> None:
        if self.native is not None:
            self.toolkit.backend.configure(self, **options)

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    @property
    def x(self) -> int:
        return self._x

    @property
    def y(self) -> int:
        return self._y

    @property
    def w(self) -> int:
        return self._w

    @property
    def h(self) -> int:
        return self._h

    def geometry(self) -> Tuple[int, int, int, int]:
        return self._x, self._y, self._w, self._h

    def resize(self, x: int, y: int, w: int, h: int) -> None:
        self._x, self._y, self._w, self._h = x, y, max(w, 0), max(h, 0)
        if self.native is not None:
            self.toolkit.backend.place(self)

    def absolute_position(self) -> Tuple[int, int]:
        """Window-relative origin, summing parent offsets."""
        ax, ay = self._x, self._y
        node = self.parent
        while node is not None and node.parent is not None:
            ax += node.x
            ay += node.y
            node = node.parent
        return ax, ay

    # -------------------------------------------------------------------------
    # Label
    # -------------------------------------------------------------------------

    @property
    def label(self) -> str:
        return self._label

    def set_label(self, text: str) -> None:
        self._label = text
        self._sync(label=text)

    # -------------------------------------------------------------------------
    # Visibility and activation
    # -------------------------------------------------------------------------

    @property
    def visible(self) -> bool:
        return self._visible

    def visible_r(self) -> bool:
        """True when this widget and all of its ancestors are shown."""
        node: Optional[Widget] = self
        while node is not None:
            if not node._visible:
                return False
            node = node.parent
        return True

    def hide(self) -> None:
        self._set_visible(False)

    def show(self) -> None:
        self._set_visible(True)

    def _set_visible(self, flag: bool) -> None:
        if self._visible == flag:
            return
        self._visible = flag
        if self.native is not None:
            self.toolkit.backend.set_visible(self, flag)
        # Flexible parents skip hidden children
        if isinstance(self.parent, Flex):
            self.parent.layout()

    @property
    def active(self) -> bool:
        return self._active

    def activate(self) -> None:
        self._set_active(True)

    def deactivate(self) -> None:
        self._set_active(False)

    def _set_active(self, flag: bool) -> None:
        self._active = flag
        if self.native is not None:
            self.toolkit.backend.set_active(self, flag)

    # -------------------------------------------------------------------------
    # Callbacks and values
    # -------------------------------------------------------------------------

    def set_callback(self, callback: Optional[Callback]) -> None:
        self._callback = callback

    def do_callback(self) -> None:
        """Run the callback unless the trigger mask disables it."""
        if self._callback is None or self._trigger == const.WHEN_NEVER:
            return
        self._callback(self)

    def _on_native_event(self) -> None:
        # Entry point for backend-originated user events
        if self._active:
            self.do_callback()

    def value(self) -> Any:
        return self.toolkit.backend.read_value(self)

    def set_value(self, value: Any) -> None:
        self.toolkit.backend.write_value(self, value)

    # -------------------------------------------------------------------------
    # Hierarchy
    # -------------------------------------------------------------------------

    def window(self) -> Optional["Window"]:
        node: Optional[Widget] = self
        while node is not None and not isinstance(node, Window):
            node = node.parent
        return node

    def detach(self) -> None:
        if self.parent is not None:
            self.parent._detach(self)
            self.parent = None

    def destroy(self) -> None:
        if self.native is not None:
            self.toolkit.backend.destroy(self)
            self.native = None


# -----------------------------------------------------------------------------
# CONTAINERS
# -----------------------------------------------------------------------------

class Group(Widget):
    """
    Container accumulating subsequently constructed widgets until closed.

    The resize anchor decides how extra space is shared on resize: the group
    itself scales all children, a child absorbs the whole delta, None keeps
    children fixed.
    """

    is_container = True

    def __init__(self, toolkit: Toolkit, *args: Any, **kwargs: Any) -> None:
        self._children: List[Widget] = []
        self._resizable: Optional[Widget] = None
        super().__init__(toolkit, *args, **kwargs)
        toolkit.begin(self)

    def _attach(self, child: Widget) -> None:
        self._children.append(child)

    def _detach(self, child: Widget) -> None:
        if child in self._children:
            self._children.remove(child)

    @property
    def children(self) -> List[Widget]:
        return list(self._children)

    def child(self, index: int) -> Optional[Widget]:
        if 0 <= index < len(self._children):
            return self._children[index]
        return None

    def end(self) -> None:
        self.toolkit.end(self)

    def begin(self) -> None:
        self.toolkit.begin(self)

    def layout(self) -> None:
        """Position children; plain groups keep the children's own geometry."""

    def clear(self) -> None:
        """Destroy every child widget."""
        for c in list(self._children):
            c.destroy()
            c.parent = None
        self._children.clear()
        self._resizable = None

    def destroy(self) -> None:
        for c in list(self._children):
            c.destroy()
        super().destroy()

    # -------------------------------------------------------------------------
    # Resize anchoring
    # -------------------------------------------------------------------------

    @property
    def resizable_anchor(self) -> Optional[Widget]:
        return self._resizable

    def set_resizable(self, widget: Optional[Widget]) -> None:
        self._resizable = widget

    def make_resizable(self, flag: bool) -> None:
        self.set_resizable(self if flag else None)

    def resize(self, x: int, y: int, w: int, h: int) -> None:
        old_w, old_h = self._w, self._h
        super().resize(x, y, w, h)
        anchor = self._resizable
        if anchor is self and old_w > 0 and old_h > 0:
            sx, sy = self._w / old_w, self._h / old_h
            for c in self._children:
                c.resize(round(c.x * sx), round(c.y * sy), round(c.w * sx), round(c.h * sy))
        elif anchor is not None and anchor in self._children:
            anchor.resize(anchor.x, anchor.y, anchor.w + self._w - old_w, anchor.h + self._h - old_h)
        self.layout()

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def walk(self) -> Iterator[Widget]:
        """Yield descendants in construction order (pre-order, self excluded)."""
        for c in self._children:
            yield c
            if isinstance(c, Group):
                yield from c.walk()

    def count_descendants(self) -> int:
        return sum(1 for _ in self.walk())

    def find(self, widget_id: str) -> Optional[Widget]:
        """Return the first descendant carrying `widget_id`, if any."""
        for w in self.walk():
            if w.id == widget_id:
                return w
        return None


class Flex(Group, FlexContainer):
    """
    Row or column distributing its extent among visible children.

    Children pinned with fixed() keep that size along the main axis; the
    rest share the remaining space equally, the last flexible child taking
    any rounding remainder.
    """

    def __init__(self, toolkit: Toolkit, *args: Any, direction: str = "column", **kwargs: Any) -> None:
        if direction not in ("row", "column"):
            raise ValueError(f"Unknown flex direction '{direction}'.")
        self.direction = direction
        self._fixed: Dict[int, int] = {}
        super().__init__(toolkit, *args, **kwargs)

    @property
    def is_row(self) -> bool:
        return self.direction == "row"

    def fixed(self, child: Widget, size: int) -> None:
        if child not in self._children:
            return
        self._fixed[id(child)] = max(size, 0)
        self.layout()

    def fixed_size(self, child: Widget) -> Optional[int]:
        return self._fixed.get(id(child))

    def _detach(self, child: Widget) -> None:
        self._fixed.pop(id(child), None)
        super()._detach(child)

    def clear(self) -> None:
        self._fixed.clear()
        super().clear()

    def layout(self) -> None:
        shown = [c for c in self._children if c.visible]
        if not shown:
            return
        left, top, right, bottom = self._margins
        inner_w = max(self._w - left - right, 0)
        inner_h = max(self._h - top - bottom, 0)
        main = inner_w if self.is_row else inner_h
        gaps = self._pad * (len(shown) - 1)

        fixed_total = sum(self._fixed.get(id(c), 0) for c in shown if id(c) in self._fixed)
        flexible = [c for c in shown if id(c) not in self._fixed]
        remaining = max(main - fixed_total - gaps, 0)
        share = remaining // len(flexible) if flexible else 0
        leftover = remaining - share * len(flexible)

        pos = left if self.is_row else top
        for c in shown:
            if id(c) in self._fixed:
                size = self._fixed[id(c)]
            else:
                size = share + (leftover if c is flexible[-1] else 0)
            if self.is_row:
                c.resize(pos, top, size, inner_h)
            else:
                c.resize(left, pos, inner_w, size)
            pos += size + self._pad


class Pack(Group):
    """Stacks children along one axis using each child's own extent."""

    def __init__(self, toolkit: Toolkit, *args: Any, horizontal: bool = False, **kwargs: Any) -> None:
        self.horizontal = horizontal
        self.spacing = 0
        super().__init__(toolkit, *args, **kwargs)

    def set_spacing(self, value: int) -> None:
        self.spacing = value
        self.layout()

    def layout(self) -> None:
        pos = 0
        for c in self._children:
            if not c.visible:
                continue
            if self.horizontal:
                c.resize(pos, 0, c.w, self._h)
                pos += c.w + self.spacing
            else:
                c.resize(0, pos, self._w, c.h)
                pos += c.h + self.spacing


class Tabs(Group):
    """Each child is one page; pages fill the area below the tab bar."""

    native_kind = "tabview"

    def __init__(self, toolkit: Toolkit, *args: Any, **kwargs: Any) -> None:
        self._selected: Optional[Widget] = None
        super().__init__(toolkit, *args, **kwargs)

    def layout(self) -> None:
        for c in self._children:
            c.resize(0, TAB_BAR_HEIGHT, self._w, max(self._h - TAB_BAR_HEIGHT, 0))
        if self._selected is None and self._children:
            self.select(self._children[0])

    def selected(self) -> Optional[Widget]:
        return self._selected

    def select(self, page: Widget) -> None:
        if page not in self._children:
            return
        self._selected = page
        self._sync(selected=self._children.index(page))


class Scroll(Group):
    native_kind = "scrollframe"


class Tile(Group):
    """Children keep their own geometry; borders are user-draggable."""


class Window(Group):
    """
    Top-level window. It is the root scope of a build and the search root
    for id lookups performed by setup callbacks.
    """

    native_kind = "window"
    is_toplevel = True

    def __init__(self, toolkit: Toolkit, w: int, h: int, title: str = "", **kwargs: Any) -> None:
        self._title = title
        super().__init__(toolkit, 0, 0, w, h, kind="Window", **kwargs)
        self._sync(title=title)

    @property
    def title(self) -> str:
        return self._title

    def set_title(self, title: str) -> None:
        self._title = title
        self._sync(title=title)

    def show(self) -> None:
        self._visible = True
        self.toolkit.backend.show(self)

    def fit_first_child(self) -> None:
        """Stretch the first child over the window and make it the resize anchor."""
        first = self.child(0)
        if first is None:
            return
        first.resize(0, 0, self._w, self._h)
        self.set_resizable(first)


# -----------------------------------------------------------------------------
# LEAF WIDGETS
# -----------------------------------------------------------------------------

class Frame(Widget):
    """Static box showing a label and/or image."""

    native_kind = "label"


class Button(Widget, ButtonCapable):
    """
    Push button. With `toggle=True` the button holds an on/off value; with
    `radio=True` turning it on turns its radio siblings off.
    """

    native_kind = "button"

    def __init__(self, toolkit: Toolkit, *args: Any, toggle: bool = False, radio: bool = False,
                 **kwargs: Any) -> None:
        self.toggle = toggle or radio
        self.radio = radio
        super().__init__(toolkit, *args, **kwargs)
        if self.toggle:
            self.toolkit.backend.write_value(self, False)

    def set_value(self, value: Any) -> None:
        flag = bool(value)
        super().set_value(flag)
        if flag and self.radio and self.parent is not None:
            for sibling in self.parent.children:
                if sibling is not self and isinstance(sibling, Button) and sibling.radio:
                    self.toolkit.backend.write_value(sibling, False)

    def _on_native_event(self) -> None:
        if self.radio:
            self.set_value(True)
        super()._on_native_event()


class Input(Widget, TextCapable):
    """
    Single-line (or multiline) text field.

    Args:
        input_type: 'text', 'int', 'float', 'secret' or 'file'.
        readonly: Output-only field.
    """

    native_kind = "entry"

    def __init__(self, toolkit: Toolkit, *args: Any, input_type: str = "text", readonly: bool = False,
                 **kwargs: Any) -> None:
        self.input_type = input_type
        self.readonly = readonly
        super().__init__(toolkit, *args, input_type=input_type, readonly=readonly, **kwargs)
        self.toolkit.backend.write_value(self, "")

    def set_value(self, value: Any) -> None:
        text = "" if value is None else str(value)
        if self.input_type == "int" and text and not _is_int(text):
            raise ValueError(f"'{text}' is not an integer.")
        if self.input_type == "float" and text and not _is_float(text):
            raise ValueError(f"'{text}' is not a number.")
        super().set_value(text)


class TextDisplay(Widget, TextCapable):
    """Scrolled text view backed by a TextBuffer; editable when `editable`."""

    native_kind = "textbox"
    has_buffer = True

    def __init__(self, toolkit: Toolkit, *args: Any, editable: bool = False, **kwargs: Any) -> None:
        self.editable = editable
        super().__init__(toolkit, *args, readonly=not editable, **kwargs)

    def value(self) -> str:
        return self._buffer.text() if self._buffer is not None else ""

    def set_value(self, value: Any) -> None:
        self.ensure_buffer()
        self._buffer.set_text("" if value is None else str(value))  # type: ignore[union-attr]

    def _on_native_edit(self, text: str) -> None:
        if self._buffer is not None:
            self._buffer._set_silently(text)


class MenuBar(Widget, TextCapable):
    """Menu bar whose entries are slash-separated paths ('File/Open')."""

    native_kind = "menubar"

    def __init__(self, toolkit: Toolkit, *args: Any, **kwargs: Any) -> None:
        self._items: List[Tuple[str, Optional[Callback]]] = []
        super().__init__(toolkit, *args, **kwargs)

    def add(self, path: str, callback: Optional[Callback] = None) -> None:
        self._items.append((path, callback))
        self._sync(items=[p for p, _ in self._items])

    def items(self) -> List[str]:
        return [p for p, _ in self._items]

    def activate_item(self, path: str) -> bool:
        """Invoke the callback registered for `path`, then the widget callback."""
        for p, cb in self._items:
            if p == path:
                if cb is not None:
                    cb(self)
                self.do_callback()
                return True
        return False


class Choice(Widget, TextCapable):
    """Drop-down selector; `editable=True` yields an input-choice combo."""

    native_kind = "optionmenu"

    def __init__(self, toolkit: Toolkit, *args: Any, editable: bool = False, **kwargs: Any) -> None:
        self.editable = editable
        self._choices: List[str] = []
        super().__init__(toolkit, *args, **kwargs)
        self.toolkit.backend.write_value(self, -1)

    def add_choice(self, choices: str) -> None:
        """Append '|'-separated entries."""
        self._choices.extend(s for s in choices.split("|") if s)
        self._sync(items=list(self._choices))

    def clear_choices(self) -> None:
        self._choices.clear()
        self._sync(items=[])
        self.toolkit.backend.write_value(self, -1)

    def choices(self) -> List[str]:
        return list(self._choices)

    def set_value(self, value: Any) -> None:
        index = int(value)
        if not -1 <= index < len(self._choices):
            raise IndexError(f"Choice index {index} out of range.")
        super().set_value(index)

    def choice(self) -> Optional[str]:
        index = self.value()
        if isinstance(index, int) and 0 <= index < len(self._choices):
            return self._choices[index]
        return None


class Valuator(Widget, RangeCapable):
    """Slider, dial, roller, counter or scrollbar holding a float value."""

    native_kind = "slider"

    def __init__(self, toolkit: Toolkit, *args: Any, orientation: str = "vertical", style: str = "plain",
                 **kwargs: Any) -> None:
        self.orientation = orientation
        self.style = style
        super().__init__(toolkit, *args, orientation=orientation, style=style, **kwargs)
        self.toolkit.backend.write_value(self, self._minimum)

    def set_value(self, value: Any) -> None:
        lo, hi = sorted((self._minimum, self._maximum))
        super().set_value(min(max(float(value), lo), hi))


class TextValuator(Valuator, TextCapable):
    """Valuator that also renders its value as text."""


class Browser(Widget):
    """Line list with single (or multi) selection."""

    native_kind = "listbox"

    def __init__(self, toolkit: Toolkit, *args: Any, multi: bool = False, **kwargs: Any) -> None:
        self.multi = multi
        self._lines: List[str] = []
        super().__init__(toolkit, *args, multi=multi, **kwargs)
        self.toolkit.backend.write_value(self, [])

    def add(self, line: str) -> None:
        self._lines.append(line)
        self._sync(items=list(self._lines))

    def clear_items(self) -> None:
        self._lines.clear()
        self._sync(items=[])
        self.toolkit.backend.write_value(self, [])

    def items(self) -> List[str]:
        return list(self._lines)

    def select(self, index: int) -> None:
        if not 0 <= index < len(self._lines):
            raise IndexError(f"Line {index} out of range.")
        current = [] if not self.multi else list(self.value())
        if index not in current:
            current.append(index)
        self.set_value(sorted(current))


class CheckBrowser(Browser, TextCapable):
    pass


class Table(Widget):
    """Grid with a fixed number of rows and columns."""

    native_kind = "treeview"

    def __init__(self, toolkit: Toolkit, *args: Any, row_selection: bool = False, **kwargs: Any) -> None:
        self.row_selection = row_selection
        self._rows = 0
        self._cols = 0
        super().__init__(toolkit, *args, **kwargs)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    def set_rows(self, n: int) -> None:
        self._rows = max(n, 0)
        self._sync(shape=(self._rows, self._cols))

    def set_cols(self, n: int) -> None:
        self._cols = max(n, 0)
        self._sync(shape=(self._rows, self._cols))


class Tree(Widget):
    """Hierarchical item view addressed by slash-separated paths."""

    native_kind = "treeview"

    def __init__(self, toolkit: Toolkit, *args: Any, **kwargs: Any) -> None:
        self._paths: List[str] = []
        super().__init__(toolkit, *args, **kwargs)

    def add(self, path: str) -> None:
        parts = [p for p in path.split("/") if p]
        for i in range(1, len(parts) + 1):
            prefix = "/".join(parts[:i])
            if prefix not in self._paths:
                self._paths.append(prefix)
        self._sync(items=list(self._paths))

    def items(self) -> List[str]:
        return list(self._paths)


class Progress(Widget):
    """Progress bar; its range is not a user-adjustable control."""

    native_kind = "progressbar"

    def __init__(self, toolkit: Toolkit, *args: Any, **kwargs: Any) -> None:
        super().__init__(toolkit, *args, **kwargs)
        self.toolkit.backend.write_value(self, 0.0)


class Spinner(Widget, TextCapable, RangeCapable):
    native_kind = "spinbox"

    def __init__(self, toolkit: Toolkit, *args: Any, **kwargs: Any) -> None:
        super().__init__(toolkit, *args, **kwargs)
        self._step = 1.0
        self.toolkit.backend.write_value(self, self._minimum)


class Chart(Widget, TextCapable):
    """Bar chart of labelled values."""

    native_kind = "canvas"

    def __init__(self, toolkit: Toolkit, *args: Any, **kwargs: Any) -> None:
        self._entries: List[Tuple[float, str, Optional[str]]] = []
        super().__init__(toolkit, *args, **kwargs)

    def add(self, value: float, label: str = "", color: Optional[str] = None) -> None:
        self._entries.append((float(value), label, color))
        self._sync(entries=list(self._entries))

    def entries(self) -> List[Tuple[float, str, Optional[str]]]:
        return list(self._entries)


class HelpView(Widget, TextCapable):
    """Read-only rich text viewer."""

    native_kind = "textbox"

    def __init__(self, toolkit: Toolkit, *args: Any, **kwargs: Any) -> None:
        super().__init__(toolkit, *args, readonly=True, **kwargs)
        self.toolkit.backend.write_value(self, "")


class ColorChooser(Widget):
    native_kind = "colorchooser"

    def __init__(self, toolkit: Toolkit, *args: Any, **kwargs: Any) -> None:
        super().__init__(toolkit, *args, **kwargs)
        self.toolkit.backend.write_value(self, "#000000")


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _is_int(text: str) -> bool:
    try:
        int(text)
        return True
    except ValueError:
        return False


def _is_float(text: str) -> bool:
    try:
        float(text)
        return True
    except ValueError:
        return False
