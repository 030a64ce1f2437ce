from __future__ import annotations

"""
Widget Capability Interfaces.

Each capability is a mixin bundling the setters for one group of
description attributes. A handle class implements any subset of them; the
attribute dispatcher applies an attribute only when the handle is an
instance of the capability that owns it.

Mixins keep their state in class-level defaults and push changes through
`self._sync(...)`, provided by the widget base class.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from ctkdecl.domain import constants as const
from ctkdecl.domain.styles import FrameStyle, Shortcut, align_to_anchor, lookup_font

if TYPE_CHECKING:
    from ctkdecl.toolkit.widgets import Widget


class Capability:
    """Marker base of every capability mixin."""

    def _sync(self, **options: Any) -> None:  # pragma: no cover - provided by Widget
        raise NotImplementedError


# -----------------------------------------------------------------------------
# IDENTITY AND GEOMETRY
# -----------------------------------------------------------------------------

class Identifiable(Capability):
    """Accepts an id so the widget can be found again with Window.find()."""

    _id: Optional[str] = None

    @property
    def id(self) -> Optional[str]:
        return self._id

    def set_id(self, value: str) -> None:
        self._id = value


class Positionable(Capability):
    """Accepts absolute geometry overrides (parent-relative pixels)."""

    def resize(self, x: int, y: int, w: int, h: int) -> None:
        raise NotImplementedError


class FlexChild(Capability):
    """Can have its extent pinned by a directional flexible parent."""


class FlexContainer(Capability):
    """Distributes space among children along one axis."""

    _margins: Tuple[int, int, int, int] = (0, 0, 0, 0)
    _pad: int = 0

    def margins(self) -> Tuple[int, int, int, int]:
        """Return (left, top, right, bottom)."""
        return self._margins

    def set_margin(self, value: int) -> None:
        self._margins = (value, value, value, value)
        self.layout()

    def set_margins(self, left: int, top: int, right: int, bottom: int) -> None:
        self._margins = (left, top, right, bottom)
        self.layout()

    @property
    def pad(self) -> int:
        return self._pad

    def set_pad(self, value: int) -> None:
        self._pad = value
        self.layout()

    def fixed(self, child: "Widget", size: int) -> None:
        raise NotImplementedError

    def layout(self) -> None:
        raise NotImplementedError


# -----------------------------------------------------------------------------
# COLOURS
# -----------------------------------------------------------------------------

class Colorable(Capability):
    _color: Optional[str] = None

    @property
    def color(self) -> Optional[str]:
        return self._color

    def set_color(self, value: str) -> None:
        self._color = value
        self._sync(color=value)


class LabelColorable(Capability):
    _label_color: Optional[str] = None

    @property
    def label_color(self) -> Optional[str]:
        return self._label_color

    def set_label_color(self, value: str) -> None:
        self._label_color = value
        self._sync(label_color=value)


class SelectionColorable(Capability):
    _selection_color: Optional[str] = None

    @property
    def selection_color(self) -> Optional[str]:
        return self._selection_color

    def set_selection_color(self, value: str) -> None:
        self._selection_color = value
        self._sync(selection_color=value)


# -----------------------------------------------------------------------------
# VISIBILITY, ACTIVATION, RESIZING
# -----------------------------------------------------------------------------

class Visible(Capability):
    def hide(self) -> None:
        raise NotImplementedError

    def show(self) -> None:
        raise NotImplementedError


class Activatable(Capability):
    def activate(self) -> None:
        raise NotImplementedError

    def deactivate(self) -> None:
        raise NotImplementedError


class ResizableParticipant(Capability):
    """
    Takes part in resize anchoring: a container anchors its own children,
    a leaf asks its parent to use it as the parent's resize anchor.
    """


# -----------------------------------------------------------------------------
# DECORATION
# -----------------------------------------------------------------------------

class TooltipCapable(Capability):
    _tooltip: Optional[str] = None

    @property
    def tooltip(self) -> Optional[str]:
        return self._tooltip

    def set_tooltip(self, value: str) -> None:
        self._tooltip = value
        self._sync(tooltip=value)


class Imageable(Capability):
    """Normal image plus the image shown while deactivated."""

    _image: Any = None
    _deimage: Any = None

    @property
    def image(self) -> Any:
        return self._image

    @property
    def deimage(self) -> Any:
        return self._deimage

    def set_image(self, image: Any) -> None:
        self._image = image
        self._sync(image=image)

    def set_deimage(self, image: Any) -> None:
        self._deimage = image
        self._sync(deimage=image)


class LabelStyleable(Capability):
    _label_font: int = 0
    _label_size: int = 14

    @property
    def label_font(self) -> int:
        return self._label_font

    @property
    def label_size(self) -> int:
        return self._label_size

    def set_label_font(self, index: int) -> None:
        """Select a font by table index; callers validate with lookup_font()."""
        font = lookup_font(index)
        if font is None:
            raise ValueError(f"Font index {index} is outside the font table.")
        self._label_font = index
        self._sync(label_font=(font, self._label_size))

    def set_label_size(self, size: int) -> None:
        self._label_size = size
        font = lookup_font(self._label_font)
        self._sync(label_font=(font, size))


class Alignable(Capability):
    _align: int = const.ALIGN_CENTER

    @property
    def align(self) -> int:
        return self._align

    def set_align(self, mask: int) -> None:
        self._align = mask
        self._sync(align=align_to_anchor(mask))


class Triggerable(Capability):
    """Event-firing condition bit-mask (when the callback runs)."""

    _trigger: int = const.WHEN_RELEASE

    @property
    def trigger(self) -> int:
        return self._trigger

    def set_trigger(self, mask: int) -> None:
        self._trigger = mask


class FrameStyleable(Capability):
    _frame: Optional[FrameStyle] = None

    @property
    def frame(self) -> Optional[FrameStyle]:
        return self._frame

    def set_frame(self, style: FrameStyle) -> None:
        self._frame = style
        self._sync(frame=style)


class ButtonCapable(FrameStyleable):
    """Pressed-state frame and keyboard shortcut on top of frame styling."""

    _down_frame: Optional[FrameStyle] = None
    _shortcut: Optional[Shortcut] = None

    @property
    def down_frame(self) -> Optional[FrameStyle]:
        return self._down_frame

    @property
    def shortcut(self) -> Optional[Shortcut]:
        return self._shortcut

    def set_down_frame(self, style: FrameStyle) -> None:
        self._down_frame = style
        self._sync(down_frame=style)

    def set_shortcut(self, shortcut: Shortcut) -> None:
        self._shortcut = shortcut
        self.toolkit.backend.bind_shortcut(self, shortcut.sequence)  # type: ignore[attr-defined]


# -----------------------------------------------------------------------------
# TEXT
# -----------------------------------------------------------------------------

class TextBuffer:
    """Plain text storage shared by text displays and editors."""

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._observers: List[Any] = []

    def text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = text
        self._notify()

    def append(self, text: str) -> None:
        self._text += text
        self._notify()

    def length(self) -> int:
        return len(self._text)

    def add_observer(self, fn: Any) -> None:
        self._observers.append(fn)

    def _set_silently(self, text: str) -> None:
        # Native edits flow back without echoing to the native widget
        self._text = text

    def _notify(self) -> None:
        for fn in list(self._observers):
            fn(self._text)


class TextCapable(Capability):
    """
    Text colour, font and size for widgets that render editable or scrolled text.

    Kinds with `has_buffer = True` must own a TextBuffer before the text
    attributes are applied; the dispatcher calls ensure_buffer() first.
    """

    has_buffer: bool = False

    _text_color: Optional[str] = None
    _text_font: int = 0
    _text_size: int = 14
    _buffer: Optional[TextBuffer] = None

    @property
    def text_color(self) -> Optional[str]:
        return self._text_color

    @property
    def text_font(self) -> int:
        return self._text_font

    @property
    def text_size(self) -> int:
        return self._text_size

    @property
    def buffer(self) -> Optional[TextBuffer]:
        return self._buffer

    def set_buffer(self, buffer: TextBuffer) -> None:
        self._buffer = buffer
        buffer.add_observer(lambda text: self._sync(text=text))
        self._sync(text=buffer.text())

    def ensure_buffer(self) -> Optional[TextBuffer]:
        if self.has_buffer and self._buffer is None:
            self.set_buffer(TextBuffer())
        return self._buffer

    def set_text_color(self, value: str) -> None:
        self._text_color = value
        self._sync(text_color=value)

    def set_text_font(self, index: int) -> None:
        font = lookup_font(index)
        if font is None:
            raise ValueError(f"Font index {index} is outside the font table.")
        self._text_font = index
        self._sync(text_font=(font, self._text_size))

    def set_text_size(self, size: int) -> None:
        self._text_size = size
        self._sync(text_font=(lookup_font(self._text_font), size))


# -----------------------------------------------------------------------------
# NUMERIC RANGE
# -----------------------------------------------------------------------------

class RangeCapable(Capability):
    """Minimum, maximum, step and slider-thumb size of a range control."""

    _minimum: float = 0.0
    _maximum: float = 1.0
    _step: float = 0.0
    _slider_size: float = 0.08

    @property
    def minimum(self) -> float:
        return self._minimum

    @property
    def maximum(self) -> float:
        return self._maximum

    @property
    def step(self) -> float:
        return self._step

    @property
    def slider_size(self) -> float:
        return self._slider_size

    def set_minimum(self, value: float) -> None:
        self._minimum = value
        self._sync_range()

    def set_maximum(self, value: float) -> None:
        self._maximum = value
        self._sync_range()

    def set_step(self, value: float, divisor: int = 1) -> None:
        """Set the increment as value / divisor."""
        if divisor == 0:
            raise ValueError("Step divisor must be non-zero.")
        self._step = value / divisor
        self._sync_range()

    def set_slider_size(self, value: float) -> None:
        # Fraction of the track covered by the thumb
        self._slider_size = min(max(value, 0.0), 1.0)
        self._sync(slider_size=self._slider_size)

    def _sync_range(self) -> None:
        self._sync(range=(self._minimum, self._maximum, self._step))


# Every capability, in the order the dispatcher consults them.
ALL_CAPABILITIES: Tuple[type, ...] = (
    Identifiable,
    Positionable,
    FlexChild,
    FlexContainer,
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
    ButtonCapable,
    TextCapable,
    RangeCapable,
)

CAPABILITY_NAMES: Dict[type, str] = {cap: cap.__name__ for cap in ALL_CAPABILITIES}
