from __future__ import annotations

"""
Rendering Backend Interface.

The widget handles in this package hold the retained state of a GUI tree;
a Backend realizes that state with a concrete toolkit. All methods are
invoked from the UI thread only.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from ctkdecl.toolkit.widgets import Widget, Window


class Backend(ABC):
    """
    Contract between the handle layer and a drawing toolkit.

    Option names passed to `configure` are toolkit-neutral:
    label, color, label_color, selection_color, text_color, text_font,
    text_size, label_font, label_size, tooltip, image, deimage, align,
    frame, down_frame, range, slider_size, items, title.
    """

    name: str = "abstract"

    # -------------------------------------------------------------------------
    # Widget lifecycle
    # -------------------------------------------------------------------------

    @abstractmethod
    def create(self, handle: "Widget") -> Any:
        """Create the native object for a handle whose parent is already realized."""

    @abstractmethod
    def configure(self, handle: "Widget", **options: Any) -> None:
        """Push changed handle state to the native object."""

    @abstractmethod
    def place(self, handle: "Widget") -> None:
        """Apply the handle's parent-relative geometry."""

    @abstractmethod
    def set_visible(self, handle: "Widget", visible: bool) -> None:
        ...

    @abstractmethod
    def set_active(self, handle: "Widget", active: bool) -> None:
        ...

    @abstractmethod
    def destroy(self, handle: "Widget") -> None:
        ...

    # -------------------------------------------------------------------------
    # Values and input
    # -------------------------------------------------------------------------

    @abstractmethod
    def read_value(self, handle: "Widget") -> Any:
        """Return the user-editable value held by the native object."""

    @abstractmethod
    def write_value(self, handle: "Widget", value: Any) -> None:
        ...

    @abstractmethod
    def bind_shortcut(self, handle: "Widget", sequence: str) -> None:
        """Route a key sequence on the handle's window to handle.do_callback()."""

    @abstractmethod
    def load_image(self, path: str) -> Any:
        """
        Load an image file.

        Raises:
            OSError: If the file is missing or not a decodable image.
        """

    # -------------------------------------------------------------------------
    # Windows and event loop
    # -------------------------------------------------------------------------

    @abstractmethod
    def show(self, window: "Window") -> None:
        ...

    @abstractmethod
    def add_timeout(self, ms: int, callback: Callable[[], None]) -> None:
        """Schedule a one-shot callback on the UI thread."""

    @abstractmethod
    def redraw(self) -> None:
        ...

    @abstractmethod
    def run(self) -> None:
        """Enter the blocking event loop."""

    @abstractmethod
    def quit(self) -> None:
        ...
