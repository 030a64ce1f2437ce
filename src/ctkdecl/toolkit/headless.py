from __future__ import annotations

"""
Headless Rendering Backend.

Realizes widget handles as plain in-memory records so that trees can be built,
inspected, exported and driven without a display server. Timers live on a
virtual clock that only moves when `advance()` is called (or a run budget is
configured), which keeps reload polling deterministic.
"""

import heapq
import itertools
import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

from ctkdecl.toolkit.backend import Backend

if TYPE_CHECKING:
    from ctkdecl.toolkit.widgets import Widget, Window

logger = logging.getLogger(__name__)


@dataclass
class HeadlessNative:
    """Record standing in for a native widget."""
    kind: str
    tag: str
    options: Dict[str, Any] = field(default_factory=dict)
    geometry: Tuple[int, int, int, int] = (0, 0, 0, 0)
    visible: bool = True
    active: bool = True
    value: Any = None
    shortcuts: List[str] = field(default_factory=list)
    destroyed: bool = False


@dataclass(frozen=True)
class HeadlessImage:
    """Image placeholder; only existence of the file is checked."""
    path: str


class HeadlessBackend(Backend):
    """
    In-memory backend used by the test-suite, `check` and `snapshot`.

    Args:
        run_budget_ms: Virtual time `run()` may consume before returning.
            Zero fires only the timers already due.
    """

    name = "headless"

    def __init__(self, run_budget_ms: int = 0) -> None:
        self.run_budget_ms = run_budget_ms
        self.now = 0
        self.natives: List[HeadlessNative] = []
        self.shown: List["Window"] = []
        self.redraws = 0
        self._timers: List[Tuple[int, int, Callable[[], None]]] = []
        self._seq = itertools.count()
        self._quit = False
        self._shortcuts: Dict[str, List["Widget"]] = {}

    # -------------------------------------------------------------------------
    # Widget lifecycle
    # -------------------------------------------------------------------------

    def create(self, handle: "Widget") -> HeadlessNative:
        native = HeadlessNative(kind=handle.native_kind, tag=handle.kind, options=dict(handle.native_options))
        self.natives.append(native)
        return native

    def configure(self, handle: "Widget", **options: Any) -> None:
        handle.native.options.update(options)

    def place(self, handle: "Widget") -> None:
        handle.native.geometry = handle.geometry()

    def set_visible(self, handle: "Widget", visible: bool) -> None:
        handle.native.visible = visible

    def set_active(self, handle: "Widget", active: bool) -> None:
        handle.native.active = active

    def destroy(self, handle: "Widget") -> None:
        handle.native.destroyed = True
        for seq, bound in list(self._shortcuts.items()):
            self._shortcuts[seq] = [w for w in bound if w is not handle]

    # -------------------------------------------------------------------------
    # Values and input
    # -------------------------------------------------------------------------

    def read_value(self, handle: "Widget") -> Any:
        return handle.native.value

    def write_value(self, handle: "Widget", value: Any) -> None:
        handle.native.value = value

    def bind_shortcut(self, handle: "Widget", sequence: str) -> None:
        handle.native.shortcuts.append(sequence)
        self._shortcuts.setdefault(sequence, []).append(handle)

    def load_image(self, path: str) -> HeadlessImage:
        if not os.path.isfile(path):
            raise OSError(f"Image file not found: {path}")
        return HeadlessImage(path=os.path.abspath(path))

    # -------------------------------------------------------------------------
    # Windows and event loop
    # -------------------------------------------------------------------------

    def show(self, window: "Window") -> None:
        if window not in self.shown:
            self.shown.append(window)

    def add_timeout(self, ms: int, callback: Callable[[], None]) -> None:
        heapq.heappush(self._timers, (self.now + max(int(ms), 0), next(self._seq), callback))

    def redraw(self) -> None:
        self.redraws += 1

    def run(self) -> None:
        self._quit = False
        self.advance(self.run_budget_ms)

    def quit(self) -> None:
        self._quit = True

    # -------------------------------------------------------------------------
    # Simulation helpers
    # -------------------------------------------------------------------------

    def advance(self, ms: int) -> int:
        """
        Move the virtual clock forward, firing due timers in order.

        Timers scheduled by a firing callback run in the same call when they
        fall due within the window.

        Returns:
            int: Number of callbacks fired.
        """
        deadline = self.now + ms
        fired = 0
        while self._timers and self._timers[0][0] <= deadline and not self._quit:
            due, _, callback = heapq.heappop(self._timers)
            self.now = max(self.now, due)
            callback()
            fired += 1
        if not self._quit:
            self.now = deadline
        return fired

    def pending_timers(self) -> int:
        return len(self._timers)

    def click(self, handle: "Widget") -> None:
        """Simulate a user activation (button press, menu pick, ...)."""
        if not handle.visible_r():
            logger.debug(f"Headless: Ignoring click on hidden '{handle.kind}'.")
            return
        if getattr(handle, "toggle", False) and not getattr(handle, "radio", False):
            handle.native.value = not handle.native.value
        handle._on_native_event()

    def press(self, sequence: str) -> int:
        """Simulate a key sequence; returns how many bound widgets fired."""
        fired = 0
        for handle in list(self._shortcuts.get(sequence, [])):
            if handle.visible_r() and handle.active:
                handle.do_callback()
                fired += 1
        return fired

    def live(self) -> List[HeadlessNative]:
        return [n for n in self.natives if not n.destroyed]


def native_of(handle: "Widget") -> Optional[HeadlessNative]:
    """Typed accessor for tests and diagnostics."""
    native = handle.native
    return native if isinstance(native, HeadlessNative) else None
