from __future__ import annotations

"""
Hot-Reload Controller.

A watchdog observer thread watches the description file. When a write
completes it parses the file and hands the resulting tree (plain data, never
widget handles) to the UI thread through a queue. A timer on the UI thread
drains the queue, rebuilds the hierarchy from the newest tree and re-runs the
setup callback. Parse failures leave the displayed hierarchy untouched.
"""

import logging
import os
import queue
import threading
from enum import Enum
from typing import Any, Callable, Optional

from watchdog.events import EVENT_TYPE_CLOSED, EVENT_TYPE_MODIFIED, FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ctkdecl.domain import constants as const
from ctkdecl.domain.errors import WidgetBuildError
from ctkdecl.domain.model import WidgetNode
from ctkdecl.infra.fs import watch_target
from ctkdecl.toolkit.context import Toolkit

logger = logging.getLogger(__name__)

# Event kinds meaning "content written"; everything else is ignored.
RELOAD_EVENT_TYPES = (EVENT_TYPE_MODIFIED, EVENT_TYPE_CLOSED)


class ReloadState(Enum):
    IDLE = "idle"
    AWAITING_REBUILD = "awaiting_rebuild"
    REBUILDING = "rebuilding"


class _SourceFileHandler(FileSystemEventHandler):
    """Forwards every observer event to the controller."""

    def __init__(self, controller: "ReloadController") -> None:
        super().__init__()
        self.controller = controller

    def on_any_event(self, event: FileSystemEvent) -> None:
        self.controller.on_file_event(event)


class ReloadController:
    """
    Rebuilds a live hierarchy whenever its source file is rewritten.

    Args:
        path: Description file to watch.
        loader: Parses the file; returns None on failure.
        rebuild: Replaces the hierarchy with one built from a tree (UI thread).
        setup: User callback re-run after each rebuild (UI thread).
        toolkit: Provides the UI-thread timer.
        poll_interval_ms: Period of the UI-thread polling timer.
        observer_factory: Creates the watchdog observer (tests inject fakes).
    """

    def __init__(
            self,
            path: str,
            loader: Callable[[str], Optional[WidgetNode]],
            rebuild: Callable[[WidgetNode], None],
            setup: Callable[[], None],
            toolkit: Toolkit,
            *,
            poll_interval_ms: int = const.DEFAULT_POLL_INTERVAL_MS,
            observer_factory: Callable[[], Any] = Observer,
    ) -> None:
        self.path = path
        self.loader = loader
        self.rebuild = rebuild
        self.setup = setup
        self.toolkit = toolkit
        self.poll_interval_ms = poll_interval_ms
        self.observer_factory = observer_factory

        self._target = watch_target(path)
        self._pending: "queue.Queue[WidgetNode]" = queue.Queue()
        self._lock = threading.Lock()
        self._state = ReloadState.IDLE
        self._observer: Any = None
        self._running = False
        self.reloads = 0

    @property
    def state(self) -> ReloadState:
        with self._lock:
            return self._state

    @property
    def running(self) -> bool:
        return self._running

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Start watching and arm the polling timer."""
        if self._running:
            return
        directory = os.path.dirname(os.path.abspath(self.path))
        self._observer = self.observer_factory()
        self._observer.schedule(_SourceFileHandler(self), directory, recursive=False)
        self._observer.start()
        self._running = True
        self.toolkit.add_timeout(self.poll_interval_ms, self._tick)
        logger.info(f"Reload: Watching '{self.path}' (poll every {self.poll_interval_ms} ms).")

    def stop(self) -> None:
        """Stop the observer thread; the pending timer becomes a no-op."""
        self._running = False
        observer, self._observer = self._observer, None
        if observer is not None:
            observer.stop()
            observer.join(timeout=2.0)
            logger.debug("Reload: Observer stopped.")

    # -------------------------------------------------------------------------
    # Background thread
    # -------------------------------------------------------------------------

    def on_file_event(self, event: FileSystemEvent) -> bool:
        """
        Handle one observer event (observer thread).

        Returns:
            bool: True when a freshly parsed tree was queued.
        """
        if event.is_directory or event.event_type not in RELOAD_EVENT_TYPES:
            return False
        if watch_target(os.fsdecode(event.src_path)) != self._target:
            return False

        try:
            tree = self.loader(self.path)
        except Exception as e:
            # Anything raised here would end the observer thread
            logger.error(f"Reload: Loader for '{self.path}' raised {type(e).__name__}: {e}")
            tree = None
        if tree is None:
            logger.error(f"Reload: '{self.path}' failed to parse; keeping the current widgets.")
            return False

        with self._lock:
            self._pending.put(tree)
            if self._state is ReloadState.IDLE:
                self._state = ReloadState.AWAITING_REBUILD
        logger.debug(f"Reload: Queued new tree from {event.event_type} event.")
        return True

    # -------------------------------------------------------------------------
    # UI thread
    # -------------------------------------------------------------------------

    def _tick(self) -> None:
        if not self._running:
            return
        try:
            self.poll()
        finally:
            if self._running:
                self.toolkit.add_timeout(self.poll_interval_ms, self._tick)

    def poll(self) -> bool:
        """
        Apply the newest queued tree, if any (UI thread).

        Trees queued since the last poll are coalesced: only the last one is
        built and the setup callback runs once.

        Returns:
            bool: True if a rebuild happened.
        """
        tree: Optional[WidgetNode] = None
        while True:
            try:
                tree = self._pending.get_nowait()
            except queue.Empty:
                break
        if tree is None:
            return False

        with self._lock:
            self._state = ReloadState.REBUILDING

        rebuilt = False
        try:
            self.rebuild(tree)
            rebuilt = True
        except WidgetBuildError as e:
            logger.error(f"Reload: Rebuild failed: {e}")

        if rebuilt:
            self.reloads += 1
            logger.info(f"Reload: Rebuilt from '{self.path}' ({tree.count()} node(s)).")
            try:
                self.setup()
            except Exception as e:
                logger.exception(f"Reload: Setup callback raised: {e}")

        with self._lock:
            self._state = ReloadState.IDLE if self._pending.empty() else ReloadState.AWAITING_REBUILD
        return rebuilt
