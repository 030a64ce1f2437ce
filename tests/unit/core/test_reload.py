from __future__ import annotations

"""
Unit tests for the Hot-Reload Controller.

The watchdog observer is replaced by a fake and file events are delivered
by calling on_file_event() directly, so every test is deterministic.
Verifies:
1. Event filtering (kind, directory events, other files).
2. Coalescing of several writes into one rebuild.
3. A failed parse keeps the current hierarchy.
4. Timer re-arming and shutdown.
"""

import os
from typing import List
from unittest.mock import MagicMock

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileClosedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
)

from ctkdecl.core import loaders
from ctkdecl.core.reload import ReloadController, ReloadState
from ctkdecl.domain.errors import WidgetBuildError
from ctkdecl.domain.model import WidgetNode


class _FakeObserver:
    def __init__(self) -> None:
        self.scheduled = []
        self.started = False
        self.stopped = False
        self.joined = False

    def schedule(self, handler, path, recursive=False) -> None:
        self.scheduled.append((handler, path, recursive))

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def join(self, timeout=None) -> None:
        self.joined = True


@pytest.fixture
def source(tmp_path) -> str:
    path = tmp_path / "gui.json"
    path.write_text('{"widget": "Column", "children": [{"widget": "Button", "label": "v1"}]}', encoding="utf-8")
    return str(path)


@pytest.fixture
def rebuilt() -> List[WidgetNode]:
    return []


@pytest.fixture
def controller(source: str, toolkit, rebuilt: List[WidgetNode]) -> ReloadController:
    observer = _FakeObserver()
    ctl = ReloadController(
        source,
        loaders.load_json,
        rebuilt.append,
        MagicMock(name="setup"),
        toolkit,
        poll_interval_ms=50,
        observer_factory=lambda: observer,
    )
    ctl.fake_observer = observer
    return ctl


def _write(path: str, label: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(f'{{"widget": "Column", "children": [{{"widget": "Button", "label": "{label}"}}]}}')


def test_start_watches_parent_directory(controller: ReloadController, source: str, backend) -> None:
    """TC-01: Verify start() schedules the containing directory and arms the timer."""
    controller.start()

    handler, path, recursive = controller.fake_observer.scheduled[0]
    assert path == os.path.dirname(os.path.abspath(source))
    assert recursive is False
    assert controller.fake_observer.started
    assert controller.running
    assert backend.pending_timers() == 1


@pytest.mark.parametrize("event_cls", [FileModifiedEvent, FileClosedEvent])
def test_write_events_queue_a_tree(controller: ReloadController, source: str, event_cls) -> None:
    """TC-02: Verify content-write events parse the file and await a rebuild."""
    assert controller.on_file_event(event_cls(source)) is True
    assert controller.state is ReloadState.AWAITING_REBUILD


@pytest.mark.parametrize("event_cls", [FileCreatedEvent, FileDeletedEvent])
def test_other_event_types_are_ignored(controller: ReloadController, source: str, event_cls) -> None:
    """TC-03: Verify creation and deletion do not trigger a reload."""
    assert controller.on_file_event(event_cls(source)) is False
    assert controller.state is ReloadState.IDLE


def test_other_paths_and_directories_are_ignored(controller: ReloadController, source: str, tmp_path) -> None:
    """TC-04: Verify sibling files and directory events are filtered out."""
    sibling = tmp_path / "notes.txt"
    sibling.write_text("x", encoding="utf-8")

    assert controller.on_file_event(FileModifiedEvent(str(sibling))) is False
    assert controller.on_file_event(DirModifiedEvent(str(tmp_path))) is False


def test_poll_without_events_does_nothing(controller: ReloadController, rebuilt) -> None:
    """TC-05: Verify an idle poll neither rebuilds nor runs setup."""
    assert controller.poll() is False
    assert rebuilt == []
    controller.setup.assert_not_called()


def test_rapid_writes_are_coalesced(controller: ReloadController, source: str, rebuilt) -> None:
    """TC-06: Verify several writes between polls rebuild once from the newest tree."""
    for label in ("v2", "v3", "v4"):
        _write(source, label)
        controller.on_file_event(FileModifiedEvent(source))

    assert controller.poll() is True
    assert len(rebuilt) == 1
    assert rebuilt[0].children[0].label == "v4"
    controller.setup.assert_called_once_with()
    assert controller.state is ReloadState.IDLE
    assert controller.reloads == 1


def test_failed_parse_keeps_current_widgets(controller: ReloadController, source: str, rebuilt) -> None:
    """TC-07: Verify an unparsable save queues nothing and later saves still work."""
    with open(source, "w", encoding="utf-8") as f:
        f.write('{"widget": "Column", "children": [')

    assert controller.on_file_event(FileModifiedEvent(source)) is False
    assert controller.poll() is False
    assert rebuilt == []

    _write(source, "fixed")
    controller.on_file_event(FileModifiedEvent(source))
    assert controller.poll() is True
    assert rebuilt[0].children[0].label == "fixed"


def test_build_error_skips_setup(source: str, toolkit) -> None:
    """TC-08: Verify a failing rebuild is logged and setup is not re-run."""
    setup = MagicMock()
    ctl = ReloadController(
        source,
        loaders.load_json,
        MagicMock(side_effect=WidgetBuildError("Button", RuntimeError("x"))),
        setup,
        toolkit,
        observer_factory=_FakeObserver,
    )
    ctl.on_file_event(FileModifiedEvent(source))

    assert ctl.poll() is False
    setup.assert_not_called()
    assert ctl.reloads == 0
    assert ctl.state is ReloadState.IDLE


def test_setup_exception_does_not_escape(controller: ReloadController, source: str) -> None:
    """TC-09: Verify an exception raised by setup is contained."""
    controller.setup.side_effect = KeyError("missing")
    controller.on_file_event(FileModifiedEvent(source))

    assert controller.poll() is True


def test_timer_rearms_and_polls(controller: ReloadController, source: str, backend, rebuilt) -> None:
    """TC-10: Verify the UI-thread timer keeps polling on the configured period."""
    controller.start()
    controller.on_file_event(FileModifiedEvent(source))

    fired = backend.advance(120)

    assert fired == 2
    assert len(rebuilt) == 1
    assert backend.pending_timers() == 1


def test_stop_halts_observer_and_timer(controller: ReloadController, backend) -> None:
    """TC-11: Verify stop() joins the observer and the next tick does not re-arm."""
    controller.start()
    observer = controller.fake_observer
    controller.stop()
    backend.advance(100)

    assert observer.stopped and observer.joined
    assert not controller.running
    assert backend.pending_timers() == 0


def test_undecodable_save_keeps_watching(controller: ReloadController, source: str, rebuilt) -> None:
    """TC-12: Verify a save with invalid UTF-8 queues nothing and the next save reloads."""
    with open(source, "wb") as f:
        f.write(b'{"widget": "Frame", "label": "\xff"}')

    assert controller.on_file_event(FileModifiedEvent(source)) is False
    assert controller.state is ReloadState.IDLE

    _write(source, "v2")
    assert controller.on_file_event(FileModifiedEvent(source)) is True
    assert controller.poll() is True
    assert rebuilt[-1].children[0].label == "v2"


def test_raising_loader_is_contained(source: str, toolkit) -> None:
    """TC-13: Verify an exception from a custom loader is logged, not propagated."""
    def loader(path: str) -> WidgetNode:
        raise RuntimeError("custom loader failed")

    ctl = ReloadController(source, loader, MagicMock(), MagicMock(), toolkit,
                           observer_factory=_FakeObserver)

    assert ctl.on_file_event(FileModifiedEvent(source)) is False
    assert ctl.state is ReloadState.IDLE
