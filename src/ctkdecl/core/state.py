from __future__ import annotations

"""
Shared Application State.

A lock-protected value that callbacks receive explicitly (typically captured
by the setup function) instead of reaching for module-level globals. Safe to
use from both the UI thread and worker threads.
"""

import threading
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class SharedState(Generic[T]):
    """
    Thread-safe holder for one application value.

    Example:
        count = SharedState(0)
        count.update(lambda n: n + 1)
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._lock = threading.Lock()

    def get(self) -> T:
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        with self._lock:
            self._value = value

    def update(self, fn: Callable[[T], T]) -> T:
        """Replace the value with fn(value) atomically and return the new value."""
        with self._lock:
            self._value = fn(self._value)
            return self._value

    def with_state(self, fn: Callable[[T], R]) -> R:
        """Run fn on the value while holding the lock (for in-place mutation)."""
        with self._lock:
            return fn(self._value)

    def __repr__(self) -> str:
        return f"SharedState({self.get()!r})"
