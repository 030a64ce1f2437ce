from __future__ import annotations

"""
Toolkit Context and Open-Container Scope.

Newly constructed widgets attach to whichever container is currently open.
Constructing a container opens it; closing it runs its layout. The context
also forwards timer scheduling to the backend.
"""

import logging
from typing import TYPE_CHECKING, Callable, List, Optional

from ctkdecl.domain.errors import ScopeError
from ctkdecl.toolkit.backend import Backend

if TYPE_CHECKING:
    from ctkdecl.toolkit.widgets import Group

logger = logging.getLogger(__name__)


class Toolkit:
    """
    Owns the rendering backend and the stack of open containers.

    Only the UI thread may touch a Toolkit or any handle created through it.
    """

    def __init__(self, backend: Backend) -> None:
        self.backend = backend
        self._open: List["Group"] = []

    # -------------------------------------------------------------------------
    # Scope management
    # -------------------------------------------------------------------------

    def current(self) -> Optional["Group"]:
        """Return the container that receives newly constructed widgets."""
        return self._open[-1] if self._open else None

    def begin(self, group: "Group") -> None:
        if self._open and self._open[-1] is group:
            return
        self._open.append(group)

    def end(self, group: "Group") -> None:
        """
        Close a container's scope and lay out its children.

        Raises:
            ScopeError: If `group` is not the innermost open container.
        """
        if not self._open or self._open[-1] is not group:
            raise ScopeError(f"Cannot close '{group.kind}': it is not the innermost open container.")
        self._open.pop()
        group.layout()

    def depth(self) -> int:
        return len(self._open)

    def unwind(self, depth: int) -> None:
        """Drop open scopes above `depth` without running their layouts."""
        if len(self._open) > depth:
            logger.debug(f"Scope: Unwinding {len(self._open) - depth} open container(s).")
            del self._open[depth:]

    # -------------------------------------------------------------------------
    # Event loop forwarding
    # -------------------------------------------------------------------------

    def add_timeout(self, ms: int, callback: Callable[[], None]) -> None:
        self.backend.add_timeout(ms, callback)

    def redraw(self) -> None:
        self.backend.redraw()

    def run(self) -> None:
        self.backend.run()

    def quit(self) -> None:
        self.backend.quit()
