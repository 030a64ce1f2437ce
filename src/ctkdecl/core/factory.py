from __future__ import annotations

"""
Widget Factory.

Turns description nodes into live handles: resolves the node's type tag
against the registry, constructs the handle inside the currently open
container and hands it to the attribute dispatcher. Construction is atomic:
a node either yields a fully configured handle or leaves no trace.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ctkdecl.core.dispatcher import apply_attributes
from ctkdecl.core.registry import WidgetRegistry, default_registry
from ctkdecl.domain.errors import WidgetBuildError
from ctkdecl.domain.model import WidgetNode
from ctkdecl.toolkit.context import Toolkit
from ctkdecl.toolkit.widgets import Group, Widget

logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    """Outcome counters of one tree build."""
    built: int = 0
    dropped_kinds: List[str] = field(default_factory=list)


class WidgetFactory:
    """
    Builds description trees with a given toolkit and registry.

    Args:
        toolkit: Context whose open container receives top-level nodes.
        registry: Kind table; defaults to the built-in kinds.
    """

    def __init__(self, toolkit: Toolkit, registry: Optional[WidgetRegistry] = None) -> None:
        self.toolkit = toolkit
        self.registry = registry or default_registry()
        self.report = BuildReport()

    def reset_report(self) -> None:
        """Start counting a new build from zero."""
        self.report = BuildReport()

    def build(self, node: WidgetNode) -> Optional[Widget]:
        """
        Build `node` and its subtree inside the open container.

        Args:
            node: Description node.

        Returns:
            Optional[Widget]: The new handle, or None when the kind is unknown
            (the whole subtree is skipped).

        Raises:
            WidgetBuildError: If construction fails unexpectedly. The partial
                handle is discarded and the scope stack restored first.
        """
        kind = self.registry.get(node.kind)
        if kind is None:
            logger.warning(f"Factory: Unknown widget kind '{node.kind}'; dropping it and its subtree.")
            self.report.dropped_kinds.append(node.kind)
            return None

        depth = self.toolkit.depth()
        parent = self.toolkit.current()
        siblings = parent.children if parent is not None else []
        handle: Optional[Widget] = None
        try:
            handle = kind.construct(self.toolkit)
            apply_attributes(handle, node, self.build)
        except WidgetBuildError:
            self._discard(handle, depth, parent, siblings)
            raise
        except Exception as e:
            self._discard(handle, depth, parent, siblings)
            raise WidgetBuildError(node.kind, e) from e

        self.report.built += 1
        return handle

    def _discard(
            self,
            handle: Optional[Widget],
            depth: int,
            parent: Optional[Group],
            siblings: List[Widget],
    ) -> None:
        self.toolkit.unwind(depth)
        doomed = [handle] if handle is not None else []
        if parent is not None:
            # A constructor that failed after attaching never returned its handle
            doomed += [c for c in parent.children if c not in siblings and c is not handle]
        for w in doomed:
            w.detach()
            w.destroy()


def build(node: WidgetNode, toolkit: Toolkit, registry: Optional[WidgetRegistry] = None) -> Optional[Widget]:
    """Build one tree with a throwaway factory."""
    return WidgetFactory(toolkit, registry).build(node)
