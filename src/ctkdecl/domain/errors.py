from __future__ import annotations

"""
Error Taxonomy.

Structural problems (unknown kinds) and attribute-level problems (bad
colours, indices, paths) are absorbed and never raise. The exceptions below
cover the remaining failure classes: unusable source files, unexpected
failures while constructing a node, and container scope misuse.
"""


class CtkDeclError(Exception):
    """Base class for all errors raised by the declarative engine."""


class SourceLoadError(CtkDeclError):
    """The initial description could not be read or parsed."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        msg = f"Could not load widget description from '{path}'"
        super().__init__(f"{msg}: {reason}" if reason else msg)


class WidgetBuildError(CtkDeclError):
    """A node failed to build; its partial widget has been discarded."""

    def __init__(self, kind: str, cause: BaseException) -> None:
        self.kind = kind
        self.cause = cause
        super().__init__(f"Failed to build '{kind}': {cause}")


class ScopeError(CtkDeclError):
    """A container was closed out of order."""
