from __future__ import annotations

"""
Declarative Application Shell.

Composes the engine: loads the initial description, creates the top-level
window, builds the tree into it, runs the event loop and (for file-backed
apps) keeps the window in sync with the file through the reload controller.
"""

import logging
from typing import Any, Callable, Dict, Optional

from ctkdecl.core import loaders
from ctkdecl.core.factory import WidgetFactory
from ctkdecl.core.registry import WidgetRegistry
from ctkdecl.core.reload import ReloadController
from ctkdecl.core.snapshot import dump_svg
from ctkdecl.core.validator import validate_config
from ctkdecl.domain.config import get_default_config
from ctkdecl.domain.errors import SourceLoadError
from ctkdecl.domain.model import WidgetNode
from ctkdecl.toolkit.backend import Backend
from ctkdecl.toolkit.context import Toolkit
from ctkdecl.toolkit.widgets import Widget, Window

logger = logging.getLogger(__name__)

Loader = Callable[[str], Optional[WidgetNode]]
Setup = Callable[[Window], None]


class DeclarativeApp:
    """
    A window whose contents come from a declarative widget description.

    Args:
        width, height: Window size in pixels.
        title: Window title.
        path: Description file (None for inline trees).
        loader: Parser for `path`.
        backend: Rendering backend; defaults to customtkinter.
        config: Preferences (validated; defaults when omitted).
        registry: Widget kind table; defaults to the built-in kinds.
        tree: Pre-parsed description used instead of loading `path`.

    Raises:
        SourceLoadError: If the initial description cannot be loaded.
    """

    def __init__(
            self,
            width: int,
            height: int,
            title: str,
            path: Optional[str],
            loader: Optional[Loader],
            *,
            backend: Optional[Backend] = None,
            config: Optional[Dict[str, Any]] = None,
            registry: Optional[WidgetRegistry] = None,
            tree: Optional[WidgetNode] = None,
    ) -> None:
        self.width = width
        self.height = height
        self.title = title
        self.path = path
        self.loader = loader

        self.config, warnings = validate_config(config if config is not None else get_default_config())
        for w in warnings:
            logger.warning(f"Config: {w}")

        if tree is None:
            if path is None or loader is None:
                raise ValueError("Either a source path with a loader or an inline tree is required.")
            tree = loader(path)
            if tree is None:
                raise SourceLoadError(path, "see log for details")
        self.tree = tree

        self._backend = backend
        self._registry = registry
        self._toolkit: Optional[Toolkit] = None
        self._factory: Optional[WidgetFactory] = None
        self.window: Optional[Window] = None
        self.reloader: Optional[ReloadController] = None

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_json(cls, width: int, height: int, title: str, path: str, **kwargs: Any) -> "DeclarativeApp":
        return cls(width, height, title, path, loaders.load_json, **kwargs)

    @classmethod
    def from_json5(cls, width: int, height: int, title: str, path: str, **kwargs: Any) -> "DeclarativeApp":
        return cls(width, height, title, path, loaders.load_json5, **kwargs)

    @classmethod
    def from_yaml(cls, width: int, height: int, title: str, path: str, **kwargs: Any) -> "DeclarativeApp":
        return cls(width, height, title, path, loaders.load_yaml, **kwargs)

    @classmethod
    def from_toml(cls, width: int, height: int, title: str, path: str, **kwargs: Any) -> "DeclarativeApp":
        return cls(width, height, title, path, loaders.load_toml, **kwargs)

    @classmethod
    def from_xml(cls, width: int, height: int, title: str, path: str, **kwargs: Any) -> "DeclarativeApp":
        return cls(width, height, title, path, loaders.load_xml, **kwargs)

    @classmethod
    def from_path(cls, width: int, height: int, title: str, path: str, fmt: Optional[str] = None,
                  **kwargs: Any) -> "DeclarativeApp":
        """Choose the loader from `fmt` or the file extension."""
        return cls(width, height, title, path, loaders.loader_for_path(path, fmt), **kwargs)

    @classmethod
    def inline(cls, width: int, height: int, title: str, tree: WidgetNode, **kwargs: Any) -> "DeclarativeApp":
        """App over an in-memory tree; it never watches a file."""
        return cls(width, height, title, None, None, tree=tree, **kwargs)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def is_inline(self) -> bool:
        return self.path is None

    @property
    def backend(self) -> Backend:
        if self._backend is None:
            # Imported lazily so headless use never needs a display
            from ctkdecl.toolkit.ctk_backend import CtkBackend
            self._backend = CtkBackend(self.config["appearance_mode"], self.config["color_theme"])
        return self._backend

    @property
    def toolkit(self) -> Toolkit:
        if self._toolkit is None:
            self._toolkit = Toolkit(self.backend)
        return self._toolkit

    @property
    def factory(self) -> WidgetFactory:
        if self._factory is None:
            self._factory = WidgetFactory(self.toolkit, self._registry)
        return self._factory

    def find(self, widget_id: str) -> Optional[Widget]:
        return self.window.find(widget_id) if self.window is not None else None

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def build(self) -> Window:
        """Create the window and build the current tree into it (once)."""
        if self.window is None:
            self.window = Window(self.toolkit, self.width, self.height, self.title)
            self._populate(self.tree)
        return self.window

    def rebuild(self, tree: WidgetNode) -> None:
        """Replace the window contents with a hierarchy built from `tree`."""
        window = self.build()
        window.clear()
        self.toolkit.begin(window)
        self.tree = tree
        self.factory.reset_report()
        self._populate(tree)
        self.toolkit.redraw()

    def _populate(self, tree: WidgetNode) -> None:
        window = self.window
        try:
            self.factory.build(tree)
        finally:
            self.toolkit.end(window)
        window.fit_first_child()
        logger.debug(f"App: Built {window.count_descendants()} widget(s) into '{self.title}'.")

    # -------------------------------------------------------------------------
    # Running
    # -------------------------------------------------------------------------

    def run(self, setup: Optional[Setup] = None) -> None:
        """
        Show the window, run `setup` once, watch the source file and enter
        the event loop. Inline apps behave as run_once().
        """
        if self.is_inline:
            self.run_once(setup)
            return

        window = self._start(setup)
        self.reloader = ReloadController(
            self.path,
            self.loader,
            self.rebuild,
            lambda: self._call_setup(setup, window),
            self.toolkit,
            poll_interval_ms=self.config["poll_interval_ms"],
        )
        self.reloader.start()
        try:
            self.toolkit.run()
        finally:
            self.reloader.stop()

    def run_once(self, setup: Optional[Setup] = None) -> None:
        """Show the window, run `setup` and enter the event loop without watching."""
        self._start(setup)
        self.toolkit.run()

    def quit(self) -> None:
        self.toolkit.quit()

    def dump_image(self, path: Optional[str] = None) -> str:
        """
        Write an SVG snapshot of the hierarchy.

        Args:
            path: Output file; defaults to the configured snapshot path.

        Returns:
            str: The path written.
        """
        return dump_svg(self.build(), path or self.config["snapshot_path"])

    def _start(self, setup: Optional[Setup]) -> Window:
        window = self.build()
        window.show()
        self._call_setup(setup, window)
        return window

    @staticmethod
    def _call_setup(setup: Optional[Setup], window: Window) -> None:
        if setup is not None:
            setup(window)
