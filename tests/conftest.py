from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Headless toolkit fixtures so widget trees build without a display.
"""

import os
import sys

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from ctkdecl.core.factory import WidgetFactory  # noqa: E402
from ctkdecl.core.registry import default_registry  # noqa: E402
from ctkdecl.toolkit.context import Toolkit  # noqa: E402
from ctkdecl.toolkit.headless import HeadlessBackend  # noqa: E402
from ctkdecl.toolkit.widgets import Window  # noqa: E402

EXAMPLES_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "examples"))


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def backend() -> HeadlessBackend:
    """In-memory backend with a virtual clock."""
    return HeadlessBackend()


@pytest.fixture
def toolkit(backend: HeadlessBackend) -> Toolkit:
    return Toolkit(backend)


@pytest.fixture
def window(toolkit: Toolkit) -> Window:
    """
    Open 400x300 top-level window.

    The window stays open as the current container, so widgets constructed
    in a test attach to it.
    """
    return Window(toolkit, 400, 300, "Test")


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def factory(toolkit: Toolkit, registry) -> WidgetFactory:
    return WidgetFactory(toolkit, registry)


@pytest.fixture
def examples_dir() -> str:
    """Directory holding the shipped sample descriptions."""
    return EXAMPLES_DIR
