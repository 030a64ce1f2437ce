from __future__ import annotations

"""
Widget Kind Registry.

Acts as the single authority mapping description type tags to handle
constructors. Each entry bundles the constructor with the capability set of
the handle it produces, which is what the attribute dispatcher consults.
The registry is open for extension: applications may register extra kinds
without touching the dispatcher.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Type

from ctkdecl.toolkit import widgets as w
from ctkdecl.toolkit.capabilities import ALL_CAPABILITIES, CAPABILITY_NAMES
from ctkdecl.toolkit.context import Toolkit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WidgetKind:
    """
    Registry entry for one type tag.

    Attributes:
        tag: Description type tag (e.g. 'Button', 'Column').
        cls: Handle class instantiated for the tag.
        options: Keyword arguments forwarded to the handle constructor.
        capabilities: Capability mixins the handle implements.
    """
    tag: str
    cls: Type[w.Widget]
    options: Dict[str, Any] = field(default_factory=dict)
    capabilities: FrozenSet[type] = frozenset()

    @property
    def is_container(self) -> bool:
        return self.cls.is_container

    def construct(self, toolkit: Toolkit) -> w.Widget:
        """Create a default-sized handle anchored at the open container."""
        return self.cls(toolkit, kind=self.tag, **self.options)

    def capability_names(self) -> List[str]:
        return sorted(CAPABILITY_NAMES[c] for c in self.capabilities)


class WidgetRegistry:
    """Closed-by-default mapping from type tag to WidgetKind."""

    def __init__(self) -> None:
        self._kinds: Dict[str, WidgetKind] = {}

    def register(self, tag: str, cls: Type[w.Widget], **options: Any) -> WidgetKind:
        """
        Register (or replace) the constructor for a type tag.

        Args:
            tag: Description type tag.
            cls: Handle class; must derive from Widget.
            **options: Constructor keyword arguments fixed for this tag.

        Returns:
            WidgetKind: The stored entry.

        Raises:
            TypeError: If `cls` is not a Widget subclass.
        """
        if not (isinstance(cls, type) and issubclass(cls, w.Widget)):
            raise TypeError(f"Cannot register '{tag}': {cls!r} is not a widget handle class.")
        if tag in self._kinds:
            logger.debug(f"Registry: Replacing kind '{tag}'.")
        kind = WidgetKind(tag=tag, cls=cls, options=dict(options), capabilities=capabilities_of(cls))
        self._kinds[tag] = kind
        return kind

    def get(self, tag: str) -> Optional[WidgetKind]:
        return self._kinds.get(tag)

    def __contains__(self, tag: object) -> bool:
        return tag in self._kinds

    def __len__(self) -> int:
        return len(self._kinds)

    def tags(self) -> List[str]:
        return sorted(self._kinds)

    def build(self, tag: str, toolkit: Toolkit) -> Optional[w.Widget]:
        """Construct a handle for `tag`, or None when the tag is unknown."""
        kind = self._kinds.get(tag)
        if kind is None:
            return None
        return kind.construct(toolkit)


def capabilities_of(cls: type) -> FrozenSet[type]:
    """Capability mixins implemented by a handle class."""
    return frozenset(c for c in ALL_CAPABILITIES if issubclass(cls, c))


# -----------------------------------------------------------------------------
# DEFAULT KIND TABLE
# -----------------------------------------------------------------------------

def default_registry() -> WidgetRegistry:
    """
    Build the registry of every built-in kind.

    Returns:
        WidgetRegistry: A fresh, independently mutable registry.
    """
    reg = WidgetRegistry()

    # Containers
    reg.register("Column", w.Flex, direction="column")
    reg.register("Row", w.Flex, direction="row")
    reg.register("Group", w.Group)
    reg.register("Pack", w.Pack)
    reg.register("Tabs", w.Tabs)
    reg.register("Scroll", w.Scroll)
    reg.register("Tile", w.Tile)

    # Buttons
    reg.register("Button", w.Button)
    reg.register("ReturnButton", w.Button)
    reg.register("RepeatButton", w.Button)
    reg.register("ToggleButton", w.Button, toggle=True)
    reg.register("CheckButton", w.Button, toggle=True)
    reg.register("LightButton", w.Button, toggle=True)
    reg.register("RoundButton", w.Button, toggle=True)
    reg.register("RadioButton", w.Button, radio=True)
    reg.register("RadioRoundButton", w.Button, radio=True)
    reg.register("RadioLightButton", w.Button, radio=True)

    # Static boxes
    reg.register("Frame", w.Frame)

    # Text
    reg.register("Input", w.Input)
    reg.register("IntInput", w.Input, input_type="int")
    reg.register("FloatInput", w.Input, input_type="float")
    reg.register("SecretInput", w.Input, input_type="secret")
    reg.register("FileInput", w.Input, input_type="file")
    reg.register("Output", w.Input, readonly=True)
    reg.register("MultilineInput", w.Input, native_kind="textbox")
    reg.register("MultilineOutput", w.Input, native_kind="textbox", readonly=True)
    reg.register("TextDisplay", w.TextDisplay)
    reg.register("TextEditor", w.TextDisplay, editable=True)
    reg.register("HelpView", w.HelpView)

    # Menus and choices
    reg.register("MenuBar", w.MenuBar)
    reg.register("SysMenuBar", w.MenuBar)
    reg.register("Choice", w.Choice)
    reg.register("InputChoice", w.Choice, editable=True)

    # Valuators
    reg.register("Slider", w.Valuator)
    reg.register("NiceSlider", w.Valuator, style="nice")
    reg.register("FillSlider", w.Valuator, style="fill")
    reg.register("ValueSlider", w.TextValuator)
    reg.register("HorSlider", w.Valuator, orientation="horizontal")
    reg.register("HorNiceSlider", w.Valuator, orientation="horizontal", style="nice")
    reg.register("HorFillSlider", w.Valuator, orientation="horizontal", style="fill")
    reg.register("HorValueSlider", w.TextValuator, orientation="horizontal")
    reg.register("Dial", w.Valuator, style="dial")
    reg.register("LineDial", w.Valuator, style="line-dial")
    reg.register("FillDial", w.Valuator, style="fill-dial")
    reg.register("Counter", w.Valuator, orientation="horizontal", style="counter")
    reg.register("Scrollbar", w.Valuator, style="scrollbar")
    reg.register("Roller", w.Valuator, style="roller")
    reg.register("Adjuster", w.Valuator, orientation="horizontal", style="adjuster")
    reg.register("ValueInput", w.TextValuator, orientation="horizontal", style="input")
    reg.register("ValueOutput", w.TextValuator, orientation="horizontal", style="output")

    # Lists, tables, trees
    reg.register("Browser", w.Browser)
    reg.register("SelectBrowser", w.Browser)
    reg.register("HoldBrowser", w.Browser)
    reg.register("MultiBrowser", w.Browser, multi=True)
    reg.register("FileBrowser", w.Browser)
    reg.register("CheckBrowser", w.CheckBrowser, multi=True)
    reg.register("Table", w.Table)
    reg.register("TableRow", w.Table, row_selection=True)
    reg.register("Tree", w.Tree)

    # Miscellaneous
    reg.register("Progress", w.Progress)
    reg.register("Spinner", w.Spinner)
    reg.register("Chart", w.Chart)
    reg.register("ColorChooser", w.ColorChooser)

    logger.debug(f"Registry: {len(reg)} built-in kinds registered.")
    return reg
