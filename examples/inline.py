"""
Inline example: the tree is embedded in the script, so nothing is watched.

    python examples/inline.py
"""

from ctkdecl.app import DeclarativeApp
from ctkdecl.core.loaders import parse_xml

GUI = """<?xml version="1.0" encoding="UTF-8"?>
<root>
    <widget>Column</widget>
    <children>
        <widget>Button</widget>
        <label>Click Me</label>
        <id>my_button</id>
        <labelcolor>#0000ff</labelcolor>
    </children>
</root>"""


if __name__ == "__main__":
    DeclarativeApp.inline(200, 300, "MyApp", parse_xml(GUI)).run_once()
