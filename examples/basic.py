"""
Custom loader example: any callable mapping a path to a tree (or None) works.

    python examples/basic.py
"""

import os
import sys

import json5

from ctkdecl.app import DeclarativeApp
from ctkdecl.domain.model import WidgetNode

PATH = os.path.join(os.path.dirname(__file__), "gui.json")


def load_fn(path):
    try:
        with open(path, encoding="utf-8") as f:
            return WidgetNode.from_dict(json5.load(f))
    except (OSError, ValueError) as e:
        # Surface parse errors on the console while editing
        print(e, file=sys.stderr)
        return None


if __name__ == "__main__":
    DeclarativeApp(200, 300, "MyApp", PATH, load_fn).run()
