"""
Choice example loaded from JSON5.

    python examples/menu.py
"""

import os

from ctkdecl.app import DeclarativeApp

PATH = os.path.join(os.path.dirname(__file__), "menu.json5")


def setup(win):
    choice = win.find("choice")
    label = win.find("label")
    if choice is None or label is None:
        return
    choice.add_choice("JAN|FEB|MAR|APR|MAY|JUN|JUL|AUG|SEP|OCT|NOV|DEC")
    choice.set_callback(lambda c: label.set_label(str(c.choice())))


if __name__ == "__main__":
    DeclarativeApp.from_json5(200, 300, "MyApp", PATH).run(setup)
