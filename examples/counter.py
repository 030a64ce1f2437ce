"""
Counter example: edit gui.json while the window is open and watch it reload.

    python examples/counter.py
"""

import os

from ctkdecl.app import DeclarativeApp
from ctkdecl.core.state import SharedState
from ctkdecl.infra.logging import LoggingConfig, configure_logging

PATH = os.path.join(os.path.dirname(__file__), "gui.json")


def main() -> None:
    configure_logging(LoggingConfig(level="INFO"))
    count = SharedState(0)

    def setup(win):
        result = win.find("result")

        def on_click(button):
            step = 1 if button.label == "Inc" else -1
            result.set_label(str(count.update(lambda n: n + step)))

        # Runs again after every reload: handles are new, so look them up by id
        for widget_id in ("inc", "dec"):
            button = win.find(widget_id)
            if button is not None:
                button.set_callback(on_click)
        if result is not None:
            result.set_label(str(count.get()))

    DeclarativeApp.from_json(200, 300, "MyApp", PATH).run(setup)


if __name__ == "__main__":
    main()
