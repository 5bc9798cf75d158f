"""MenuController: Builds the header bar's application menu."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtGui import QAction
from PySide6.QtWidgets import QMainWindow, QMenu


class MenuController:
    """Creates the application menu and wires its actions.

    The menu is handed to the header bar's menu button rather than installed
    as a menu bar.
    """

    def __init__(self, main_window: QMainWindow) -> None:
        self.window = main_window
        self.actions: dict[str, QAction] = {}
        self.menu: QMenu | None = None

    def build_menu(self) -> QMenu:
        """Create the About / Quit menu handed to the header bar menu button."""
        menu = QMenu(self.window)
        self.actions["about"] = menu.addAction("About")
        menu.addSeparator()
        self.actions["quit"] = menu.addAction("Quit")
        self.menu = menu
        return menu

    def connect_actions(self, handlers: dict[str, Callable]) -> None:
        """Wire actions by name (`about`, `quit`) to callables."""
        if "about" in handlers:
            self.actions["about"].triggered.connect(handlers["about"])

        if "quit" in handlers:
            self.actions["quit"].triggered.connect(handlers["quit"])
        else:
            self.actions["quit"].triggered.connect(self.window.close)

    def get_action(self, name: str) -> QAction | None:
        return self.actions.get(name)
