"""
MainWindow — top-level application window for the user roster GUI.

Hosts a single UserListPage. The window does not own the view model; the
caller creates it (see src.cli.main.cmd_gui) and closes it after the Qt
event loop exits.
"""

import logging

from PyQt6.QtGui import QCloseEvent
from PyQt6.QtWidgets import QMainWindow, QWidget

from src.gui.pages.user_list import UserListPage
from src.gui.viewmodels import UserListViewModel

__all__ = ["MainWindow"]

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Root window: one page with the live list and its two buttons."""

    def __init__(self, vm: UserListViewModel, parent: QWidget = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("User Roster")
        self.resize(360, 480)

        self._page = UserListPage(vm)
        self.setCentralWidget(self._page)

    @property
    def page(self) -> UserListPage:
        return self._page

    def closeEvent(self, event: QCloseEvent) -> None:
        self._page.detach()
        super().closeEvent(event)
