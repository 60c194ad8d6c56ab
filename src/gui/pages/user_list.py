"""
UserListPage — the single page of the roster GUI.

Layout
──────
  ┌───────────────────────────┐
  │ ┌───────────────────────┐ │
  │ │ G G - 1               │ │
  │ │ M B - 2               │ │
  │ └───────────────────────┘ │
  │ [Add User]                │
  │ [Remove User]             │
  └───────────────────────────┘
"""

import logging

from PyQt6.QtWidgets import (
    QListWidget,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from src.gui.viewmodels import UserListViewModel
from src.gui.worker import UsersSignalBridge

__all__ = ["UserListPage"]

logger = logging.getLogger(__name__)

# Names used by the "Add User" button
_NEW_FIRST_NAME = "M"
_NEW_LAST_NAME  = "B"


class UserListPage(QWidget):
    """Shows the live user list with add / remove buttons."""

    def __init__(self, vm: UserListViewModel, parent: QWidget = None) -> None:
        super().__init__(parent)
        self._vm = vm
        self._build_ui()
        self._bridge = UsersSignalBridge(vm, parent=self)
        self._bridge.users_changed.connect(self.set_users)
        self._bridge.start()

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        self._list = QListWidget()
        layout.addWidget(self._list)

        self._add_btn = QPushButton("Add User")
        self._add_btn.clicked.connect(self._on_add_clicked)
        layout.addWidget(self._add_btn)

        self._remove_btn = QPushButton("Remove User")
        self._remove_btn.clicked.connect(self._on_remove_clicked)
        layout.addWidget(self._remove_btn)

    # ── Slots ──────────────────────────────────────────────────────────────

    def _on_add_clicked(self) -> None:
        self._vm.add_user(_NEW_FIRST_NAME, _NEW_LAST_NAME)

    def _on_remove_clicked(self) -> None:
        self._vm.remove_last_user()

    # ── Public API ─────────────────────────────────────────────────────────

    def set_users(self, users) -> None:
        """Re-render the list from *users* (list[User])."""
        self._list.clear()
        self._list.addItems([u.display_name for u in users])
        self._remove_btn.setEnabled(bool(users))

    def detach(self) -> None:
        self._bridge.detach()
