"""
UsersSignalBridge — carries live user-list updates onto the Qt GUI thread.

The view model publishes from whichever thread committed the write (the
background I/O worker, usually). Widgets must only be touched from the GUI
thread, so the bridge re-emits every update as a Qt signal; Qt queues the
call across threads when the receiver lives on the GUI thread.

Usage (UserListPage)::

    self._bridge = UsersSignalBridge(vm)
    self._bridge.users_changed.connect(self.set_users)
    self._bridge.start()

Signals
───────
users_changed(list) — full list[User] after each change
"""

import logging
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from src.gui.viewmodels import UserListViewModel
from src.store.live import Subscription

__all__ = ["UsersSignalBridge"]

logger = logging.getLogger(__name__)


class UsersSignalBridge(QObject):
    """Subscribes to UserListViewModel.users and re-emits as users_changed."""

    users_changed = pyqtSignal(list)  # list[User]

    def __init__(self, vm: UserListViewModel, parent: QObject = None) -> None:
        super().__init__(parent)
        self._vm = vm
        self._subscription: Optional[Subscription] = None

    def start(self) -> None:
        """Begin forwarding; the current list is emitted immediately."""
        if self._subscription is None or not self._subscription.active:
            self._subscription = self._vm.users.subscribe(self._forward)

    def _forward(self, users) -> None:
        logger.debug("Forwarding %d user(s) to the GUI thread", len(users))
        self.users_changed.emit(list(users))

    def detach(self) -> None:
        """Stop forwarding (call before the widget owning the bridge goes away)."""
        if self._subscription is not None:
            self._subscription.cancel()
