"""
GUI ViewModels — pure-Python observable state containers.

No Qt imports here; every class is testable without a display.
Qt widgets observe these objects through the signal bridge in
src.gui.worker and update themselves on each emission.

Public API
──────────
UserListViewModel — relays the live user list and runs mutations off the GUI thread
"""

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional

from src.store.live import Relay, Subscription
from src.store.models import User
from src.store.repository import UserRepository

__all__ = ["UserListViewModel"]

logger = logging.getLogger(__name__)


class UserListViewModel:
    """
    Bridge between the user repository and the presentation layer.

    Attributes
    ──────────
    users — Relay[list[User]]; starts as [] and is republished from the
            repository's live view on every change

    add_user() / remove_user() return immediately; the write runs on a
    single background worker, so mutations apply in the order they were
    requested. The returned Future is there for callers that want to wait
    (tests); the GUI ignores it and watches ``users`` instead.
    """

    def __init__(
        self,
        repository: UserRepository,
        executor: Optional[Executor] = None,
    ) -> None:
        self._repository = repository
        self._owns_executor = executor is None
        self._executor: Executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="user-roster-io"
        )
        self.users: Relay[list[User]] = Relay([])
        self._subscription: Subscription = repository.all_users.subscribe(
            self.users.publish, on_error=self._on_live_error
        )

    # ── Mutations ──────────────────────────────────────────────────────────

    def add_user(self, first_name: Optional[str], last_name: Optional[str]) -> Future:
        """Queue an insert; the new row shows up in ``users`` when it lands."""
        future = self._executor.submit(self._repository.add_user, first_name, last_name)
        future.add_done_callback(self._log_failure)
        return future

    def remove_user(self, user: User) -> Future:
        """Queue a delete of *user*; deleting an absent row is a no-op."""
        future = self._executor.submit(self._repository.remove_user, user)
        future.add_done_callback(self._log_failure)
        return future

    def remove_last_user(self) -> Optional[Future]:
        """Queue removal of the last listed user; returns None if the list is empty."""
        current = self.users.value
        if not current:
            logger.debug("remove_last_user() on an empty list, ignored")
            return None
        return self.remove_user(current[-1])

    # ── Lifecycle ──────────────────────────────────────────────────────────

    @property
    def subscribed(self) -> bool:
        return self._subscription.active

    def close(self) -> None:
        """Stop relaying and shut down the worker if this view model created it."""
        self._subscription.cancel()
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    # ── Internals ──────────────────────────────────────────────────────────

    @staticmethod
    def _log_failure(future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Background user mutation failed: %s", exc, exc_info=exc)

    @staticmethod
    def _on_live_error(exc: Exception) -> None:
        logger.error("Refreshing the user list failed: %s", exc, exc_info=exc)
