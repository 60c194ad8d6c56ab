"""UserRepository — the slice of UserStore the view layer is allowed to use."""

from typing import Optional

from src.store.db import UserStore
from src.store.live import LiveQuery
from src.store.models import User

__all__ = ["UserRepository"]


class UserRepository:
    """Forwards to a UserStore; holds no state of its own."""

    def __init__(self, store: UserStore) -> None:
        self._store = store

    @property
    def all_users(self) -> LiveQuery[list[User]]:
        return self._store.all_users

    def add_user(self, first_name: Optional[str], last_name: Optional[str]) -> User:
        return self._store.insert(first_name, last_name)

    def remove_user(self, user: User) -> bool:
        return self._store.delete(user)
