"""
store — SQLite-backed persistence layer for the user roster.

Public API
──────────
User            — dataclass representing one row of the users table
UserStore       — CRUD interface plus the live all_users view
UserRepository  — thin forwarding layer used by the view model
LiveQuery       — push-based query result (see store.live)
init_store / get_store / close_store — process-wide store lifecycle
"""

from src.store.models import User
from src.store.db import UserStore
from src.store.live import LiveQuery, Relay, Subscription
from src.store.repository import UserRepository
from src.store.registry import DEFAULT_DB_PATH, close_store, get_store, init_store

__all__ = [
    "User",
    "UserStore",
    "UserRepository",
    "LiveQuery",
    "Relay",
    "Subscription",
    "DEFAULT_DB_PATH",
    "init_store",
    "get_store",
    "close_store",
]
