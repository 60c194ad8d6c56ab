"""
Process-wide UserStore instance.

The GUI and CLI share one store per process so that every live view is
fed by the same invalidation tracker::

    store = init_store("~/.user-roster/users.db")   # once, at start-up
    ...
    store = get_store()                             # anywhere afterwards
    ...
    close_store()                                   # at shutdown / in tests

init_store() is guarded by a lock: concurrent first calls create exactly
one UserStore.
"""

import logging
import threading
from pathlib import Path
from typing import Optional

from src.exceptions import StoreError, StoreNotInitializedError
from src.store.db import UserStore

__all__ = ["DEFAULT_DB_PATH", "init_store", "get_store", "close_store"]

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "~/.user-roster/users.db"

_lock = threading.Lock()
_instance: Optional[UserStore] = None


def init_store(db_path: str = DEFAULT_DB_PATH) -> UserStore:
    """
    Create the process-wide store, or return it if it already exists.

    Raises:
        StoreError: the store is already open on a different file.
        StorageFailureError: the database could not be opened.
    """
    global _instance
    wanted = Path(db_path).expanduser()
    with _lock:
        if _instance is None:
            _instance = UserStore(db_path=str(wanted))
            logger.info("Opened user store at %s", wanted)
        elif _instance.db_path != wanted:
            raise StoreError(
                f"Store already initialised at {_instance.db_path}; "
                f"cannot re-open at {wanted}"
            )
        return _instance


def get_store() -> UserStore:
    """Return the process-wide store; raise StoreNotInitializedError if absent."""
    store = _instance
    if store is None:
        raise StoreNotInitializedError("init_store() has not been called")
    return store


def close_store() -> None:
    """Close and forget the process-wide store (no-op if none is open)."""
    global _instance
    with _lock:
        store, _instance = _instance, None
    if store is not None:
        store.close()
        logger.debug("Closed user store at %s", store.db_path)
