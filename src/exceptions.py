"""
Project-wide custom exception hierarchy.
All modules raise subclasses of RosterBaseError — never bare Exception.
"""

__all__ = [
    "RosterBaseError",
    "StoreError",
    "StorageFailureError",
    "UserNotFoundError",
    "StoreNotInitializedError",
]


class RosterBaseError(Exception):
    """Root exception for all user-roster errors."""


# ── Store ─────────────────────────────────────────────────────────────────────

class StoreError(RosterBaseError):
    """Raised on store lifecycle or persistence errors."""


class StorageFailureError(StoreError):
    """Raised when the SQLite medium is unavailable, full or corrupt."""


class UserNotFoundError(StoreError):
    """Raised when a delete names a user that is not in the table."""


class StoreNotInitializedError(StoreError):
    """Raised when get_store() is called before init_store()."""
