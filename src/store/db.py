"""
UserStore — SQLite-backed persistence for the user roster.

Usage::

    store = UserStore(db_path="~/.user-roster/users.db")

    # Live view: called now with the current rows, then after every change
    sub = store.all_users.subscribe(lambda users: print(users))

    g = store.insert("G", "G")          # observer sees [G]
    store.insert("M", "B")              # observer sees [G, M]
    store.delete(g)                     # observer sees [M]

    sub.cancel()
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional

from src.exceptions import StorageFailureError, UserNotFoundError
from src.store.live import InvalidationTracker, LiveQuery
from src.store.models import User

__all__ = ["UserStore", "SCHEMA_VERSION", "USERS_TABLE"]

logger = logging.getLogger(__name__)

# Path to the SQL schema file bundled with this package
_SCHEMA_PATH = Path(__file__).parent / "migrations" / "schema.sql"

# Bump when schema.sql changes; older files are rebuilt from scratch
SCHEMA_VERSION = 2

USERS_TABLE = "users"

# Ids bound per SELECT in load_by_ids; stays far below SQLITE_MAX_VARIABLE_NUMBER
_IDS_PER_QUERY = 500


class UserStore:
    """
    CRUD interface plus a live "all users" view over the local SQLite file.

    The database file and schema are created automatically on first open.
    Every call opens its own short-lived connection, so reads from any
    thread can run side by side (WAL journal). Writes are serialized by an
    internal re-entrant lock; observers are notified after the lock is
    released.
    """

    def __init__(self, db_path: str, busy_timeout: float = 5.0) -> None:
        self._db_path = Path(db_path).expanduser()
        self._busy_timeout = busy_timeout
        self._write_lock = threading.RLock()
        self._tracker = InvalidationTracker()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageFailureError(
                f"Cannot create database directory {self._db_path.parent}: {exc}"
            ) from exc
        self._ensure_schema()
        self._all_users: LiveQuery[list[User]] = LiveQuery(
            self._select_all, self._tracker, tables={USERS_TABLE}
        )

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ── Internal helpers ──────────────────────────────────────────────────

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection; commit on success, roll back and wrap sqlite errors."""
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=self._busy_timeout)
        except sqlite3.Error as exc:
            raise StorageFailureError(
                f"Cannot open database {self._db_path}: {exc}"
            ) from exc
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageFailureError(f"SQLite error on {self._db_path}: {exc}") from exc
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        """Create tables if they don't exist; rebuild on a version mismatch."""
        sql = _SCHEMA_PATH.read_text(encoding="utf-8")
        with self._write_lock, self._connect() as conn:
            version = conn.execute("PRAGMA user_version").fetchone()[0]
            if version not in (0, SCHEMA_VERSION):
                logger.warning(
                    "Schema version %d != %d in %s; dropping and recreating tables",
                    version, SCHEMA_VERSION, self._db_path,
                )
                conn.execute(f"DROP TABLE IF EXISTS {USERS_TABLE}")
            conn.executescript(sql)
            conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
        )

    def _select_all(self) -> list[User]:
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT id, first_name, last_name FROM {USERS_TABLE} ORDER BY id"
            ).fetchall()
        return [self._row_to_user(r) for r in rows]

    # ── Public API ────────────────────────────────────────────────────────

    @property
    def all_users(self) -> LiveQuery[list[User]]:
        """
        Live view of every row, ordered by id.

        ``all_users.subscribe(observer)`` calls *observer* with the current
        list straight away and again after each committed insert or delete.
        """
        return self._all_users

    def insert(self, first_name: Optional[str], last_name: Optional[str]) -> User:
        """
        Insert one user and return it with its newly assigned id.

        Raises:
            StorageFailureError: the database could not be written.
        """
        return self.insert_all([User(first_name=first_name, last_name=last_name)])[0]

    def insert_all(self, users: Iterable[User]) -> list[User]:
        """
        Insert several unsaved users in a single transaction.

        Observers receive one emission for the whole batch.

        Returns:
            The stored users, in the order given, with ids assigned.

        Raises:
            ValueError: a user already carries an id.
            StorageFailureError: the database could not be written.
        """
        pending = list(users)
        for user in pending:
            if user.is_saved:
                raise ValueError(f"{user} already has an id; only new users can be inserted")
        if not pending:
            return []

        stored: list[User] = []
        with self._write_lock:
            with self._connect() as conn:
                for user in pending:
                    cur = conn.execute(
                        f"INSERT INTO {USERS_TABLE} (first_name, last_name) VALUES (?, ?)",
                        (user.first_name, user.last_name),
                    )
                    stored.append(
                        User(first_name=user.first_name, last_name=user.last_name,
                             id=cur.lastrowid)
                    )
        logger.debug("Inserted %d user(s): ids=%s", len(stored), [u.id for u in stored])
        self._tracker.notify(USERS_TABLE)
        return stored

    def delete(self, user: User, missing_ok: bool = True) -> bool:
        """
        Delete the row whose primary key matches *user.id*.

        Returns:
            True if a row was deleted, False if none matched (only when
            *missing_ok*). Observers are notified only when a row went away.

        Raises:
            UserNotFoundError: nothing matched and *missing_ok* is False.
            StorageFailureError: the database could not be written.
        """
        removed = 0
        if user.id is not None:
            with self._write_lock:
                with self._connect() as conn:
                    cur = conn.execute(
                        f"DELETE FROM {USERS_TABLE} WHERE id=?", (user.id,)
                    )
                    removed = cur.rowcount

        if not removed:
            if not missing_ok:
                raise UserNotFoundError(f"No user with id {user.id}")
            logger.debug("Delete of %s matched no row", user)
            return False

        logger.debug("Deleted %s", user)
        self._tracker.notify(USERS_TABLE)
        return True

    def find_by_name(self, first: str, last: str) -> Optional[User]:
        """
        Return the first user (lowest id) whose names match the SQL LIKE
        patterns *first* and *last*, or None.
        """
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT id, first_name, last_name FROM {USERS_TABLE} "
                "WHERE first_name LIKE ? AND last_name LIKE ? ORDER BY id LIMIT 1",
                (first, last),
            ).fetchone()
        return self._row_to_user(row) if row else None

    def load_by_ids(self, ids: Iterable[int]) -> list[User]:
        """
        Return the users whose id is in *ids*, ordered by id. Unknown ids
        are skipped.

        Ids are looked up in batches of _IDS_PER_QUERY so long id lists stay
        under SQLite's bound-parameter limit.
        """
        wanted = sorted(set(ids))
        if not wanted:
            return []
        users: list[User] = []
        with self._connect() as conn:
            for start in range(0, len(wanted), _IDS_PER_QUERY):
                batch = wanted[start:start + _IDS_PER_QUERY]
                placeholders = ", ".join("?" for _ in batch)
                rows = conn.execute(
                    f"SELECT id, first_name, last_name FROM {USERS_TABLE} "
                    f"WHERE id IN ({placeholders}) ORDER BY id",
                    batch,
                ).fetchall()
                users.extend(self._row_to_user(r) for r in rows)
        return users

    def count(self) -> int:
        with self._connect() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {USERS_TABLE}").fetchone()[0]

    def close(self) -> None:
        """Detach every live subscription. The file itself stays on disk."""
        self._tracker.clear()
