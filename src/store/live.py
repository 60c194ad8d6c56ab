"""
Live-query primitives — push-based views over SQLite tables.

Public API
──────────
Subscription          — handle returned by every subscribe(); cancel() detaches
InvalidationTracker   — table name → callbacks, fired after committed writes
LiveQuery             — re-runs a query and pushes the result on each invalidation
Relay                 — multicast holder of the latest value

Usage::

    tracker = InvalidationTracker()
    live = LiveQuery(store_query, tracker, tables={"users"})
    sub = live.subscribe(print)        # prints the current rows immediately
    tracker.notify("users")            # re-runs the query, prints again
    sub.cancel()
"""

import logging
import threading
from typing import Callable, Generic, Iterable, Optional, TypeVar

__all__ = ["Subscription", "InvalidationTracker", "LiveQuery", "Relay"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

Observer = Callable[[T], None]
ErrorHandler = Callable[[Exception], None]


class Subscription:
    """Handle for one observer registration. Cancelling twice is harmless."""

    def __init__(self, on_cancel: Callable[[], None]) -> None:
        self._on_cancel: Optional[Callable[[], None]] = on_cancel
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._on_cancel is not None

    def cancel(self) -> None:
        with self._lock:
            on_cancel, self._on_cancel = self._on_cancel, None
        if on_cancel is not None:
            on_cancel()


class InvalidationTracker:
    """
    Fan-out of "table changed" notifications.

    notify() runs callbacks while holding the tracker lock, so deliveries
    for a table never overlap; the lock is re-entrant so a callback may
    itself write to the store.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._callbacks: dict[str, list[Callable[[], None]]] = {}
        self._handles: list[Subscription] = []

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def add(self, tables: Iterable[str], callback: Callable[[], None]) -> Subscription:
        names = frozenset(tables)

        def _remove() -> None:
            with self._lock:
                for name in names:
                    callbacks = self._callbacks.get(name, [])
                    if callback in callbacks:
                        callbacks.remove(callback)
                if handle in self._handles:
                    self._handles.remove(handle)

        handle = Subscription(_remove)
        with self._lock:
            for name in names:
                self._callbacks.setdefault(name, []).append(callback)
            self._handles.append(handle)
        return handle

    def notify(self, *tables: str) -> None:
        with self._lock:
            fired: list[Callable[[], None]] = []
            for name in tables:
                for callback in list(self._callbacks.get(name, [])):
                    if callback not in fired:
                        fired.append(callback)
            logger.debug("Invalidating %s → %d observer(s)", tables, len(fired))
            for callback in fired:
                callback()

    def observer_count(self, table: str) -> int:
        with self._lock:
            return len(self._callbacks.get(table, []))

    def clear(self) -> None:
        """Cancel every registration; their handles report inactive afterwards."""
        with self._lock:
            handles = list(self._handles)
            for handle in handles:
                handle.cancel()
            self._callbacks.clear()
            self._handles.clear()


class LiveQuery(Generic[T]):
    """
    A query whose result is pushed to subscribers whenever one of its
    tables is invalidated.

    Every subscribe() opens an independent feed that starts with the
    current result. The query runs at delivery time, so each emission is
    a fresh snapshot and later emissions never show older state.
    """

    def __init__(
        self,
        query: Callable[[], T],
        tracker: InvalidationTracker,
        tables: Iterable[str],
    ) -> None:
        self._query = query
        self._tracker = tracker
        self._tables = frozenset(tables)

    @property
    def tables(self) -> frozenset[str]:
        return self._tables

    def get(self) -> T:
        """One-shot read of the current result."""
        return self._query()

    def subscribe(
        self,
        observer: Observer,
        on_error: Optional[ErrorHandler] = None,
    ) -> Subscription:
        """
        Deliver the current result to *observer*, then again after every
        invalidation until the returned Subscription is cancelled.

        Errors raised by the initial query propagate to the caller. Errors
        from later re-queries go to *on_error* (or the log); errors raised
        by *observer* are logged and the feed stays open.
        """
        def _deliver() -> None:
            try:
                value = self._query()
            except Exception as exc:  # noqa: BLE001
                if on_error is None:
                    logger.exception("Live query on %s failed", sorted(self._tables))
                else:
                    on_error(exc)
                return
            _call_observer(observer, value)

        with self._tracker.lock:
            initial = self._query()
            registration = self._tracker.add(self._tables, _deliver)
            _call_observer(observer, initial)
        return registration


class _RelayEntry:
    """One observer plus the version of the newest value handed to it."""

    def __init__(self, observer: Observer) -> None:
        self.observer = observer
        self.seen = -1
        self.lock = threading.Lock()

    def deliver(self, version: int, value) -> None:
        with self.lock:
            if version <= self.seen:
                return
            self.seen = version
        _call_observer(self.observer, value)


class Relay(Generic[T]):
    """
    Holds the latest published value and forwards each new one to every
    observer. A new observer receives the latest value straight away.

    Observers run outside the relay lock, so they may write to the store
    synchronously. An observer never receives a value older than one it
    has already been given.
    """

    def __init__(self, initial: T) -> None:
        self._lock = threading.RLock()
        self._value = initial
        self._version = 0
        self._entries: list[_RelayEntry] = []

    @property
    def value(self) -> T:
        with self._lock:
            return self._value

    def publish(self, value: T) -> None:
        with self._lock:
            self._version += 1
            self._value = value
            version = self._version
            entries = list(self._entries)
        for entry in entries:
            entry.deliver(version, value)

    def subscribe(self, observer: Observer) -> Subscription:
        entry = _RelayEntry(observer)
        with self._lock:
            self._entries.append(entry)
            version, value = self._version, self._value
        entry.deliver(version, value)

        def _remove() -> None:
            with self._lock:
                if entry in self._entries:
                    self._entries.remove(entry)

        return Subscription(_remove)

    def observer_count(self) -> int:
        with self._lock:
            return len(self._entries)


def _call_observer(observer: Observer, value) -> None:
    try:
        observer(value)
    except Exception:  # noqa: BLE001
        logger.exception("Observer %r raised; keeping subscription open", observer)
