"""
Unit tests for src/gui/viewmodels.py — no Qt dependency.

UserListViewModel relays the store's live view and runs writes on a
background worker. All tests run on every platform without a display.

Coverage plan
─────────────
relay          → 4 tests  (initial list, one subscription, close, store close)
mutations      → 5 tests  (add, remove, scenario, off-thread, order)
remove_last    → 2 tests
failures       → 1 test
executor       → 1 test   (injected executor is not shut down)
─────────────────────────────────
Total          = 13 tests
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

_TIMEOUT = 10


@pytest.fixture
def store(tmp_path):
    from src.store.db import UserStore
    return UserStore(db_path=str(tmp_path / "vm.db"))


@pytest.fixture
def vm(store):
    from src.gui.viewmodels import UserListViewModel
    from src.store.repository import UserRepository
    model = UserListViewModel(UserRepository(store))
    yield model
    model.close()


# ─────────────────────────────────────────────────────────────────────────────
# 1. Relay of the live view
# ─────────────────────────────────────────────────────────────────────────────

class TestUserListRelay:

    def test_initial_users_is_empty_list(self, vm):
        assert vm.users.value == []
        assert vm.subscribed

    def test_holds_exactly_one_store_subscription(self, store, vm):
        from src.store.db import USERS_TABLE
        assert store._tracker.observer_count(USERS_TABLE) == 1
        seen = []
        vm.users.subscribe(seen.append)
        vm.users.subscribe(seen.append)
        assert store._tracker.observer_count(USERS_TABLE) == 1

    def test_close_stops_relaying(self, store, vm):
        vm.close()
        store.insert("G", "G")
        assert vm.users.value == []
        assert not vm.subscribed

    def test_store_close_ends_subscription(self, store, vm):
        assert vm.subscribed
        store.close()
        assert not vm.subscribed


# ─────────────────────────────────────────────────────────────────────────────
# 2. Mutations
# ─────────────────────────────────────────────────────────────────────────────

class TestUserListMutations:

    def test_add_user_updates_relay(self, vm):
        user = vm.add_user("G", "G").result(timeout=_TIMEOUT)
        assert vm.users.value == [user]

    def test_remove_user_updates_relay(self, vm):
        user = vm.add_user("G", "G").result(timeout=_TIMEOUT)
        assert vm.remove_user(user).result(timeout=_TIMEOUT) is True
        assert vm.users.value == []

    def test_add_add_remove_scenario(self, vm):
        from src.store.models import User
        vm.add_user("G", "G")
        vm.add_user("M", "B").result(timeout=_TIMEOUT)
        assert vm.users.value == [User("G", "G", id=1), User("M", "B", id=2)]
        vm.remove_user(User("M", "B", id=2)).result(timeout=_TIMEOUT)
        assert vm.users.value == [User("G", "G", id=1)]

    def test_mutations_run_off_the_calling_thread(self, store):
        from src.gui.viewmodels import UserListViewModel
        from src.store.repository import UserRepository

        threads = []

        class _RecordingRepository(UserRepository):
            def add_user(self, first_name, last_name):
                threads.append(threading.get_ident())
                return super().add_user(first_name, last_name)

        model = UserListViewModel(_RecordingRepository(store))
        try:
            model.add_user("G", "G").result(timeout=_TIMEOUT)
        finally:
            model.close()
        assert threads and threads[0] != threading.get_ident()

    def test_mutations_apply_in_request_order(self, vm):
        futures = [vm.add_user(str(i), "x") for i in range(10)]
        users = [f.result(timeout=_TIMEOUT) for f in futures]
        assert [u.first_name for u in vm.users.value] == [str(i) for i in range(10)]
        assert [u.id for u in users] == sorted(u.id for u in users)


# ─────────────────────────────────────────────────────────────────────────────
# 3. remove_last_user
# ─────────────────────────────────────────────────────────────────────────────

class TestRemoveLastUser:

    def test_empty_list_is_a_no_op(self, vm):
        assert vm.remove_last_user() is None

    def test_removes_last_listed_user(self, vm):
        first = vm.add_user("G", "G").result(timeout=_TIMEOUT)
        vm.add_user("M", "B").result(timeout=_TIMEOUT)
        vm.remove_last_user().result(timeout=_TIMEOUT)
        assert vm.users.value == [first]


# ─────────────────────────────────────────────────────────────────────────────
# 4. Failures and executor ownership
# ─────────────────────────────────────────────────────────────────────────────

class TestUserListFailures:

    def test_storage_failure_is_reported_on_future(self, store):
        from src.exceptions import StorageFailureError
        from src.gui.viewmodels import UserListViewModel
        from src.store.repository import UserRepository

        class _BrokenRepository(UserRepository):
            def add_user(self, first_name, last_name):
                raise StorageFailureError("disk full")

        model = UserListViewModel(_BrokenRepository(store))
        try:
            future = model.add_user("G", "G")
            assert isinstance(future.exception(timeout=_TIMEOUT), StorageFailureError)
            assert model.users.value == []
        finally:
            model.close()

    def test_injected_executor_is_left_running(self, store):
        from src.gui.viewmodels import UserListViewModel
        from src.store.repository import UserRepository
        with ThreadPoolExecutor(max_workers=1) as executor:
            model = UserListViewModel(UserRepository(store), executor=executor)
            model.add_user("G", "G").result(timeout=_TIMEOUT)
            model.close()
            assert executor.submit(lambda: 42).result(timeout=_TIMEOUT) == 42
