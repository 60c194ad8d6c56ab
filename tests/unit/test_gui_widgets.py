"""
Unit tests for src/gui/ Qt widgets — requires PyQt6 + offscreen display.

Run with: QT_QPA_PLATFORM=offscreen pytest tests/unit/test_gui_widgets.py

Coverage plan
─────────────
MainWindow          → 2 tests
UserListPage        → 4 tests
UsersSignalBridge   → 1 test
─────────────────────────────────
Total               = 7 tests
"""

import os
import sys
from concurrent.futures import ThreadPoolExecutor

import pytest

# Ensure offscreen rendering when no display is available
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

QtWidgets = pytest.importorskip("PyQt6.QtWidgets", reason="PyQt6 not installed")

_TIMEOUT = 10


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def app():
    """Single QApplication for the entire module (can only have one per process)."""
    from PyQt6.QtWidgets import QApplication
    _app = QApplication.instance() or QApplication(sys.argv)
    yield _app
    # Don't call app.quit(); other tests in the session may still need it.


@pytest.fixture
def executor():
    with ThreadPoolExecutor(max_workers=1) as pool:
        yield pool


@pytest.fixture
def vm(tmp_path, executor):
    from src.gui.viewmodels import UserListViewModel
    from src.store.db import UserStore
    from src.store.repository import UserRepository
    store = UserStore(db_path=str(tmp_path / "gui.db"))
    model = UserListViewModel(UserRepository(store), executor=executor)
    yield model
    model.close()


def _settle(app, executor):
    """Wait for queued writes, then deliver queued cross-thread signals."""
    executor.submit(lambda: None).result(timeout=_TIMEOUT)
    app.processEvents()


# ─────────────────────────────────────────────────────────────────────────────
# 1. MainWindow
# ─────────────────────────────────────────────────────────────────────────────

class TestMainWindow:

    def test_creates_without_error(self, app, vm):
        from src.gui.main_window import MainWindow
        win = MainWindow(vm)
        assert win.windowTitle() == "User Roster"

    def test_hosts_user_list_page(self, app, vm):
        from src.gui.main_window import MainWindow
        from src.gui.pages.user_list import UserListPage
        win = MainWindow(vm)
        assert isinstance(win.centralWidget(), UserListPage)


# ─────────────────────────────────────────────────────────────────────────────
# 2. UserListPage
# ─────────────────────────────────────────────────────────────────────────────

class TestUserListPage:

    def test_has_add_and_remove_buttons(self, app, vm):
        from src.gui.pages.user_list import UserListPage
        from PyQt6.QtWidgets import QPushButton
        page = UserListPage(vm)
        labels = [b.text() for b in page.findChildren(QPushButton)]
        assert "Add User" in labels
        assert "Remove User" in labels

    def test_starts_empty_with_remove_disabled(self, app, vm):
        from src.gui.pages.user_list import UserListPage
        page = UserListPage(vm)
        assert page._list.count() == 0
        assert not page._remove_btn.isEnabled()

    def test_add_button_appends_row(self, app, vm, executor):
        from src.gui.pages.user_list import UserListPage
        page = UserListPage(vm)
        vm.add_user("G", "G")
        page._add_btn.click()
        _settle(app, executor)
        assert page._list.count() == 2
        assert page._list.item(0).text() == "G G - 1"
        assert page._list.item(1).text() == "M B - 2"
        assert page._remove_btn.isEnabled()

    def test_remove_button_drops_last_row(self, app, vm, executor):
        from src.gui.pages.user_list import UserListPage
        page = UserListPage(vm)
        vm.add_user("G", "G")
        vm.add_user("M", "B")
        _settle(app, executor)
        page._remove_btn.click()
        _settle(app, executor)
        assert page._list.count() == 1
        assert page._list.item(0).text() == "G G - 1"


# ─────────────────────────────────────────────────────────────────────────────
# 3. UsersSignalBridge
# ─────────────────────────────────────────────────────────────────────────────

class TestUsersSignalBridge:

    def test_detach_stops_forwarding(self, app, vm, executor):
        from src.gui.worker import UsersSignalBridge
        bridge = UsersSignalBridge(vm)
        received = []
        bridge.users_changed.connect(received.append)
        bridge.start()
        assert received == [[]]
        bridge.detach()
        vm.add_user("G", "G")
        _settle(app, executor)
        assert received == [[]]
