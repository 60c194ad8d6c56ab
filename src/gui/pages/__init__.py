"""gui.pages — widgets hosted by MainWindow."""

from src.gui.pages.user_list import UserListPage

__all__ = ["UserListPage"]
