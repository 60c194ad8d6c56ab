"""
CLI entry point for user-roster.

Usage
─────
  # Open the roster window (seeds one "G G" user, like the demo always has)
  python -m src.cli.main gui
  python -m src.cli.main gui --no-seed

  # Inspect / edit the table without the GUI
  python -m src.cli.main list
  python -m src.cli.main add Grace Hopper
  python -m src.cli.main remove --id 2
  python -m src.cli.main find "G%" "%"

  # Use another database file
  python -m src.cli.main --db ./scratch.db list

Subcommands are implemented as standalone functions (cmd_list, cmd_add,
cmd_remove, cmd_find, cmd_gui) so they can be unit-tested without
invoking argparse.
"""

import argparse
import logging
import sys
from typing import Optional

from src.exceptions import RosterBaseError, UserNotFoundError
from src.store.db import UserStore
from src.store.models import User
from src.store.registry import DEFAULT_DB_PATH, close_store, init_store

__all__ = [
    "build_parser",
    "cmd_list",
    "cmd_add",
    "cmd_remove",
    "cmd_find",
    "cmd_gui",
    "main",
]

logger = logging.getLogger(__name__)

# Seed row added each time the window opens
_SEED_FIRST_NAME = "G"
_SEED_LAST_NAME  = "G"


# ── Argument parser ────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Subcommands: gui | list | add | remove | find
    """
    parser = argparse.ArgumentParser(
        prog="user-roster",
        description="Local SQLite user list with a live-updating view",
    )
    parser.add_argument(
        "--db",
        default=DEFAULT_DB_PATH,
        metavar="PATH",
        help=f"SQLite database path (default: {DEFAULT_DB_PATH})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable verbose debug logging",
    )

    sub = parser.add_subparsers(dest="subcommand")

    # ── gui ───────────────────────────────────────────────────────────────
    gui = sub.add_parser("gui", help="Open the roster window")
    gui.add_argument(
        "--no-seed",
        action="store_true",
        default=False,
        dest="no_seed",
        help="Do not add the 'G G' user on start-up",
    )

    # ── list ──────────────────────────────────────────────────────────────
    sub.add_parser("list", help="List all users")

    # ── add ───────────────────────────────────────────────────────────────
    add = sub.add_parser("add", help="Add a user")
    add.add_argument("first_name", metavar="FIRST")
    add.add_argument("last_name", metavar="LAST")

    # ── remove ────────────────────────────────────────────────────────────
    rm = sub.add_parser("remove", help="Remove a user by id")
    rm.add_argument(
        "--id",
        required=True,
        type=int,
        metavar="ID",
        help="Id of the user to remove",
    )

    # ── find ──────────────────────────────────────────────────────────────
    find = sub.add_parser("find", help="Find the first user matching LIKE patterns")
    find.add_argument("first", metavar="FIRST", help="SQL LIKE pattern for the first name")
    find.add_argument("last", metavar="LAST", help="SQL LIKE pattern for the last name")

    return parser


# ── Helpers ───────────────────────────────────────────────────────────────────


def _format_row(user: User) -> str:
    return f"[{user.id:>4}]  {user.first_name or ''} {user.last_name or ''}".rstrip()


# ── Command implementations ───────────────────────────────────────────────────


def cmd_list(store: UserStore) -> None:
    """Print every user to stdout."""
    users = store.all_users.get()
    if not users:
        print("No users.")
        return
    for user in users:
        print(_format_row(user))


def cmd_add(store: UserStore, first_name: str, last_name: str) -> User:
    """Insert a user and print the stored row."""
    user = store.insert(first_name, last_name)
    logger.info("Added %s", user)
    print(_format_row(user))
    return user


def cmd_remove(store: UserStore, user_id: int) -> None:
    """
    Delete the user with *user_id*.

    Raises:
        UserNotFoundError: no such user.
    """
    store.delete(User(id=user_id), missing_ok=False)
    logger.info("Removed user %d", user_id)
    print(f"Removed user {user_id}.")


def cmd_find(store: UserStore, first: str, last: str) -> Optional[User]:
    """Print the first user matching the LIKE patterns; return it (or None)."""
    user = store.find_by_name(first, last)
    if user is None:
        print("No matching user.")
        return None
    print(_format_row(user))
    return user


def cmd_gui(store: UserStore, seed: bool = True) -> int:
    """Run the Qt window until it is closed. Returns the Qt exit code."""
    from PyQt6.QtWidgets import QApplication

    from src.gui.main_window import MainWindow
    from src.gui.viewmodels import UserListViewModel
    from src.store.repository import UserRepository

    app = QApplication.instance() or QApplication(sys.argv)
    vm = UserListViewModel(UserRepository(store))
    try:
        if seed:
            vm.add_user(_SEED_FIRST_NAME, _SEED_LAST_NAME)
        window = MainWindow(vm)
        window.show()
        return app.exec()
    finally:
        vm.close()


# ── Entry point ───────────────────────────────────────────────────────────────


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point. Returns exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)

    level = logging.DEBUG if ns.debug else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")

    if ns.subcommand is None:
        parser.print_help()
        return 0

    try:
        store = init_store(ns.db)
    except RosterBaseError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        if ns.subcommand == "list":
            cmd_list(store=store)
            return 0

        if ns.subcommand == "add":
            cmd_add(store=store, first_name=ns.first_name, last_name=ns.last_name)
            return 0

        if ns.subcommand == "remove":
            try:
                cmd_remove(store=store, user_id=ns.id)
            except UserNotFoundError as exc:
                print(f"Error: {exc}", file=sys.stderr)
                return 1
            return 0

        if ns.subcommand == "find":
            return 0 if cmd_find(store=store, first=ns.first, last=ns.last) else 1

        if ns.subcommand == "gui":
            return cmd_gui(store=store, seed=not ns.no_seed)
    except RosterBaseError as exc:
        logger.debug("%s failed", ns.subcommand, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        close_store()

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
