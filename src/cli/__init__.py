"""
cli — command-line interface for user-roster.

Entry points
────────────
  python -m src.cli.main
  user-roster            (via pyproject.toml [project.scripts])

Subcommands: gui | list | add | remove | find
"""

from src.cli.main import build_parser, cmd_add, cmd_find, cmd_list, cmd_remove, main

__all__ = ["build_parser", "cmd_list", "cmd_add", "cmd_remove", "cmd_find", "main"]
