"""Data models for the store module."""

from dataclasses import dataclass
from typing import Optional

__all__ = ["User"]


@dataclass(frozen=True)
class User:
    """
    One row of the ``users`` table.

    Fields
    ──────
    first_name — optional given name
    last_name  — optional family name
    id         — SQLite row id assigned on insert (None until saved)
    """
    first_name: Optional[str] = None
    last_name:  Optional[str] = None
    id:         Optional[int] = None

    @property
    def is_saved(self) -> bool:
        return self.id is not None

    @property
    def display_name(self) -> str:
        """Label shown in the user list, e.g. ``"G G - 1"``."""
        first = self.first_name or ""
        last = self.last_name or ""
        return f"{first} {last} - {self.id}"

    def __str__(self) -> str:
        return (
            f"User(id={self.id}, first={self.first_name!r}, "
            f"last={self.last_name!r})"
        )
