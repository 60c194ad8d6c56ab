"""
gui — PyQt6 front-end for the user roster.

Public API
──────────
viewmodels            — pure-Python observable state containers (no Qt)
main_window.MainWindow — top-level application window
pages                 — widgets hosted by the window

Qt modules are not imported here so that the view models stay importable
on machines without a display stack.
"""

from src.gui import viewmodels

__all__ = ["viewmodels"]
