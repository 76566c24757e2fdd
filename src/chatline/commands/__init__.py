"""
Command table of the chat input line.

Each built-in command is a handler function registered with its arity bounds,
home permission and help text. build_registry() returns the frozen table
consumed by the dispatcher.
"""

from __future__ import annotations

from chatline.commands.builtins import build_registry

__all__ = ["build_registry"]
