"""
CLI module for the chatline package.

Provides the interactive REPL and the chatline command-line entry point.
"""

from chatline.cli.repl import repl, run_line

__all__ = [
    "repl",
    "run_line",
]
