"""
Exception classes for command resolution and dispatch.
"""

from __future__ import annotations


class RegistryError(Exception):
    """Invalid command table (raised while building the registry)."""


class CommandError(Exception):
    """Base exception for errors surfaced to the user as a status line."""


class UnknownCommandError(CommandError):
    """No registered command starts with the typed fragment."""

    def __init__(self, fragment: str):
        self.fragment = fragment
        super().__init__(f'command "{fragment}" doesn\'t exist')


class AmbiguousCommandError(CommandError):
    """Two or more registered commands start with the typed fragment."""

    def __init__(self, fragment: str, candidates: list[str]):
        self.fragment = fragment
        self.candidates = tuple(sorted(candidates))
        if len(self.candidates) > 1:
            choices = ", ".join(self.candidates[:-1]) + f" or {self.candidates[-1]}"
        else:
            choices = "".join(self.candidates)
        super().__init__(f'ambiguous command "{fragment}" (could mean {choices})')


class TooFewArgumentsError(CommandError):
    """The split argument list is shorter than the command's minimum."""

    def __init__(self, command: str, usage: str):
        self.command = command
        self.usage = usage
        if command:
            message = f"usage: {command} {usage}".rstrip()
        else:
            message = "cannot send an empty message"
        super().__init__(message)


class HomeNotAllowedError(CommandError):
    """Command issued from the home buffer without permission."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f'command "{command}" cannot be executed from home')


class HandlerError(CommandError):
    """Failure raised by a command handler itself."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)
