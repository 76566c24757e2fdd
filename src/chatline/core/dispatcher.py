"""
Input dispatcher: turns one line of user input into a command invocation.

Stages run in a fixed order and the first failure aborts the rest:

    parse -> resolve -> split arguments -> validate -> invoke

Nothing has side effects before the handler is invoked.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, NamedTuple

from chatline.client import HOME
from chatline.core.exceptions import (
    AmbiguousCommandError,
    CommandError,
    HomeNotAllowedError,
    TooFewArgumentsError,
    UnknownCommandError,
)
from chatline.core.registry import CommandDescriptor, CommandRegistry

if TYPE_CHECKING:
    from chatline.client import App

logger = logging.getLogger(__name__)

COMMAND_MARKER = "/"


class ParsedInput(NamedTuple):
    """Command fragment and raw argument tail of an input line."""

    command: str
    tail: str


def parse_command(line: str) -> ParsedInput:
    """Split an input line into an upper-cased command fragment and its tail.

    Lines not starting with the command marker are plain chat text: the
    fragment is empty and the whole line is the tail.
    """
    if not line:
        return ParsedInput("", "")

    if not line.startswith(COMMAND_MARKER):
        return ParsedInput("", line)

    end = line.find(" ")
    if end < 0:
        end = len(line)

    return ParsedInput(line[len(COMMAND_MARKER):end].upper(), line[end:].lstrip(" "))


def split_args(tail: str, max_args: int) -> list[str]:
    """Split an argument tail into at most max_args fields.

    Only the first max_args - 1 spaces separate fields; the last field keeps
    the rest of the text verbatim. Commands taking no arguments ignore the
    tail entirely.
    """
    if not tail or max_args == 0:
        return []
    return tail.split(" ", max_args - 1)


class Dispatcher:
    """Resolves input lines against a command registry and runs them."""

    def __init__(self, registry: CommandRegistry, home: str = HOME):
        self.registry = registry
        self.home = home

    def resolve(self, fragment: str) -> CommandDescriptor:
        """Resolve a (possibly abbreviated) command name to its descriptor."""
        candidates = self.registry.candidates(fragment)
        if not candidates:
            raise UnknownCommandError(fragment)
        if len(candidates) > 1:
            raise AmbiguousCommandError(fragment, candidates)
        return self.registry.lookup(candidates[0])

    def validate(self, command: CommandDescriptor, args: list[str], buffer: str) -> None:
        """Check arity first, then whether the command may run in this buffer."""
        if len(args) < command.min_args:
            raise TooFewArgumentsError(command.name, command.usage)
        if buffer == self.home and not command.allow_home:
            raise HomeNotAllowedError(command.name)

    def prepare(self, buffer: str, line: str) -> tuple[CommandDescriptor, list[str]]:
        """Run every stage except the invocation.

        Returns:
            Tuple of (resolved descriptor, split arguments)
        """
        fragment, tail = parse_command(line)
        command = self.resolve(fragment)
        args = split_args(tail, command.max_args)
        self.validate(command, args, buffer)
        return command, args

    def dispatch(self, app: "App", buffer: str, line: str) -> Any:
        """Run one input line in the given buffer.

        The handler's return value and exceptions are passed through as is.

        Raises:
            CommandError: If the line does not resolve to a valid invocation.
        """
        try:
            command, args = self.prepare(buffer, line)
        except CommandError as e:
            logger.debug(f"Rejected input in {buffer!r}: {e}")
            raise
        logger.debug(f"Dispatching {command.name or '<message>'} in {buffer!r} with {len(args)} arg(s)")
        return command.handler(app, buffer, args)
