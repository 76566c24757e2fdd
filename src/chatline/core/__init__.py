"""
Core module for the chatline package.

Provides the command registry and the input dispatcher.
"""

from chatline.core.dispatcher import (
    COMMAND_MARKER,
    Dispatcher,
    ParsedInput,
    parse_command,
    split_args,
)
from chatline.core.exceptions import (
    AmbiguousCommandError,
    CommandError,
    HandlerError,
    HomeNotAllowedError,
    RegistryError,
    TooFewArgumentsError,
    UnknownCommandError,
)
from chatline.core.registry import (
    DEFAULT_COMMAND,
    CommandDescriptor,
    CommandHandler,
    CommandRegistry,
    CommandRegistryBuilder,
)

__all__ = [
    # Registry
    "CommandRegistry",
    "CommandRegistryBuilder",
    "CommandDescriptor",
    "CommandHandler",
    "DEFAULT_COMMAND",
    # Dispatcher
    "Dispatcher",
    "ParsedInput",
    "parse_command",
    "split_args",
    "COMMAND_MARKER",
    # Exceptions
    "CommandError",
    "UnknownCommandError",
    "AmbiguousCommandError",
    "TooFewArgumentsError",
    "HomeNotAllowedError",
    "HandlerError",
    "RegistryError",
]
