"""
chatline - command-line resolution and dispatch for a text-chat client

Turns one line of typed input into a validated invocation of a command:
prefix-based command lookup, positional argument splitting where the last
field keeps the rest of the line, and arity/context validation.

Example usage:
    from chatline import App, Dispatcher, build_registry
    from chatline.offline import BufferWindow, OfflineSession

    window = BufferWindow()
    app = App(window=window, session=OfflineSession("guest", window=window))
    dispatcher = Dispatcher(build_registry())

    dispatcher.dispatch(app, window.current_buffer(), "/join #python")
    dispatcher.dispatch(app, "#python", "hello everyone")
"""

__version__ = "0.1.0"

from chatline.client import HOME, App, ChatSession, Line, Member, Window
from chatline.commands import build_registry
from chatline.core import (
    AmbiguousCommandError,
    CommandDescriptor,
    CommandError,
    CommandRegistry,
    CommandRegistryBuilder,
    Dispatcher,
    HandlerError,
    HomeNotAllowedError,
    RegistryError,
    TooFewArgumentsError,
    UnknownCommandError,
    parse_command,
    split_args,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "CommandRegistry",
    "CommandRegistryBuilder",
    "CommandDescriptor",
    "Dispatcher",
    "parse_command",
    "split_args",
    "build_registry",
    # Client interfaces
    "App",
    "ChatSession",
    "Window",
    "Line",
    "Member",
    "HOME",
    # Exceptions
    "CommandError",
    "UnknownCommandError",
    "AmbiguousCommandError",
    "TooFewArgumentsError",
    "HomeNotAllowedError",
    "HandlerError",
    "RegistryError",
]
