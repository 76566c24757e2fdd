"""
Command registry for the chat input line.

The registry is an immutable table of command descriptors. It is built once
at startup, usually through a CommandRegistryBuilder, and then handed to the
dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator, Protocol

from chatline.core.exceptions import RegistryError

if TYPE_CHECKING:
    from chatline.client import App


DEFAULT_COMMAND = ""


class CommandHandler(Protocol):
    """Callable performing the effect of one command."""

    def __call__(self, app: "App", buffer: str, args: list[str]) -> Any: ...


@dataclass(frozen=True)
class CommandDescriptor:
    """Static metadata for one command."""

    name: str
    handler: CommandHandler
    allow_home: bool = False
    min_args: int = 0
    max_args: int = 0
    usage: str = ""
    description: str = ""


def _check_descriptor(entry: CommandDescriptor) -> None:
    if entry.name != entry.name.upper():
        raise RegistryError(f"Command name must be uppercase: {entry.name!r}")
    if entry.min_args < 0 or entry.max_args < 0:
        raise RegistryError(f"Negative arity for command {entry.name!r}")
    if entry.max_args != 0 and entry.min_args > entry.max_args:
        raise RegistryError(
            f"Command {entry.name!r} has min_args={entry.min_args} > max_args={entry.max_args}"
        )
    if entry.name == DEFAULT_COMMAND and not entry.allow_home:
        raise RegistryError("The default command must be allowed from home")


class CommandRegistry:
    """Read-only table of commands, keyed by canonical name."""

    def __init__(self, descriptors: Iterable[CommandDescriptor]):
        commands: dict[str, CommandDescriptor] = {}
        for entry in descriptors:
            _check_descriptor(entry)
            if entry.name in commands:
                raise RegistryError(f"Command name collision: {entry.name!r}")
            commands[entry.name] = entry
        self._commands = MappingProxyType(commands)

    def lookup(self, name: str) -> CommandDescriptor | None:
        """Get a command by its exact canonical name."""
        return self._commands.get(name)

    def all(self) -> list[tuple[str, CommandDescriptor]]:
        """Get all (name, descriptor) pairs sorted by name."""
        return sorted(self._commands.items())

    def candidates(self, fragment: str) -> list[str]:
        """Get the sorted names a typed fragment could refer to.

        An empty fragment only matches the default command, it is never
        treated as a prefix of every name.
        """
        if fragment == DEFAULT_COMMAND:
            return [DEFAULT_COMMAND] if DEFAULT_COMMAND in self._commands else []
        return sorted(name for name in self._commands if name.startswith(fragment))

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(entry for _, entry in self.all())

    def __len__(self) -> int:
        return len(self._commands)


class CommandRegistryBuilder:
    """Collects command descriptors, then freezes them into a registry."""

    def __init__(self):
        self._entries: list[CommandDescriptor] = []
        self._sealed = False

    def register(
        self,
        name: str,
        *,
        allow_home: bool = False,
        min_args: int = 0,
        max_args: int = 0,
        usage: str = "",
        description: str = "",
    ) -> Callable[[CommandHandler], CommandHandler]:
        """Decorator to register a command handler.

        Args:
            name: Command name without the / prefix (case-insensitive)
            allow_home: True if the command may run from the home buffer
            min_args: Minimum number of split arguments
            max_args: Maximum number of split arguments (0 means none)
            usage: Usage string shown by /help (e.g., "<target> <message>")
            description: Short description for /help

        Example:
            @commands.register("join", allow_home=True, min_args=1, max_args=2,
                               usage="<channels> [keys]", description="join a channel")
            def cmd_join(app, buffer, args):
                app.session.join(*args)
        """
        def decorator(func: CommandHandler) -> CommandHandler:
            if self._sealed:
                raise RegistryError(f"Cannot register {name!r}: registry already built")
            self._entries.append(CommandDescriptor(
                name=name.upper(),
                handler=func,
                allow_home=allow_home,
                min_args=min_args,
                max_args=max_args,
                usage=usage,
                description=description,
            ))
            return func
        return decorator

    def build(self) -> CommandRegistry:
        """Build the registry. No command can be registered afterwards."""
        self._sealed = True
        return CommandRegistry(self._entries)
