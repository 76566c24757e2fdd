"""Built-in commands of the chat input line."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chatline.client import Line
from chatline.core.exceptions import HandlerError
from chatline.core.registry import CommandRegistry, CommandRegistryBuilder

if TYPE_CHECKING:
    from chatline.client import App, ChatSession

logger = logging.getLogger(__name__)

TOPIC_TIME_FORMAT = "%a %b %d %H:%M:%S"


def _session(app: "App") -> "ChatSession":
    if app.session is None:
        raise HandlerError("not connected")
    return app.session


def _send_message(app: "App", target: str, content: str) -> None:
    _session(app).privmsg(target, content)
    app.echo_message(target, content)


def cmd_message(app: "App", buffer: str, args: list[str]) -> None:
    """Send a plain chat line to the current buffer."""
    _send_message(app, buffer, args[0])


def cmd_help(app: "App", buffer: str, args: list[str], *, registry: CommandRegistry) -> None:
    """List commands, or the commands whose name contains the given text."""
    current = app.window.current_buffer()

    def show(name: str, usage: str, description: str, indent: str) -> None:
        app.window.add_line(current, Line(body=f"{indent}\x02{name}\x02 {usage}".rstrip()))
        app.window.add_line(current, Line(body=f"{indent}  {description}"))
        app.window.add_line(current, Line())

    if not args:
        app.status("Available commands:", current)
        for name, entry in registry.all():
            if not entry.description:
                continue
            show(name, entry.usage, entry.description, "  ")
        return

    search = args[0].upper()
    app.status(f'Commands that match "{search}":', current)
    found = False
    for name, entry in registry.all():
        if not name or search not in name:
            continue
        show(name, entry.usage, entry.description, "")
        found = True
    if not found:
        app.window.add_line(current, Line(body=f'  no command matches "{args[0]}"'))


def cmd_join(app: "App", buffer: str, args: list[str]) -> None:
    channels = args[0]
    keys = args[1] if len(args) > 1 else ""
    _session(app).join(channels, keys)


def cmd_me(app: "App", buffer: str, args: list[str]) -> None:
    """Send a CTCP action, to the last query when issued from home."""
    target = app.last_query if buffer == app.home else buffer
    if not target:
        raise HandlerError("no one to send an action to")
    _send_message(app, target, f"\x01ACTION {args[0]}\x01")


def cmd_msg(app: "App", buffer: str, args: list[str]) -> None:
    """Send a message to a target; a nick target becomes the last query."""
    target, content = args
    _send_message(app, target, content)
    if not _session(app).is_channel(target):
        app.last_query = target


def cmd_names(app: "App", buffer: str, args: list[str]) -> None:
    parts = []
    for member in _session(app).names(buffer):
        if member.power_level:
            parts.append(f"\x033{member.power_level}\x0314{member.name}")
        else:
            parts.append(member.name)
    app.status("\x0314Names: " + " ".join(parts), buffer)


def cmd_part(app: "App", buffer: str, args: list[str]) -> None:
    """Part the given channel, or the current buffer.

    A first argument that is not a channel name is the part reason.
    """
    channel = buffer
    reason = ""
    if args:
        if _session(app).is_channel(args[0]):
            channel = args[0]
            if len(args) > 1:
                reason = args[1]
        else:
            reason = " ".join(args)

    if channel == app.home:
        raise HandlerError("cannot part home!")
    _session(app).part(channel, reason)


def cmd_quit(app: "App", buffer: str, args: list[str]) -> None:
    reason = args[0] if args else ""
    if app.session is not None:
        app.session.quit(reason)
    app.window.exit()


def cmd_quote(app: "App", buffer: str, args: list[str]) -> None:
    _session(app).send_raw(args[0])


def cmd_reply(app: "App", buffer: str, args: list[str]) -> None:
    if not app.last_query:
        raise HandlerError("no one to reply to")
    _send_message(app, app.last_query, args[0])


def cmd_topic(app: "App", buffer: str, args: list[str]) -> None:
    session = _session(app)
    if args:
        session.set_topic(buffer, args[0])
        return

    topic, who, at = session.topic(buffer)
    if who is None:
        body = f"\x0314Topic: {topic}"
    else:
        when = at.astimezone().strftime(TOPIC_TIME_FORMAT) if at is not None else "?"
        body = f"\x0314Topic (by {who}, {when}): {topic}"
    app.status(body, buffer)


def cmd_buffer(app: "App", buffer: str, args: list[str]) -> None:
    name = args[0]
    if not app.window.jump_buffer(name):
        raise HandlerError(f'none of the buffers match "{name}"')


def build_registry() -> CommandRegistry:
    """Build the registry of built-in commands.

    Each call returns a fresh, independent registry.
    """
    commands = CommandRegistryBuilder()
    registry: CommandRegistry | None = None

    def help_handler(app: "App", buffer: str, args: list[str]) -> None:
        cmd_help(app, buffer, args, registry=registry)

    commands.register("", allow_home=True, min_args=1, max_args=1)(cmd_message)
    commands.register(
        "HELP", allow_home=True, max_args=1, usage="[command]",
        description="show the list of commands, or how to use the given one",
    )(help_handler)
    commands.register(
        "JOIN", allow_home=True, min_args=1, max_args=2, usage="<channels> [keys]",
        description="join a channel",
    )(cmd_join)
    commands.register(
        "ME", allow_home=True, min_args=1, max_args=1, usage="<message>",
        description="send an action (reply to last query if sent from home)",
    )(cmd_me)
    commands.register(
        "MSG", allow_home=True, min_args=2, max_args=2, usage="<target> <message>",
        description="send a message to the given target",
    )(cmd_msg)
    commands.register(
        "NAMES", description="show the member list of the current channel",
    )(cmd_names)
    commands.register(
        "PART", allow_home=True, max_args=2, usage="[channel] [reason]",
        description="part a channel",
    )(cmd_part)
    commands.register(
        "QUIT", allow_home=True, max_args=1, usage="[reason]",
        description="quit chatline",
    )(cmd_quit)
    commands.register(
        "QUOTE", allow_home=True, min_args=1, max_args=1, usage="<raw message>",
        description="send raw protocol data",
    )(cmd_quote)
    commands.register(
        "REPLY", allow_home=True, min_args=1, max_args=1, usage="<message>",
        description="reply to the last query",
    )(cmd_reply)
    commands.register(
        "TOPIC", max_args=1, usage="[topic]",
        description="show or set the topic of the current channel",
    )(cmd_topic)
    commands.register(
        "BUFFER", allow_home=True, min_args=1, max_args=1, usage="<name>",
        description="switch to the buffer containing a substring",
    )(cmd_buffer)

    registry = commands.build()
    logger.debug(f"Built command registry with {len(registry)} commands")
    return registry
