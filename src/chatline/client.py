"""
Interfaces between command handlers and the rest of the chat client.

Handlers never talk to the network or the terminal directly. They go through
a ChatSession (the connection to the chat server) and a Window (the set of
displayed buffers), both reachable from the App context.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from pydantic import BaseModel, Field

# Name of the status buffer not bound to any channel or conversation
HOME = "home"

ECHO_MESSAGE = "echo-message"


class Line(BaseModel):
    """One displayed line of a buffer."""
    at: datetime = Field(default_factory=datetime.now)
    head: str = ""
    body: str = ""
    highlight: bool = False


class Member(BaseModel):
    """A channel member with its optional role marker (e.g. "@", "+")."""
    name: str
    power_level: str = ""


def format_message(nick: str, target: str, content: str) -> tuple[str, Line]:
    """Format a message sent by nick for display.

    Returns:
        Tuple of (buffer name, line)
    """
    if content.startswith("\x01ACTION ") and content.endswith("\x01"):
        return target, Line(head="*", body=f"{nick} {content[8:-1]}")
    return target, Line(head=nick, body=content)


class ChatSession(Protocol):
    """Connection to a chat server, as seen by command handlers."""

    def nick(self) -> str: ...

    def has_capability(self, name: str) -> bool: ...

    def privmsg(self, target: str, content: str) -> None: ...

    def join(self, channels: str, keys: str = "") -> None: ...

    def part(self, channel: str, reason: str = "") -> None: ...

    def topic(self, channel: str) -> tuple[str, Optional[str], Optional[datetime]]: ...

    def set_topic(self, channel: str, topic: str) -> None: ...

    def names(self, channel: str) -> list[Member]: ...

    def is_channel(self, name: str) -> bool: ...

    def send_raw(self, line: str) -> None: ...

    def quit(self, reason: str = "") -> None: ...


class Window(Protocol):
    """Displayed buffers of the client."""

    def current_buffer(self) -> str: ...

    def add_line(self, buffer: str, line: Line, notify: bool = False) -> None: ...

    def jump_buffer(self, substring: str) -> bool: ...

    def exit(self) -> None: ...


@dataclass
class App:
    """Application context handed to every command handler."""

    window: Window
    session: Optional[ChatSession] = None
    last_query: str = ""
    home: str = HOME

    def status(self, body: str, buffer: str | None = None) -> None:
        """Append a status line ("--" head) to a buffer (current one by default)."""
        self.window.add_line(buffer or self.window.current_buffer(), Line(head="--", body=body))

    def echo_message(self, target: str, content: str) -> None:
        """Show our own message locally unless the server echoes it back."""
        if self.session is None or self.session.has_capability(ECHO_MESSAGE):
            return
        buffer, line = format_message(self.session.nick(), target, content)
        self.window.add_line(buffer, line)
