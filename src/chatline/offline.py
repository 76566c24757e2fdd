"""
In-memory chat session and window.

OfflineSession behaves like a server connection that nobody else is on: it
records the protocol lines it would send and keeps the channel state (members
and topic) that a server would report back. BufferWindow keeps displayed lines
per buffer and can print the lines of the current buffer as they arrive.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from chatline.client import ECHO_MESSAGE, HOME, Line, Member, format_message

logger = logging.getLogger(__name__)

CHANNEL_PREFIXES = "#&"


@dataclass
class Channel:
    """State of a joined channel."""
    name: str
    members: list[Member] = field(default_factory=list)
    topic: str = ""
    topic_who: Optional[str] = None
    topic_at: Optional[datetime] = None


class BufferWindow:
    """Ordered set of buffers, one of which is current."""

    def __init__(self, home: str = HOME, on_line: Callable[[str, Line], None] | None = None):
        self.home = home
        self.buffers: dict[str, list[Line]] = {home: []}
        self._current = home
        self.closed = False
        self._on_line = on_line

    def current_buffer(self) -> str:
        return self._current

    def add_buffer(self, name: str) -> None:
        self.buffers.setdefault(name, [])

    def remove_buffer(self, name: str) -> None:
        if name == self.home or name not in self.buffers:
            return
        del self.buffers[name]
        if self._current == name:
            self._current = self.home

    def add_line(self, buffer: str, line: Line, notify: bool = False) -> None:
        """Append a line, creating the buffer if needed."""
        self.buffers.setdefault(buffer, []).append(line)
        if self._on_line is not None and (buffer == self._current or notify):
            self._on_line(buffer, line)

    def lines(self, buffer: str) -> list[Line]:
        return self.buffers.get(buffer, [])

    def jump_buffer(self, substring: str) -> bool:
        """Switch to the first buffer whose name contains the substring."""
        needle = substring.lower()
        for name in self.buffers:
            if needle in name.lower():
                self._current = name
                return True
        return False

    def exit(self) -> None:
        self.closed = True


class OfflineSession:
    """Chat session that keeps everything in memory."""

    def __init__(
        self,
        nick: str,
        window: BufferWindow | None = None,
        capabilities: set[str] | None = None,
    ):
        self._nick = nick
        self._window = window
        self.capabilities = set(capabilities or ())
        self.channels: dict[str, Channel] = {}
        self.sent: list[str] = []
        self.closed = False

    def _send(self, line: str) -> None:
        if self.closed:
            logger.warning(f"Dropping {line!r}: session closed")
            return
        logger.debug(f"-> {line}")
        self.sent.append(line)

    def nick(self) -> str:
        return self._nick

    def has_capability(self, name: str) -> bool:
        return name in self.capabilities

    def is_channel(self, name: str) -> bool:
        return bool(name) and name[0] in CHANNEL_PREFIXES

    def privmsg(self, target: str, content: str) -> None:
        self._send(f"PRIVMSG {target} :{content}")
        if ECHO_MESSAGE in self.capabilities and self._window is not None:
            self._window.add_line(*format_message(self._nick, target, content))

    def join(self, channels: str, keys: str = "") -> None:
        self._send(f"JOIN {channels} {keys}".rstrip())
        for name in channels.split(","):
            if not self.is_channel(name) or name in self.channels:
                continue
            self.channels[name] = Channel(name=name, members=[Member(name=self._nick, power_level="@")])
            if self._window is not None:
                self._window.add_buffer(name)

    def part(self, channel: str, reason: str = "") -> None:
        self._send(f"PART {channel} :{reason}" if reason else f"PART {channel}")
        if self.channels.pop(channel, None) is not None and self._window is not None:
            self._window.remove_buffer(channel)

    def topic(self, channel: str) -> tuple[str, Optional[str], Optional[datetime]]:
        state = self.channels.get(channel)
        if state is None:
            return "", None, None
        return state.topic, state.topic_who, state.topic_at

    def set_topic(self, channel: str, topic: str) -> None:
        self._send(f"TOPIC {channel} :{topic}")
        state = self.channels.get(channel)
        if state is not None:
            state.topic = topic
            state.topic_who = self._nick
            state.topic_at = datetime.now(timezone.utc)

    def names(self, channel: str) -> list[Member]:
        state = self.channels.get(channel)
        return list(state.members) if state is not None else []

    def send_raw(self, line: str) -> None:
        self._send(line)

    def quit(self, reason: str = "") -> None:
        self._send(f"QUIT :{reason}" if reason else "QUIT")
        self.closed = True
        self.channels.clear()
