"""
REPL (Read-Eval-Print Loop) for the chat input line.

Each submitted line goes through the dispatcher; failures are shown as a
single status line in the current buffer.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from prompt_toolkit import PromptSession, print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.styles import Style

from chatline.client import Line
from chatline.logging import log_command_error

if TYPE_CHECKING:
    from chatline.client import App
    from chatline.core import Dispatcher
    from chatline.offline import BufferWindow

logger = logging.getLogger(__name__)

# Bold, colour (with optional foreground/background), reset, italic, underline
FORMATTING_RE = re.compile(r"\x02|\x03(\d{1,2}(,\d{1,2})?)?|\x0f|\x1d|\x1f")

TIME_FORMAT = "%H:%M"


def get_style() -> Style:
    """Get the prompt and line style."""
    return Style.from_dict({
        "prompt": "ansicyan bold",
        "time": "ansibrightblack",
        "head": "ansigreen",
        "status": "ansibrightblack",
        "error": "ansired",
    })


def strip_formatting(text: str) -> str:
    """Remove IRC formatting control codes from text."""
    return FORMATTING_RE.sub("", text)


def format_line(line: Line) -> FormattedText:
    """Render a buffer line as prompt_toolkit formatted text."""
    head_class = "class:status" if line.head == "--" else "class:head"
    fragments = [("class:time", line.at.strftime(TIME_FORMAT) + " ")]
    if line.head:
        fragments.append((head_class, f"{line.head} "))
    fragments.append(("", strip_formatting(line.body)))
    return FormattedText(fragments)


def print_line(buffer: str, line: Line) -> None:
    """Print a line added to the visible buffer."""
    print_formatted_text(format_line(line), style=get_style())


def run_line(app: "App", dispatcher: "Dispatcher", line: str) -> bool:
    """Dispatch one input line, reporting errors in the current buffer.

    Returns:
        True if the command succeeded, False if it failed.
    """
    buffer = app.window.current_buffer()
    try:
        dispatcher.dispatch(app, buffer, line)
    except Exception as e:
        message = log_command_error(e, context=f"{buffer}: {line!r}")
        app.status(message, buffer)
        return False
    return True


def repl(app: "App", dispatcher: "Dispatcher", window: "BufferWindow", simple: bool = False) -> None:
    """Run the interactive REPL until /quit or a double Ctrl+D.

    Args:
        app: The application context given to command handlers.
        dispatcher: Dispatcher holding the command registry.
        window: Window whose closed flag ends the loop.
        simple: Read lines with input() instead of prompt_toolkit.
    """
    session: PromptSession | None = None if simple else PromptSession(style=get_style())

    def read(prompt: str) -> str:
        if session is None:
            return input(prompt)
        return session.prompt([("class:prompt", prompt)])

    app.status("Type /help for commands, /quit to exit")

    while not window.closed:
        try:
            user_input = read(f"[{window.current_buffer()}] ")
        except EOFError:
            # First Ctrl+D - wait for confirmation
            print("\nPress Ctrl+D again to exit, or Ctrl+C to cancel.")
            try:
                user_input = read("")
                if not user_input.strip():
                    continue
            except EOFError:
                # Second Ctrl+D - exit as if /quit was typed
                run_line(app, dispatcher, "/quit")
                break
            except KeyboardInterrupt:
                print("\n[Exit cancelled]\n")
                continue
        except KeyboardInterrupt:
            # Ctrl+C during prompt - just continue
            print()
            continue

        run_line(app, dispatcher, user_input)

    print("Goodbye!")
