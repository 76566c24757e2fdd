#!/usr/bin/env python3
"""
CLI entry point for chatline.

Starts an offline chat session (no server connection) and reads commands
from the terminal.
"""

from __future__ import annotations

import argparse
import logging
import sys

from chatline.client import ECHO_MESSAGE, App
from chatline.commands import build_registry
from chatline.config import DEFAULTS, get_config_manager
from chatline.core import CommandRegistry, Dispatcher
from chatline.logging import close_file_logging, configure_file_logging

BOOL_KEYS = ("echo_message", "simple", "verbose")


def print_commands(registry: CommandRegistry) -> None:
    """Print registered commands with their usage and description."""
    print("\nAvailable commands:")
    for name, entry in registry.all():
        if not name:
            continue
        usage = f"/{name.lower()} {entry.usage}".rstrip()
        home = "" if entry.allow_home else " (not from home)"
        print(f"  {usage:<28} - {entry.description}{home}")
    print()


def print_config() -> None:
    """Print current configuration."""
    cfg_mgr = get_config_manager()
    settings = cfg_mgr.list_settings()

    print(f"\nConfig file: {cfg_mgr.CONFIG_FILE}")
    if settings:
        print("\nCustom settings:")
        for key, value in settings.items():
            print(f"  {key}: {value}")

    print("\nDefaults:")
    for key, value in DEFAULTS.items():
        if key not in settings:
            print(f"  {key}: {value}")

    print("\nSet with: chatline --set-config key=value")
    print()


def set_config(assignment: str) -> int:
    """Handle --set-config KEY=VALUE. Returns the exit code."""
    cfg_mgr = get_config_manager()
    try:
        key, value = assignment.split("=", 1)
        key = key.strip()
        value = value.strip()
        if key in BOOL_KEYS:
            value = value.lower() in ("true", "1", "yes")
        cfg_mgr.set(key, value)
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    print(f"Set {key} = {value}")
    print(f"Saved to {cfg_mgr.CONFIG_FILE}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the chatline CLI."""
    cfg_mgr = get_config_manager()
    cfg = cfg_mgr.config

    parser = argparse.ArgumentParser(
        description="Offline chat client command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Config file: {cfg_mgr.CONFIG_FILE}

Examples:
    chatline                           # Start with the configured nick
    chatline --nick alice              # Start as alice
    chatline --list-commands           # Show available commands
    chatline --set-config nick=alice   # Change the default nick
        """,
    )
    parser.add_argument("--nick", "-n", default=cfg.get("nick"),
                        help=f"Nickname (default: {cfg.get('nick')})")
    parser.add_argument("--simple", action="store_true", default=cfg.get("simple"),
                        help="Use simple REPL (no prompt_toolkit)")
    parser.add_argument("--debug", action="store_true", default=cfg.get("verbose"),
                        help="Write DEBUG logs to the log file")
    parser.add_argument("--list-commands", action="store_true",
                        help="List available commands and exit")
    parser.add_argument("--config", action="store_true",
                        help="Show current configuration")
    parser.add_argument("--set-config", metavar="KEY=VALUE",
                        help="Set a configuration value")
    parser.add_argument("--unset-config", metavar="KEY",
                        help="Reset a configuration value to its default")

    args = parser.parse_args(argv)

    if args.config:
        print_config()
        return 0

    if args.set_config:
        return set_config(args.set_config)

    if args.unset_config:
        try:
            cfg_mgr.unset(args.unset_config)
        except ValueError as e:
            print(f"Error: {e}")
            return 1
        print(f"Unset {args.unset_config}")
        return 0

    registry = build_registry()

    if args.list_commands:
        print_commands(registry)
        return 0

    from chatline.cli.repl import print_line, repl
    from chatline.offline import BufferWindow, OfflineSession

    level = logging.DEBUG if args.debug else logging.INFO
    configure_file_logging(cfg.get("log_file"), level=level)

    window = BufferWindow(on_line=print_line)
    capabilities = {ECHO_MESSAGE} if cfg.get("echo_message") else set()
    session = OfflineSession(args.nick, window=window, capabilities=capabilities)
    app = App(window=window, session=session)

    try:
        repl(app, Dispatcher(registry, home=app.home), window, simple=args.simple)
    finally:
        close_file_logging()
    return 0


if __name__ == "__main__":
    sys.exit(main())
