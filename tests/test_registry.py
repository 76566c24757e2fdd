#!/usr/bin/env python3
"""
Tests for the command registry.
"""

import dataclasses

import pytest

from chatline.commands import build_registry
from chatline.core import (
    CommandDescriptor,
    CommandRegistry,
    CommandRegistryBuilder,
    RegistryError,
)


def noop(app, buffer, args):
    return None


# ============================================================================
# CommandRegistry Tests
# ============================================================================

class TestCommandRegistry:
    """Tests for CommandRegistry construction and lookup."""

    def test_lookup_existing(self):
        """Test lookup returns the descriptor for an exact name."""
        entry = CommandDescriptor(name="JOIN", handler=noop, max_args=2)
        registry = CommandRegistry([entry])
        assert registry.lookup("JOIN") is entry

    def test_lookup_missing(self):
        """Test lookup returns None for unknown names and prefixes."""
        registry = CommandRegistry([CommandDescriptor(name="JOIN", handler=noop)])
        assert registry.lookup("JO") is None
        assert registry.lookup("PART") is None

    def test_duplicate_name_rejected(self):
        """Test duplicate names are a construction error."""
        with pytest.raises(RegistryError, match="collision"):
            CommandRegistry([
                CommandDescriptor(name="JOIN", handler=noop),
                CommandDescriptor(name="JOIN", handler=noop),
            ])

    def test_lowercase_name_rejected(self):
        """Test names must be uppercase."""
        with pytest.raises(RegistryError, match="uppercase"):
            CommandRegistry([CommandDescriptor(name="join", handler=noop)])

    def test_default_command_must_allow_home(self):
        """Test the empty-name command must be allowed from home."""
        with pytest.raises(RegistryError, match="home"):
            CommandRegistry([CommandDescriptor(name="", handler=noop, min_args=1, max_args=1)])

    def test_min_above_max_rejected(self):
        """Test min_args > max_args is rejected unless max_args is 0."""
        with pytest.raises(RegistryError):
            CommandRegistry([CommandDescriptor(name="MSG", handler=noop, min_args=3, max_args=2)])

    def test_max_zero_sentinel_allowed(self):
        """Test max_args=0 means no arguments and is always valid."""
        registry = CommandRegistry([CommandDescriptor(name="NAMES", handler=noop)])
        assert registry.lookup("NAMES").max_args == 0

    def test_negative_arity_rejected(self):
        with pytest.raises(RegistryError):
            CommandRegistry([CommandDescriptor(name="X", handler=noop, min_args=-1)])

    def test_all_sorted(self):
        """Test all() lists (name, descriptor) pairs sorted by name."""
        registry = CommandRegistry([
            CommandDescriptor(name="TOPIC", handler=noop),
            CommandDescriptor(name="HELP", handler=noop),
            CommandDescriptor(name="", handler=noop, allow_home=True),
        ])
        assert [name for name, _ in registry.all()] == ["", "HELP", "TOPIC"]

    def test_not_mutable(self):
        """Test the underlying table cannot be modified."""
        registry = CommandRegistry([CommandDescriptor(name="HELP", handler=noop)])
        with pytest.raises(TypeError):
            registry._commands["JOIN"] = CommandDescriptor(name="JOIN", handler=noop)
        assert "JOIN" not in registry

    def test_descriptor_frozen(self):
        entry = CommandDescriptor(name="HELP", handler=noop)
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.max_args = 3

    def test_container_protocol(self):
        registry = CommandRegistry([
            CommandDescriptor(name="B", handler=noop),
            CommandDescriptor(name="A", handler=noop),
        ])
        assert len(registry) == 2
        assert "A" in registry
        assert [entry.name for entry in registry] == ["A", "B"]


# ============================================================================
# Candidate Tests
# ============================================================================

class TestCandidates:
    """Tests for prefix candidate enumeration."""

    @pytest.fixture
    def registry(self):
        return build_registry()

    def test_prefix_candidates_sorted(self, registry):
        """Test every name sharing a prefix is listed, sorted."""
        assert registry.candidates("M") == ["ME", "MSG"]
        assert registry.candidates("QU") == ["QUIT", "QUOTE"]

    def test_exact_name(self, registry):
        assert registry.candidates("JOIN") == ["JOIN"]

    def test_empty_fragment_only_default(self, registry):
        """Test an empty fragment never prefix-matches every command."""
        assert registry.candidates("") == [""]

    def test_empty_fragment_without_default(self):
        registry = CommandRegistry([CommandDescriptor(name="HELP", handler=noop)])
        assert registry.candidates("") == []

    def test_no_match(self, registry):
        assert registry.candidates("XYZ") == []

    def test_shared_prefix_always_ambiguous(self, registry):
        """Test any prefix shared by two names yields several candidates."""
        names = [name for name, _ in registry.all() if name]
        for first in names:
            for second in names:
                if first == second:
                    continue
                common = 0
                while common < min(len(first), len(second)) and first[common] == second[common]:
                    common += 1
                for size in range(1, common + 1):
                    assert len(registry.candidates(first[:size])) >= 2


# ============================================================================
# CommandRegistryBuilder Tests
# ============================================================================

class TestCommandRegistryBuilder:
    """Tests for the decorator-based builder."""

    def test_register_and_build(self):
        """Test registered handlers end up in the built registry."""
        commands = CommandRegistryBuilder()

        @commands.register("msg", allow_home=True, min_args=2, max_args=2,
                           usage="<target> <message>", description="send a message")
        def cmd_msg(app, buffer, args):
            return args

        registry = commands.build()
        entry = registry.lookup("MSG")
        assert entry.handler is cmd_msg
        assert entry.allow_home is True
        assert (entry.min_args, entry.max_args) == (2, 2)
        assert entry.usage == "<target> <message>"

    def test_decorator_returns_function(self):
        commands = CommandRegistryBuilder()
        decorated = commands.register("help")(noop)
        assert decorated is noop

    def test_register_after_build_rejected(self):
        """Test the builder is sealed once the registry is built."""
        commands = CommandRegistryBuilder()
        commands.register("help")(noop)
        registry = commands.build()
        with pytest.raises(RegistryError, match="already built"):
            commands.register("join")(noop)
        assert "JOIN" not in registry

    def test_duplicate_fails_at_build(self):
        commands = CommandRegistryBuilder()
        commands.register("help")(noop)
        commands.register("HELP")(noop)
        with pytest.raises(RegistryError):
            commands.build()


# ============================================================================
# Built-in Table Tests
# ============================================================================

class TestBuiltinTable:
    """Tests that the built-in table matches the documented commands."""

    EXPECTED = {
        "": (True, 1, 1, ""),
        "HELP": (True, 0, 1, "[command]"),
        "JOIN": (True, 1, 2, "<channels> [keys]"),
        "ME": (True, 1, 1, "<message>"),
        "MSG": (True, 2, 2, "<target> <message>"),
        "NAMES": (False, 0, 0, ""),
        "PART": (True, 0, 2, "[channel] [reason]"),
        "QUIT": (True, 0, 1, "[reason]"),
        "QUOTE": (True, 1, 1, "<raw message>"),
        "REPLY": (True, 1, 1, "<message>"),
        "TOPIC": (False, 0, 1, "[topic]"),
        "BUFFER": (True, 1, 1, "<name>"),
    }

    def test_table(self):
        registry = build_registry()
        assert len(registry) == len(self.EXPECTED)
        for name, (allow_home, min_args, max_args, usage) in self.EXPECTED.items():
            entry = registry.lookup(name)
            assert entry is not None, name
            assert (entry.allow_home, entry.min_args, entry.max_args, entry.usage) == (
                allow_home, min_args, max_args, usage
            )

    def test_registries_independent(self):
        """Test each build returns a distinct registry."""
        assert build_registry() is not build_registry()

    def test_descriptions(self):
        """Test every command except the default one has a description."""
        for name, entry in build_registry().all():
            assert bool(entry.description) == bool(name)
