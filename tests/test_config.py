#!/usr/bin/env python3
"""
Tests for configuration management module.
"""

import json
import pytest
from unittest.mock import patch

from chatline.config import DEFAULTS, Config, ConfigManager, get_config, get_config_manager


# ============================================================================
# Config Model Tests
# ============================================================================

class TestConfig:
    """Tests for Config model."""

    def test_create_empty_config(self):
        """Test creating config with all defaults."""
        cfg = Config()
        assert cfg.nick is None
        assert cfg.echo_message is None
        assert cfg.simple is None
        assert cfg.verbose is None
        assert cfg.log_file is None

    def test_create_config_with_values(self):
        cfg = Config(nick="alice", echo_message=True)
        assert cfg.nick == "alice"
        assert cfg.echo_message is True

    def test_get_with_value(self):
        cfg = Config(nick="alice")
        assert cfg.get("nick") == "alice"
        assert cfg.get("nick", "bob") == "alice"

    def test_get_with_none(self):
        """Test get method when value is None falls back to DEFAULTS."""
        cfg = Config()
        assert cfg.get("nick") == DEFAULTS["nick"]
        assert cfg.get("simple") is False

    def test_get_none_default_uses_argument(self):
        """Test a key whose DEFAULTS value is None falls back to the argument."""
        cfg = Config()
        assert cfg.get("log_file") is None
        assert cfg.get("log_file", "/tmp/x.log") == "/tmp/x.log"

    def test_get_unknown_key(self):
        cfg = Config()
        assert cfg.get("unknown_key") is None
        assert cfg.get("unknown_key", "default") == "default"

    def test_ignores_extra_fields(self):
        cfg = Config.model_validate({"_comment": "hi", "nick": "alice"})
        assert cfg.nick == "alice"


# ============================================================================
# ConfigManager Tests
# ============================================================================

class TestConfigManager:
    """Tests for ConfigManager."""

    @pytest.fixture
    def config_file(self, tmp_path):
        """Point ConfigManager at a temporary config directory."""
        config_dir = tmp_path / ".chatline"
        config_file = config_dir / "config.json"
        with patch.object(ConfigManager, 'CONFIG_DIR', config_dir):
            with patch.object(ConfigManager, 'CONFIG_FILE', config_file):
                yield config_file

    def test_load_nonexistent_config(self, config_file):
        """Test loading config when file doesn't exist (without creating)."""
        cfg = ConfigManager().load()
        assert cfg.nick is None
        assert not config_file.exists()

    def test_load_creates_default_config(self, config_file):
        cfg = ConfigManager().load(create_if_missing=True)
        assert cfg.nick is None
        assert config_file.exists()
        data = json.loads(config_file.read_text())
        assert data["nick"] == DEFAULTS["nick"]

    def test_save_and_load_config(self, config_file):
        ConfigManager().save(Config(nick="alice", simple=True))
        loaded = ConfigManager().load()
        assert loaded.nick == "alice"
        assert loaded.simple is True

    def test_save_only_non_none_values(self, config_file):
        ConfigManager().save(Config(nick="alice"))
        assert json.loads(config_file.read_text()) == {"nick": "alice"}

    def test_set_preserves_other_values(self, config_file):
        """Test that setting one value preserves other existing values."""
        ConfigManager().set("nick", "alice")
        ConfigManager().set("echo_message", True)

        final = ConfigManager().load()
        assert final.nick == "alice"
        assert final.echo_message is True

    def test_set_unknown_key_raises(self, config_file):
        with pytest.raises(ValueError, match="Unknown config key"):
            ConfigManager().set("unknown_key", "value")

    def test_unset_value(self, config_file):
        mgr = ConfigManager()
        mgr.set("nick", "alice")
        mgr.set("verbose", True)

        mgr.unset("nick")

        loaded = ConfigManager().load()
        assert loaded.nick is None
        assert loaded.verbose is True

    def test_unset_unknown_key_raises(self, config_file):
        with pytest.raises(ValueError, match="Unknown config key"):
            ConfigManager().unset("unknown_key")

    def test_list_settings(self, config_file):
        """Test listing non-default settings."""
        mgr = ConfigManager()
        mgr.set("nick", "alice")
        mgr.set("simple", False)  # Same as default
        assert mgr.list_settings() == {"nick": "alice"}

    def test_reset(self, config_file):
        mgr = ConfigManager()
        mgr.set("nick", "alice")
        assert config_file.exists()

        mgr.reset()
        assert not config_file.exists()
        assert mgr.load().nick is None

    def test_load_invalid_json(self, config_file):
        """Test loading invalid JSON returns defaults."""
        config_file.parent.mkdir(parents=True)
        config_file.write_text("not valid json")
        assert ConfigManager().load().nick is None

    def test_load_invalid_schema(self, config_file):
        config_file.parent.mkdir(parents=True)
        config_file.write_text('{"echo_message": "not a bool"}')
        assert ConfigManager().load().echo_message is None


# ============================================================================
# Shared Manager Tests
# ============================================================================

class TestSharedManager:
    """Tests for the lazily created manager."""

    def test_get_config_manager_returns_same_instance(self, tmp_path):
        import chatline.config.config as config_module

        config_module._manager = None
        with patch.object(ConfigManager, 'CONFIG_FILE', tmp_path / "config.json"):
            assert get_config_manager() is get_config_manager()
        config_module._manager = None

    def test_get_config_returns_config(self, tmp_path):
        import chatline.config.config as config_module

        config_module._manager = None
        with patch.object(ConfigManager, 'CONFIG_FILE', tmp_path / "config.json"):
            assert isinstance(get_config(), Config)
        config_module._manager = None
