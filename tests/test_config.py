"""
Tests for vaultkeeper.config module.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from vaultkeeper.config import VaultkeeperConfig, load_config


class TestVaultkeeperConfig:
    """Tests for VaultkeeperConfig class."""

    def test_config_creation_with_kwargs(self):
        """Keyword arguments fill the required fields; the rest keep defaults."""
        config = VaultkeeperConfig(
            supabase_url="https://test.supabase.co",
            supabase_key="test-key-12345678901234567890"
        )
        assert config.supabase_url == "https://test.supabase.co"
        assert config.supabase_key == "test-key-12345678901234567890"
        assert config.db_schema == "public"
        assert config.enable_decision_log is True
        assert config.toggle_max_attempts == 3
        assert config.debug is False

    def test_config_with_all_options(self):
        config = VaultkeeperConfig(
            supabase_url="https://test.supabase.co",
            supabase_key="test-key-12345678901234567890",
            db_schema="vaults",
            supabase_anon_key="anon-key",
            enable_decision_log=False,
            toggle_max_attempts=5,
            debug=True,
        )
        assert config.db_schema == "vaults"
        assert config.supabase_anon_key == "anon-key"
        assert config.enable_decision_log is False
        assert config.toggle_max_attempts == 5
        assert config.debug is True

    def test_schema_alias(self):
        """The schema can be given by its alias."""
        config = VaultkeeperConfig(
            supabase_url="https://test.supabase.co",
            supabase_key="test-key-12345678901234567890",
            schema="vaults",
        )
        assert config.db_schema == "vaults"

    def test_config_url_trailing_slash_removed(self):
        """A trailing slash on the project URL is dropped."""
        config = VaultkeeperConfig(
            supabase_url="https://test.supabase.co/",
            supabase_key="test-key-12345678901234567890"
        )
        assert config.supabase_url == "https://test.supabase.co"

    @pytest.mark.parametrize("url", ["http://test.supabase.co", "test.supabase.co", ""])
    def test_config_url_validation_invalid(self, url):
        """Only https project URLs are accepted."""
        with pytest.raises(ValidationError):
            VaultkeeperConfig(supabase_url=url, supabase_key="test-key-12345678901234567890")

    def test_config_key_validation(self):
        with pytest.raises(ValidationError):
            VaultkeeperConfig(supabase_url="https://test.supabase.co", supabase_key="short")

    def test_toggle_attempts_must_be_positive(self):
        with pytest.raises(ValidationError):
            VaultkeeperConfig(
                supabase_url="https://test.supabase.co",
                supabase_key="test-key-12345678901234567890",
                toggle_max_attempts=0,
            )

    def test_config_from_env(self):
        """VAULTKEEPER_* variables are read, including typed fields."""
        env = {
            "VAULTKEEPER_SUPABASE_URL": "https://env.supabase.co",
            "VAULTKEEPER_SUPABASE_KEY": "env-key-12345678901234567890",
            "VAULTKEEPER_ENABLE_DECISION_LOG": "false",
            "VAULTKEEPER_TOGGLE_MAX_ATTEMPTS": "7",
        }
        with patch.dict(os.environ, env, clear=True):
            config = VaultkeeperConfig()

        assert config.supabase_url == "https://env.supabase.co"
        assert config.supabase_key == "env-key-12345678901234567890"
        assert config.enable_decision_log is False
        assert config.toggle_max_attempts == 7

    def test_config_missing_required(self, tmp_path, monkeypatch):
        """No URL or key anywhere is an error."""
        monkeypatch.chdir(tmp_path)
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValidationError):
                VaultkeeperConfig()


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_config_with_overrides(self):
        """Overrides win over the environment."""
        env = {
            "VAULTKEEPER_SUPABASE_URL": "https://env.supabase.co",
            "VAULTKEEPER_SUPABASE_KEY": "env-key-12345678901234567890",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config(debug=True)

        assert config.supabase_url == "https://env.supabase.co"
        assert config.debug is True
