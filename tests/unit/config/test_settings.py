# tests/unit/config/test_settings.py — v1
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from ebuildmeta.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_default_codec_policy(self):
        s = Settings(_env_file=None)
        assert s.duplicate_key_policy == "last_wins"
        assert s.strict_eapi is False

    def test_default_cache_root(self):
        s = Settings(_env_file=None)
        assert s.cache_root == Path("/var/db/repos/gentoo/metadata/md5-cache")

    def test_default_logging(self):
        s = Settings(_env_file=None)
        assert s.log_level == "WARNING"
        assert s.log_format == "text"
        assert s.log_file is None
        assert s.log_rotation == "10MB"
        assert s.log_retention == 5


class TestSettingsValidation:
    def test_bad_rotation(self):
        with pytest.raises(ConfigurationError, match="LOG_ROTATION"):
            Settings(_env_file=None, log_rotation="ten megabytes")

    def test_log_file_is_directory(self, tmp_path):
        with pytest.raises(ConfigurationError, match="directory"):
            Settings(_env_file=None, log_file=tmp_path)

    def test_negative_retention(self):
        with pytest.raises(ConfigurationError, match="LOG_RETENTION"):
            Settings(_env_file=None, log_retention=-1)

    def test_errors_combined(self):
        with pytest.raises(ConfigurationError, match="LOG_RETENTION.*; LOG_ROTATION"):
            Settings(_env_file=None, log_retention=-1, log_rotation="huge")

    def test_unknown_policy(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, duplicate_key_policy="first_wins")


class TestEnvironment:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("EBUILDMETA_DUPLICATE_KEY_POLICY", "reject")
        monkeypatch.setenv("EBUILDMETA_STRICT_EAPI", "true")
        s = Settings(_env_file=None)
        assert s.duplicate_key_policy == "reject"
        assert s.strict_eapi is True

    def test_env_file(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("EBUILDMETA_LOG_LEVEL=DEBUG\nUNRELATED=1\n", encoding="utf-8")
        s = Settings(_env_file=env)
        assert s.log_level == "DEBUG"


class TestLoadSettings:
    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        s = load_settings(log_format="json", cache_root=tmp_path)
        assert s.log_format == "json"
        assert s.cache_root == tmp_path
