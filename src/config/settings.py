# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Covers codec policy (duplicate keys, unknown EAPIs), the default cache
location used by the file helpers, and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ebuildmeta.logging.handlers import parse_size


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Library settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EBUILDMETA_",
        extra="ignore",
    )

    # === Codec ===
    duplicate_key_policy: Literal["last_wins", "reject"] = "last_wins"
    strict_eapi: bool = False

    # === Cache location ===
    cache_root: Path = Path("/var/db/repos/gentoo/metadata/md5-cache")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        errors: list[str] = []

        if self.log_retention < 0:
            errors.append(f"LOG_RETENTION must be >= 0, got {self.log_retention}")

        try:
            parse_size(self.log_rotation)
        except ValueError:
            errors.append(f"LOG_ROTATION {self.log_rotation!r} is not a size like '10MB'")

        if self.log_file is not None and self.log_file.is_dir():
            errors.append(f"LOG_FILE {self.log_file} is a directory")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
