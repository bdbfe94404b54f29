"""Runtime configuration, driven by environment variables.

Settings are read from ``BREWLOCK_*`` environment variables. The lock file
path also honours the bare ``BREWLOCK`` variable::

    export BREWLOCK=~/dotfiles/brew.lock
    export BREWLOCK_LOG_LEVEL=INFO
    export BREWLOCK_BREW_BIN=/opt/homebrew/bin/brew
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LOCK_FILE = Path.home() / "brew.lock"


class BrewlockSettings(BaseSettings):
    """brewlock configuration with environment variable overrides."""

    model_config = SettingsConfigDict(
        env_prefix="BREWLOCK_",
        populate_by_name=True,
    )

    lock_file: Path = Field(
        default=DEFAULT_LOCK_FILE,
        validation_alias=AliasChoices("BREWLOCK", "BREWLOCK_LOCK_FILE"),
    )
    brew_bin: str = "brew"
    mas_bin: str = "mas"
    log_level: str = "WARNING"

    @field_validator("lock_file")
    @classmethod
    def _expand_user(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value!r}")
        return level


def get_lock_file_path() -> Path:
    """Return the lock file path, honouring ``BREWLOCK`` when set."""
    return BrewlockSettings().lock_file
