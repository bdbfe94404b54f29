"""Shared state handed to every CLI command through ``click``'s ``obj``."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Coroutine, TypeVar

from brewlock.brew.base import PackageInstaller, PackageQuery
from brewlock.brew.executor import CommandRunner, run_command
from brewlock.brew.homebrew import HomebrewInstaller, HomebrewQuery
from brewlock.config import BrewlockSettings

T = TypeVar("T")

LOG_FORMAT = "brewlock: %(levelname)s: %(message)s"


@dataclass
class AppContext:
    """Settings plus the collaborators commands act through.

    Tests build one with fakes and pass it as ``obj`` to ``CliRunner``.
    """

    settings: BrewlockSettings
    query: PackageQuery
    installer: PackageInstaller
    runner: CommandRunner = run_command

    @classmethod
    def from_settings(cls, settings: BrewlockSettings) -> AppContext:
        """Wire the Homebrew-backed collaborators from settings."""
        return cls(
            settings=settings,
            query=HomebrewQuery(brew_bin=settings.brew_bin, mas_bin=settings.mas_bin),
            installer=HomebrewInstaller(
                brew_bin=settings.brew_bin, mas_bin=settings.mas_bin
            ),
        )


def configure_logging(level: str) -> None:
    """Send log records to stderr at the configured level."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine in a synchronous context.

    Args:
        coro: Awaitable coroutine to execute.

    Returns:
        The coroutine's return value.
    """
    return asyncio.run(coro)
