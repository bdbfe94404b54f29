"""Shared fixtures for CLI tests.

Every command is invoked with a prebuilt ``AppContext`` as ``obj`` so the
group callback never wires real Homebrew collaborators.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from brewlock.brew.base import TapInfo
from brewlock.cli.context import AppContext
from brewlock.config import BrewlockSettings
from brewlock.core.lockfile import CaskRecord, FormulaRecord, PackageKind
from tests.helpers import FakeInstaller, FakeQuery, FakeRunner


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def query() -> FakeQuery:
    """A machine with git, jq, docker and one custom tap."""
    return FakeQuery(
        installed={
            PackageKind.FORMULA: {
                "git": FormulaRecord(version="2.43.0"),
                "jq": FormulaRecord(version="1.7.1"),
            },
            PackageKind.CASK: {"docker": CaskRecord(version="4.26.1")},
        },
        taps=[TapInfo(name="acme/tools", url="https://example.com/tools.git")],
    )


@pytest.fixture
def installer(query: FakeQuery) -> FakeInstaller:
    return FakeInstaller(query=query)


@pytest.fixture
def brew_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def app(lock_path: Path, query: FakeQuery, installer: FakeInstaller,
        brew_runner: FakeRunner) -> AppContext:
    return AppContext(
        settings=BrewlockSettings(lock_file=lock_path),
        query=query,
        installer=installer,
        runner=brew_runner,
    )
