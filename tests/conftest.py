"""Shared fixtures for brewlock tests."""

import pathlib

import pytest

_ENV_VARS = (
    "BREWLOCK",
    "BREWLOCK_LOCK_FILE",
    "BREWLOCK_BREW_BIN",
    "BREWLOCK_MAS_BIN",
    "BREWLOCK_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own brewlock settings out of every test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def lock_path(tmp_path: pathlib.Path) -> pathlib.Path:
    """Path for a lock file inside a temporary directory (not created)."""
    return tmp_path / "brew.lock"
