"""Package manager access: query and install collaborators.

Re-exports the abstract ``PackageQuery`` / ``PackageInstaller`` interfaces,
their data models, and the Homebrew-backed implementations.
"""

from brewlock.brew.base import (
    ExecutionResult,
    InstalledPackage,
    PackageInstaller,
    PackageQuery,
    TapInfo,
)
from brewlock.brew.executor import CommandRunner, run_command
from brewlock.brew.homebrew import HomebrewInstaller, HomebrewQuery

__all__ = [
    "CommandRunner",
    "ExecutionResult",
    "HomebrewInstaller",
    "HomebrewQuery",
    "InstalledPackage",
    "PackageInstaller",
    "PackageQuery",
    "TapInfo",
    "run_command",
]
