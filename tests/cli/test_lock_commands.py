"""Tests for ``brewlock generate``, ``check`` and ``replay``.

Exit Codes tested:
    generate: 0 written, 1 write failure.
    check: 0 match, 1 drift.
    replay: 0 all satisfied, 1 any failure.
"""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from brewlock import __version__
from brewlock.cli.context import AppContext
from brewlock.cli.main import cli
from brewlock.core.lockfile import (
    FormulaRecord,
    LockDocument,
    PackageKind,
    read_lock_document,
    write_lock_document,
)
from tests.helpers import FakeInstaller, FakeQuery, make_document


class TestGroup:
    """Validate top-level options."""

    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "lock file" in result.output
        assert "generate" in result.output
        assert "replay" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


# ===========================================================================
# generate
# ===========================================================================


class TestGenerate:
    """Validate snapshot generation."""

    def test_writes_lock_file(self, runner: CliRunner, app: AppContext, lock_path: Path) -> None:
        result = runner.invoke(cli, ["generate"], obj=app)
        assert result.exit_code == 0, result.output
        doc = read_lock_document(lock_path)
        assert set(doc.formulae) == {"git", "jq"}
        assert set(doc.casks) == {"docker"}
        assert doc.taps["acme/tools"].url == "https://example.com/tools.git"
        assert "Lock file written to" in result.output

    def test_lock_alias(self, runner: CliRunner, app: AppContext, lock_path: Path) -> None:
        result = runner.invoke(cli, ["lock"], obj=app)
        assert result.exit_code == 0
        assert lock_path.exists()

    def test_output_option(self, runner: CliRunner, app: AppContext, tmp_path: Path) -> None:
        out = tmp_path / "other" / "machine.lock"
        result = runner.invoke(cli, ["generate", "-o", str(out)], obj=app)
        assert result.exit_code == 0
        assert read_lock_document(out).formulae["git"].version == "2.43.0"

    def test_overwrites_previous_content(
        self, runner: CliRunner, app: AppContext, lock_path: Path
    ) -> None:
        write_lock_document(make_document(formulae={"stale": "1"}), lock_path)
        runner.invoke(cli, ["generate"], obj=app)
        assert "stale" not in read_lock_document(lock_path).formulae

    def test_unwritable_path(self, runner: CliRunner, app: AppContext, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        result = runner.invoke(cli, ["generate", "-o", str(blocker / "brew.lock")], obj=app)
        assert result.exit_code == 1


# ===========================================================================
# check
# ===========================================================================


class TestCheck:
    """Validate drift reporting and exit codes."""

    def test_match_exits_zero(self, runner: CliRunner, app: AppContext, lock_path: Path) -> None:
        write_lock_document(make_document(formulae={"git": "2.43.0"}), lock_path)
        result = runner.invoke(cli, ["check"], obj=app)
        assert result.exit_code == 0
        assert "All installed packages match" in result.output

    def test_drift_exits_one(self, runner: CliRunner, app: AppContext, lock_path: Path) -> None:
        write_lock_document(make_document(formulae={"git": "0.0.0-bogus"}), lock_path)
        result = runner.invoke(cli, ["check"], obj=app)
        assert result.exit_code == 1
        assert "git" in result.output
        assert "0.0.0-bogus" in result.output

    def test_missing_lock_file_matches(self, runner: CliRunner, app: AppContext) -> None:
        result = runner.invoke(cli, ["check"], obj=app)
        assert result.exit_code == 0

    def test_json_format(self, runner: CliRunner, app: AppContext, tmp_path: Path) -> None:
        path = tmp_path / "custom.lock"
        write_lock_document(make_document(casks={"firefox": "121.0"}), path)
        result = runner.invoke(cli, ["check", "-f", str(path), "--format", "json"], obj=app)
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["matches"] is False
        assert data["mismatches"] == [
            {"name": "firefox", "kind": "cask", "expected": "121.0", "actual": None}
        ]

    def test_query_error_reported_as_drift(
        self, runner: CliRunner, app: AppContext, lock_path: Path
    ) -> None:
        app.query = FakeQuery(failing=["git"])
        write_lock_document(make_document(formulae={"git": "2.43.0"}), lock_path)
        result = runner.invoke(cli, ["check"], obj=app)
        assert result.exit_code == 1
        assert "not installed" in result.output


# ===========================================================================
# replay
# ===========================================================================


class TestReplay:
    """Validate replay output and exit codes."""

    def test_installs_missing_and_skips_present(
        self, runner: CliRunner, app: AppContext, installer: FakeInstaller, lock_path: Path
    ) -> None:
        write_lock_document(make_document(formulae={"git": "2.43.0", "wget": "1.24.5"}), lock_path)
        result = runner.invoke(cli, ["replay"], obj=app)
        assert result.exit_code == 0, result.output
        assert installer.calls == [(PackageKind.FORMULA, "wget")]
        assert "1 installed, 1 already present, 0 failed" in result.output

    def test_verbose_lists_entries(
        self, runner: CliRunner, app: AppContext, lock_path: Path
    ) -> None:
        write_lock_document(make_document(formulae={"git": "2.43.0"}), lock_path)
        result = runner.invoke(cli, ["replay", "--verbose"], obj=app)
        assert result.exit_code == 0
        assert "skipped" in result.output

    def test_verbose_shows_replaced_version(
        self, runner: CliRunner, app: AppContext, installer: FakeInstaller, lock_path: Path
    ) -> None:
        write_lock_document(make_document(formulae={"git": "2.42.0"}), lock_path)
        result = runner.invoke(cli, ["replay", "--verbose"], obj=app)
        assert result.exit_code == 0, result.output
        assert installer.calls == [(PackageKind.FORMULA, "git")]
        assert "2.43.0 -> 2.42.0" in result.output

    def test_failure_exits_one(
        self, runner: CliRunner, app: AppContext, lock_path: Path
    ) -> None:
        app.installer = FakeInstaller(exit_codes={"wget": 1})
        write_lock_document(make_document(formulae={"wget": "1.24.5"}), lock_path)
        result = runner.invoke(cli, ["replay"], obj=app)
        assert result.exit_code == 1
        assert "FAILED" in result.output

    def test_strict_mismatch(
        self, runner: CliRunner, app: AppContext, installer: FakeInstaller, lock_path: Path
    ) -> None:
        write_lock_document(make_document(formulae={"git": "2.42.0", "wget": "1"}), lock_path)
        result = runner.invoke(cli, ["replay", "--strict"], obj=app)
        assert result.exit_code == 1
        assert installer.calls == []
        assert "stopped at the first failure" in result.output

    def test_lockfile_option(
        self, runner: CliRunner, app: AppContext, installer: FakeInstaller, tmp_path: Path
    ) -> None:
        path = tmp_path / "elsewhere.lock"
        write_lock_document(
            LockDocument(formulae={"ripgrep": FormulaRecord(version="14.1.0")}), path
        )
        result = runner.invoke(cli, ["replay", "-f", str(path)], obj=app)
        assert result.exit_code == 0
        assert installer.calls == [(PackageKind.FORMULA, "ripgrep")]
