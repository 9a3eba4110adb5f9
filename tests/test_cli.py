"""
Tests for CLI commands and global options.

pacman is never executed; subprocess.run is patched and settings come
from a pacgate.yml written into tmp_path.
"""

import json
import subprocess
import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from pacgate.main import cli

_RUN = "pacgate.adapters.pacman.command.subprocess.run"


def _completed(stdout="", stderr="", returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def config(tmp_path: Path) -> Path:
    """A pacgate.yml pointing the lock file into tmp_path."""
    content = textwrap.dedent(f"""\
        pacman:
          lock_file: {tmp_path / "db.lck"}
          no_confirm: true
        repositories: [sync]
    """)
    path = tmp_path / "pacgate.yml"
    path.write_text(content)
    return path


@pytest.fixture
def as_user(monkeypatch):
    monkeypatch.setattr("os.geteuid", lambda: 1000)
    monkeypatch.delenv("SUDO_USER", raising=False)


@pytest.fixture
def as_sudo(monkeypatch):
    monkeypatch.setattr("os.geteuid", lambda: 0)
    monkeypatch.setenv("SUDO_USER", "alice")


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "pacman and AUR" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_missing_config(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(tmp_path / "nope.yml"), "orphans"])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestQueryCommands:
    """foreign / orphans / devel / satisfied."""

    def test_foreign(self, config: Path):
        runner = CliRunner()
        with patch(_RUN, return_value=_completed("yay 12.3-1\nfoo-git r1-1\n")):
            result = runner.invoke(cli, ["--config", str(config), "foreign"])
        assert result.exit_code == 0
        assert "yay" in result.output
        assert "foo-git" in result.output

    def test_foreign_json(self, config: Path):
        runner = CliRunner()
        with patch(_RUN, return_value=_completed("yay 12.3-1\n")):
            result = runner.invoke(cli, ["--config", str(config), "foreign", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == [{"name": "yay", "version": "12.3-1"}]

    def test_orphans_empty(self, config: Path):
        runner = CliRunner()
        with patch(_RUN, return_value=_completed(returncode=1)):
            result = runner.invoke(cli, ["--config", str(config), "orphans"])
        assert result.exit_code == 0
        assert "No orphans" in result.output

    def test_devel_json(self, config: Path):
        runner = CliRunner()
        with patch(_RUN, return_value=_completed("foo-git 1\nbar 1\nbaz-hg 1\n")):
            result = runner.invoke(cli, ["--config", str(config), "devel", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == ["baz-hg", "foo-git"]

    def test_query_failure_exits_one(self, config: Path):
        runner = CliRunner()
        with patch(_RUN, return_value=_completed(stderr="error: db broken\n", returncode=1)):
            result = runner.invoke(cli, ["--config", str(config), "orphans"])
        assert result.exit_code == 1
        assert "db broken" in result.output

    def test_satisfied(self, config: Path):
        runner = CliRunner()
        with patch(_RUN, return_value=_completed()) as mock_run:
            result = runner.invoke(cli, ["--config", str(config), "satisfied", "glibc>=2.38"])
        assert result.exit_code == 0
        assert mock_run.call_args[0][0] == ["pacman", "-T", "glibc>=2.38"]

    def test_unsatisfied(self, config: Path):
        runner = CliRunner()
        with patch(_RUN, return_value=_completed("foo>9\n", returncode=127)):
            result = runner.invoke(cli, ["--config", str(config), "satisfied", "foo>9"])
        assert result.exit_code == 1

    def test_bad_dependency(self, config: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config), "satisfied", "foo<=1"])
        assert result.exit_code == 2
        assert "Unsupported" in result.output


class TestPlanCommand:
    """plan."""

    _SI = "Repository : extra\nName : firefox\nVersion : 131.0-1\n"

    def test_plan(self, config: Path):
        runner = CliRunner()
        stderr = "error: package 'nope' was not found\n"
        with patch(_RUN, return_value=_completed(self._SI, stderr, returncode=1)):
            result = runner.invoke(cli, ["--config", str(config), "plan", "firefox", "nope"])
        assert result.exit_code == 0, result.output
        assert "extra/firefox" in result.output
        assert "nope" in result.output

    def test_plan_json(self, config: Path):
        runner = CliRunner()
        with patch(_RUN, return_value=_completed(self._SI)):
            result = runner.invoke(cli, ["--config", str(config), "plan", "firefox", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["prebuilt"][0]["name"] == "firefox"
        assert data["buildable"] == []

    def test_plan_provider_failure(self, config: Path):
        runner = CliRunner()
        with patch(_RUN, side_effect=FileNotFoundError()):
            result = runner.invoke(cli, ["--config", str(config), "plan", "firefox"])
        assert result.exit_code == 1
        assert "not found on PATH" in result.output


class TestMaintenanceCommands:
    """wait-lock / remove-orphans."""

    def test_wait_lock_free(self, config: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config), "wait-lock"])
        assert result.exit_code == 0
        assert "free" in result.output

    def test_wait_lock_stdin_closed(self, config: Path, tmp_path: Path):
        (tmp_path / "db.lck").touch()
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config), "wait-lock"], input="")
        assert result.exit_code == 1
        assert "locked" in result.output
        assert "stdin closed" in result.output
        assert (tmp_path / "db.lck").exists()

    def test_remove_orphans_needs_root(self, config: Path, as_user):
        runner = CliRunner()
        with patch(_RUN) as mock_run:
            result = runner.invoke(cli, ["--config", str(config), "remove-orphans"])
        assert result.exit_code == 1
        assert "sudo" in result.output
        mock_run.assert_not_called()

    def test_remove_orphans(self, config: Path, as_sudo):
        runner = CliRunner()
        with patch(_RUN, side_effect=[_completed("libfoo\n"), _completed()]) as mock_run:
            result = runner.invoke(cli, ["--config", str(config), "remove-orphans"])
        assert result.exit_code == 0, result.output
        assert "libfoo" in result.output
        assert mock_run.call_args_list[1][0][0] == ["pacman", "-Rsu", "libfoo", "--noconfirm"]

    def test_remove_orphans_none(self, config: Path, as_sudo):
        runner = CliRunner()
        with patch(_RUN, return_value=_completed(returncode=1)) as mock_run:
            result = runner.invoke(cli, ["--config", str(config), "remove-orphans"])
        assert result.exit_code == 0
        assert mock_run.call_count == 1


class TestRepositoryPriority:
    """plan with a repositories list that names no known provider."""

    def _config(self, tmp_path: Path, repositories: str) -> Path:
        path = tmp_path / "pacgate.yml"
        path.write_text(f"repositories: {repositories}\n")
        return path

    def test_unknown_providers_fail_cleanly(self, tmp_path: Path):
        config = self._config(tmp_path, "[pacman]")
        runner = CliRunner()
        with patch(_RUN) as mock_run:
            result = runner.invoke(cli, ["--config", str(config), "plan", "foo"])
        assert result.exit_code == 1
        assert not isinstance(result.exception, ValueError)
        assert "No repositories registered" in result.output
        mock_run.assert_not_called()

    def test_empty_list_rejected(self, tmp_path: Path):
        config = self._config(tmp_path, "[]")
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(config), "plan", "foo"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
