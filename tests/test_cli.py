"""Tests for the setup-pm command."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from pmresolver.cli.main import app
from pmresolver.preferences import global_preference_path, project_preference_path


runner = CliRunner()


class TestUsage:
    """Tests for argument handling."""

    def test_no_arguments_prints_usage(self, project: Path, process_env):
        """No arguments is a usage error."""
        result = runner.invoke(app, [])

        assert result.exit_code == 2
        assert "Usage" in result.output

    def test_unknown_option(self, project: Path, process_env):
        """Unrecognized options are rejected."""
        result = runner.invoke(app, ["--frobnicate"])

        assert result.exit_code != 0

    def test_combined_actions_rejected(self, project: Path, process_env):
        """Only one action may be given at a time."""
        result = runner.invoke(app, ["--global", "pnpm", "--detect"])

        assert result.exit_code == 2
        assert "cannot be combined" in result.output
        assert not global_preference_path(process_env).exists()


class TestSetGlobal:
    """Tests for setup-pm --global."""

    def test_writes_global_preference(self, project: Path, home: Path, process_env):
        """--global writes ~/.claude/package-manager.json."""
        result = runner.invoke(app, ["--global", "pnpm"])

        assert result.exit_code == 0
        assert "Set global package manager to 'pnpm'" in result.output
        path = home / ".claude" / "package-manager.json"
        assert json.loads(path.read_text())["packageManager"] == "pnpm"

    def test_invalid_candidate(self, project: Path, home: Path, process_env):
        """Unknown names exit 1 without writing."""
        result = runner.invoke(app, ["--global", "cargo"])

        assert result.exit_code == 1
        assert "Unknown package manager 'cargo'" in result.output
        assert not (home / ".claude").exists()


class TestSetProject:
    """Tests for setup-pm --project."""

    def test_writes_project_preference(self, project: Path, process_env):
        """--project writes ./.claude/package-manager.json."""
        result = runner.invoke(app, ["--project", "Bun"])

        assert result.exit_code == 0
        assert "Set project package manager to 'bun'" in result.output
        path = project_preference_path(project)
        assert json.loads(path.read_text())["packageManager"] == "bun"

    def test_invalid_candidate_keeps_existing_file(self, project: Path, process_env):
        """A rejected name leaves the existing preference untouched."""
        assert runner.invoke(app, ["--project", "yarn"]).exit_code == 0
        path = project_preference_path(project)
        before = path.read_bytes()

        result = runner.invoke(app, ["--project", "cargo"])

        assert result.exit_code == 1
        assert path.read_bytes() == before

    def test_write_failure(self, project: Path, process_env):
        """File system errors exit 1 with a message."""
        (project / ".claude").write_text("")

        result = runner.invoke(app, ["--project", "pnpm"])

        assert result.exit_code == 1
        assert "Failed to write" in result.output


class TestDetect:
    """Tests for setup-pm --detect."""

    def test_reports_lock_file(self, project: Path, process_env):
        """The report lists sources and the resolved manager."""
        (project / "pnpm-lock.yaml").write_text("")

        result = runner.invoke(app, ["--detect"])

        assert result.exit_code == 0
        assert "lock-file: pnpm" in result.output
        assert "Resolved: pnpm" in result.output
        assert "environment: not set" in result.output

    def test_override_shadows_lock_file(self, project: Path, process_env, monkeypatch):
        """Shadowed sources are still listed."""
        (project / "yarn.lock").write_text("")
        monkeypatch.setenv("CLAUDE_PACKAGE_MANAGER", "bun")

        result = runner.invoke(app, ["--detect"])

        assert result.exit_code == 0
        assert "environment: bun" in result.output
        assert "lock-file: yarn" in result.output
        assert "Resolved: bun" in result.output

    def test_nothing_found_still_exits_zero(self, project: Path, process_env):
        """Detection is diagnostic only."""
        result = runner.invoke(app, ["--detect"])

        assert result.exit_code == 0
        assert "Resolved: none" in result.output
        assert "setup-pm --global" in result.output

    def test_malformed_preference_reported(self, project: Path, process_env):
        """Unreadable preference files show up as skipped."""
        path = project_preference_path(project)
        path.parent.mkdir(parents=True)
        path.write_text("{oops")

        result = runner.invoke(app, ["--detect"])

        assert result.exit_code == 0
        assert "project-config: skipped" in result.output


class TestList:
    """Tests for setup-pm --list."""

    @pytest.mark.posix
    def test_lists_all_managers(self, project: Path, process_env, make_executable):
        """Every manager and its lock file is listed."""
        make_executable("yarn")

        result = runner.invoke(app, ["--list"])

        assert result.exit_code == 0
        for name in ("pnpm", "bun", "yarn", "npm", "yarn.lock", "bun.lockb"):
            assert name in result.output
        assert "yes" in result.output
