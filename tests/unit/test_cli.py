"""Tests for the command line interface."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from rich.console import Console
from typer.testing import CliRunner

from changelog_py import __version__
from changelog_py.cli.commands.generate import run_generate
from changelog_py.cli.main import app
from changelog_py.exceptions import ConfigNotFoundError, GitError

if TYPE_CHECKING:
    from pathlib import Path

runner = CliRunner()


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def _text(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


class TestMain:
    """Tests for the top-level command."""

    def test_version(self):
        """--version prints the package version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_generate_help(self):
        """The generate command documents its options."""
        result = runner.invoke(app, ["generate", "--help"])

        assert result.exit_code == 0
        assert "--next-tag" in result.output


class TestRunGenerate:
    """Tests for run_generate()."""

    def test_writes_output_file(self, temp_project_with_pyproject: Path, sample_source):
        """The rendered changelog is written relative to the project."""
        console, err_console = _console(), _console()

        with patch("changelog_py.cli.commands.generate.GitRepository", return_value=sample_source):
            run_generate(
                path=str(temp_project_with_pyproject),
                query=None,
                output="CHANGELOG.md",
                next_tag=None,
                console=console,
                err_console=err_console,
            )

        content = (temp_project_with_pyproject / "CHANGELOG.md").read_text()
        assert content.startswith("# CHANGELOG Example\n")
        assert "### Features" in content
        assert "Wrote 4 version(s)" in _text(console)
        assert _text(err_console) == ""

    def test_prints_to_console(self, temp_project_with_pyproject: Path, sample_source):
        """Without an output file the changelog is printed, unreleased commits first."""
        console, err_console = _console(), _console()

        with patch("changelog_py.cli.commands.generate.GitRepository", return_value=sample_source):
            run_generate(
                path=str(temp_project_with_pyproject),
                query="1.1.0",
                output=None,
                next_tag=None,
                console=console,
                err_console=err_console,
            )

        text = _text(console)
        assert "1.1.0" in text
        assert "1.0.0" in text
        assert "Unreleased" in text

    def test_next_tag_override(self, temp_project_with_pyproject: Path, sample_source):
        """--next-tag names the unreleased version."""
        console, err_console = _console(), _console()

        with patch("changelog_py.cli.commands.generate.GitRepository", return_value=sample_source):
            run_generate(
                path=str(temp_project_with_pyproject),
                query=None,
                output="CHANGELOG.md",
                next_tag="2.0.0",
                console=console,
                err_console=err_console,
            )

        content = (temp_project_with_pyproject / "CHANGELOG.md").read_text()
        assert '<a name="2.0.0"></a>' in content
        assert "Unreleased" not in content

    def test_missing_config_exits(self, tmp_path: Path):
        """A project without pyproject.toml exits with status 1."""
        console, err_console = _console(), _console()

        with (
            patch("changelog_py.cli.commands.generate.load_config") as mock_load,
            pytest.raises(SystemExit) as exc_info,
        ):
            mock_load.side_effect = ConfigNotFoundError("No pyproject.toml found")
            run_generate(str(tmp_path), None, None, None, console, err_console)

        assert exc_info.value.code == 1
        assert "Error loading config" in _text(err_console)

    def test_missing_revision_exits(self, temp_project_with_pyproject: Path, sample_source):
        """An unknown start tag is reported and exits with status 1."""
        console, err_console = _console(), _console()

        with (
            patch("changelog_py.cli.commands.generate.GitRepository", return_value=sample_source),
            pytest.raises(SystemExit) as exc_info,
        ):
            run_generate(str(temp_project_with_pyproject), "foo", None, None, console, err_console)

        assert exc_info.value.code == 1
        assert '"foo" was not found' in _text(err_console)

    def test_git_error_exits(self, temp_project_with_pyproject: Path):
        """Git failures are reported and exit with status 1."""
        console, err_console = _console(), _console()

        with (
            patch(
                "changelog_py.cli.commands.generate.GitRepository",
                side_effect=GitError("git rev-parse failed", stderr="fatal: not a git repository"),
            ),
            pytest.raises(SystemExit) as exc_info,
        ):
            run_generate(str(temp_project_with_pyproject), None, None, None, console, err_console)

        assert exc_info.value.code == 1
        assert "not a git repository" in _text(err_console)
