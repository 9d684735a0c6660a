"""Shared fixtures for changelog-py tests."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import pytest

from changelog_py.config.models import (
    ChangelogPyConfig,
    CommitGroupsConfig,
    CommitsConfig,
    InfoConfig,
    IssuesConfig,
    OptionsConfig,
)
from changelog_py.core.commits import COMMIT_SEPARATOR, FIELD_SEPARATOR, CommitParser

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


def make_block(
    subject: str,
    body: str = "",
    *,
    sha: str = "0123456789abcdef0123456789abcdef01234567",
    date: str = "2018-01-01T00:00:00+00:00",
    author: str = "test_user",
    email: str = "test@example.com",
) -> str:
    """Build one raw commit block in the git log wire format."""
    fields = [sha, sha[:7], author, email, date, author, email, date, subject, body]
    return COMMIT_SEPARATOR + FIELD_SEPARATOR.join(fields) + "\n"


class FakeLogSource:
    """In-memory log source keyed by revision range."""

    def __init__(
        self,
        logs: dict[str, list[str]] | None = None,
        tags: list[tuple[str, str]] | None = None,
    ) -> None:
        self.logs = logs or {}
        self._tags = [(name, datetime.fromisoformat(date)) for name, date in tags or []]
        self.calls: list[str] = []

    def log(self, rev_range: str) -> str:
        self.calls.append(rev_range)
        return "".join(self.logs.get(rev_range, []))

    def tags(self) -> list[tuple[str, datetime]]:
        return list(self._tags)


@pytest.fixture
def fake_source() -> type[FakeLogSource]:
    """The in-memory log source class."""
    return FakeLogSource


@pytest.fixture
def block() -> Callable[..., str]:
    """Factory for raw commit blocks."""
    return make_block


@pytest.fixture
def options() -> OptionsConfig:
    """Conventional-commit options with "#" and "gh-" issue prefixes."""
    return OptionsConfig(issues=IssuesConfig(prefix=["#", "gh-"]))


@pytest.fixture
def parser(options: OptionsConfig) -> CommitParser:
    """Parser built from the default options."""
    return CommitParser.from_options(options)


@pytest.fixture
def features_config() -> ChangelogPyConfig:
    """Config keeping only feat/fix commits, with display titles."""
    return ChangelogPyConfig(
        info=InfoConfig(
            title="CHANGELOG Example",
            repository_url="https://github.com/example/project",
        ),
        options=OptionsConfig(
            commits=CommitsConfig(filters={"Type": ["feat", "fix"]}, sort_by="Scope"),
            commit_groups=CommitGroupsConfig(
                group_by="Type",
                sort_by="Title",
                title_maps={"feat": "Features", "fix": "Bug Fixes"},
            ),
            issues=IssuesConfig(prefix=["#", "gh-"]),
        ),
    )


@pytest.fixture
def sample_log() -> dict[str, list[str]]:
    """Log ranges for a history tagged 1.0.0, 1.1.0 and 2.0.0-beta.0, plus head commits."""
    return {
        "2.0.0-beta.0..HEAD": [
            make_block(
                "fix(core): Fix commit",
                "This is body message.",
                sha="f" * 40,
                date="2018-01-04T00:01:00+00:00",
            ),
            make_block("refactor(context): gofmt", sha="e" * 40, date="2018-01-04T00:00:00+00:00"),
        ],
        "1.1.0..2.0.0-beta.0": [
            make_block(
                "feat(router): Muliple breaking change",
                "This is body,\n\nBREAKING CHANGE:\nMultiple\nbreaking\nchange message.",
                sha="d" * 40,
                date="2018-01-03T00:01:00+00:00",
            ),
            make_block(
                "feat(context): Online breaking change",
                "BREAKING CHANGE: Online breaking change message.",
                sha="c" * 40,
                date="2018-01-03T00:00:00+00:00",
            ),
        ],
        "1.0.0..1.1.0": [
            make_block(
                'Revert "feat(core): Add foo bar @mention and issue #987"',
                sha="b3" * 20,
                date="2018-01-02T00:03:00+00:00",
            ),
            make_block(
                "Merge pull request #1000 from tsuyoshiwada/patch-1",
                sha="b2" * 20,
                date="2018-01-02T00:02:00+00:00",
            ),
            make_block(
                "Merge pull request #999 from tsuyoshiwada/patch-1",
                sha="b1" * 20,
                date="2018-01-02T00:01:00+00:00",
            ),
            make_block(
                "feat(parser): New some super options #333",
                sha="b0" * 20,
                date="2018-01-02T00:00:00+00:00",
            ),
        ],
        "1.0.0": [
            make_block("docs(readme): Update usage #123", sha="a2" * 20, date="2018-01-01T00:02:00+00:00"),
            make_block("feat(core): Add foo bar", sha="a1" * 20, date="2018-01-01T00:01:00+00:00"),
            make_block("chore(*): First commit", sha="a0" * 20, date="2018-01-01T00:00:00+00:00"),
        ],
    }


@pytest.fixture
def sample_tags() -> list[tuple[str, str]]:
    """Tags of the sample history, deliberately unordered."""
    return [
        ("1.1.0", "2018-01-02T00:03:00+00:00"),
        ("1.0.0", "2018-01-01T00:02:00+00:00"),
        ("2.0.0-beta.0", "2018-01-03T00:01:00+00:00"),
    ]


@pytest.fixture
def sample_source(sample_log: dict[str, list[str]], sample_tags: list[tuple[str, str]]) -> FakeLogSource:
    """Fake log source serving the sample history."""
    return FakeLogSource(logs=sample_log, tags=sample_tags)


@pytest.fixture
def temp_project_with_pyproject(tmp_path: Path) -> Path:
    """Project directory with a pyproject.toml carrying changelog-py config."""
    (tmp_path / "pyproject.toml").write_text(
        """\
[project]
name = "test-project"
version = "1.0.0"

[tool.changelog-py.info]
title = "CHANGELOG Example"
repository_url = "https://github.com/example/project"

[tool.changelog-py.options.commits]
filters = { Type = ["feat", "fix"] }
sort_by = "Scope"

[tool.changelog-py.options.commit_groups]
title_maps = { feat = "Features", fix = "Bug Fixes" }

[tool.changelog-py.options.issues]
prefix = ["#", "gh-"]
"""
    )
    return tmp_path
