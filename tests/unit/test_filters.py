"""Tests for commit filtering."""

from __future__ import annotations

from changelog_py.core.commits import Commit, CommitParser
from changelog_py.core.filters import filter_commits, matches_filters


def _parse(parser: CommitParser, block, *subjects: str) -> list[Commit]:
    return [parser.parse(block(subject, sha=f"{i:040d}")) for i, subject in enumerate(subjects)]


class TestFilterCommits:
    """Tests for filter_commits()."""

    def test_allow_list(self, parser: CommitParser, block):
        """Only commits whose field value is allowed survive."""
        commits = _parse(
            parser,
            block,
            "chore(*): First commit",
            "feat(core): Add foo bar",
            "docs(readme): Update usage #123",
            "fix(api): Handle null",
        )

        filtered = filter_commits(commits, {"Type": ["feat", "fix"]})

        assert [c.get_field("Type") for c in filtered] == ["feat", "fix"]

    def test_and_across_fields(self, parser: CommitParser, block):
        """Every configured field must pass."""
        commits = _parse(parser, block, "feat(core): a", "feat(api): b", "fix(core): c")

        filtered = filter_commits(commits, {"Type": ["feat"], "Scope": ["core"]})

        assert [c.header for c in filtered] == ["feat(core): a"]

    def test_unmatched_header_excluded(self, parser: CommitParser, block):
        """Commits without header fields fail any non-empty filter."""
        commits = _parse(parser, block, "Merge pull request #1 from a/b", "feat: x")

        filtered = filter_commits(commits, {"Type": ["feat"]})

        assert [c.header for c in filtered] == ["feat: x"]

    def test_unknown_field_excludes_everything(self, parser: CommitParser, block):
        """A filter on a field no commit has keeps nothing."""
        commits = _parse(parser, block, "feat: x", "fix: y")

        assert filter_commits(commits, {"Kind": ["feat"]}) == []

    def test_empty_filters_keep_all(self, parser: CommitParser, block):
        """No filters keeps every commit, including unmatched headers."""
        commits = _parse(parser, block, "feat: x", "random text")

        assert filter_commits(commits, {}) == commits

    def test_empty_string_value(self, parser: CommitParser, block):
        """An empty field value can be allowed explicitly."""
        commits = _parse(parser, block, "feat: no scope", "feat(core): scoped")

        filtered = filter_commits(commits, {"Scope": [""]})

        assert [c.header for c in filtered] == ["feat: no scope"]


class TestMatchesFilters:
    """Tests for matches_filters()."""

    def test_value_not_in_list(self, parser: CommitParser, block):
        """A present field with a disallowed value fails."""
        commit = parser.parse(block("docs: x"))

        assert not matches_filters(commit, {"Type": ["feat"]})
        assert matches_filters(commit, {"Type": ["docs"]})
