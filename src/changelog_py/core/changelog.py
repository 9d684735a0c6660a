"""Changelog assembly: from tags and raw logs to a version tree.

For every selected tag the log source is asked for the commits between
that tag and the previous (older) one. The raw log is parsed, filtered,
grouped and sorted, and becomes one :class:`Version`. Commits after the
newest tag form an extra "unreleased" version at the top.

The result is a :class:`ChangelogTree`, the only thing handed to a
renderer. Assembly is all-or-nothing: any error aborts it and no tree is
returned.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from changelog_py.core.commits import CommitParser, split_log
from changelog_py.core.grouping import extract_commits
from changelog_py.core.tags import (
    Tag,
    build_tags,
    compile_tag_filter,
    is_closed_range,
    link_tags,
    select_tags,
)
from changelog_py.exceptions import NoCommitsFoundError
from changelog_py.logging import get_logger

if TYPE_CHECKING:
    from datetime import datetime

    from changelog_py.config.models import ChangelogPyConfig
    from changelog_py.core.commits import Commit
    from changelog_py.core.grouping import CommitGroup, NoteGroup

logger = get_logger(__name__)

HEAD = "HEAD"
UNRELEASED = "Unreleased"


class LogSource(Protocol):
    """Supplies raw history. Implemented by :class:`~changelog_py.vcs.git.GitRepository`."""

    def log(self, rev_range: str) -> str:
        """Return raw commit blocks for a revision range, newest first."""
        ...

    def tags(self) -> list[tuple[str, datetime]]:
        """Return (name, date) for every tag in the repository."""
        ...


@dataclass(frozen=True)
class RepositoryInfo:
    """Repository metadata for the renderer."""

    title: str
    repository_url: str


@dataclass(frozen=True)
class Version:
    """The changelog entry for one tag, or for unreleased commits.

    Attributes:
        tag: The version's tag; None for unreleased commits without a next tag
        commit_groups: Filtered commits, grouped and sorted
        note_groups: Notes of the filtered commits, grouped by title
        merge_commits: Merge commits of the range, newest first
        revert_commits: Revert commits of the range, oldest first
        commits: Filtered commits in log order
        unreleased: True for the synthetic head version
    """

    tag: Tag | None
    commit_groups: tuple[CommitGroup, ...] = ()
    note_groups: tuple[NoteGroup, ...] = ()
    merge_commits: tuple[Commit, ...] = ()
    revert_commits: tuple[Commit, ...] = ()
    commits: tuple[Commit, ...] = ()
    unreleased: bool = False

    @property
    def name(self) -> str:
        return self.tag.name if self.tag is not None else UNRELEASED


@dataclass(frozen=True)
class ChangelogTree:
    """All versions, newest first, plus repository metadata."""

    info: RepositoryInfo
    versions: tuple[Version, ...]

    @property
    def unreleased(self) -> Version | None:
        if self.versions and self.versions[0].unreleased:
            return self.versions[0]
        return None


class ChangelogBuilder:
    """Assembles a :class:`ChangelogTree` from a log source.

    All patterns are compiled when the builder is created, so an invalid
    pattern fails before the log source is touched.

    Args:
        source: Where tags and raw logs come from
        config: Validated configuration

    Raises:
        PatternCompileError: If a configured pattern is invalid
    """

    def __init__(self, source: LogSource, config: ChangelogPyConfig) -> None:
        self.source = source
        self.config = config
        self.parser = CommitParser.from_options(config.options)
        self.tag_filter = compile_tag_filter(config.options.tag_filter_pattern)

    def build(self, query: str | None = None) -> ChangelogTree:
        """Assemble the changelog.

        Args:
            query: Optional starting tag ("1.0.0") or tag range ("1.0.0..2.0.0").
                Without a query every tag is covered. Unreleased commits are
                included unless the query is a closed range.

        Returns:
            The assembled tree

        Raises:
            RevisionNotFoundError: If the query names a missing tag
            InvalidQueryError: If a range query is reversed
            NoCommitsFoundError: If the covered range has no commits
            LogParseError: If the log source returns malformed blocks
        """
        tags = build_tags(self.source.tags(), self.tag_filter)
        selected = select_tags(tags, query)

        versions: list[Version] = []
        blocks_seen = 0

        if not is_closed_range(query):
            head_range = f"{tags[0].name}..{HEAD}" if tags else HEAD
            blocks, commits = self._read(head_range)
            blocks_seen += blocks
            if commits:
                versions.append(self._unreleased_version(commits, tags[0] if tags else None))

        for tag in selected:
            rev_range = f"{tag.previous.name}..{tag.name}" if tag.previous else tag.name
            blocks, commits = self._read(rev_range)
            blocks_seen += blocks
            versions.append(self._version(tag, commits))

        if blocks_seen == 0:
            raise NoCommitsFoundError(
                f'No commits found for "{query}"' if query else "No commits found"
            )

        logger.info("changelog_assembled", versions=len(versions), query=query)
        return ChangelogTree(
            info=RepositoryInfo(
                title=self.config.info.title,
                repository_url=self.config.info.repository_url,
            ),
            versions=tuple(versions),
        )

    def _read(self, rev_range: str) -> tuple[int, list[Commit]]:
        raw = self.source.log(rev_range)
        blocks = len(split_log(raw))
        commits = self.parser.parse_log(raw)
        logger.debug("range_parsed", range=rev_range, blocks=blocks, commits=len(commits))
        return blocks, commits

    def _version(self, tag: Tag | None, commits: list[Commit], *, unreleased: bool = False) -> Version:
        extracted = extract_commits(commits, self.config.options)
        return Version(
            tag=tag,
            commit_groups=extracted.commit_groups,
            note_groups=extracted.note_groups,
            merge_commits=extracted.merge_commits,
            revert_commits=extracted.revert_commits,
            commits=extracted.commits,
            unreleased=unreleased,
        )

    def _unreleased_version(self, commits: list[Commit], newest: Tag | None) -> Version:
        next_tag = self.config.options.next_tag
        tag = None
        if next_tag:
            tag = Tag(name=next_tag, date=max(c.date for c in commits))
            if newest is not None:
                link_tags(tag, newest)
        return self._version(tag, commits, unreleased=True)


def generate_changelog(
    source: LogSource,
    config: ChangelogPyConfig,
    query: str | None = None,
) -> ChangelogTree:
    """Assemble a changelog tree.

    Args:
        source: Log source (usually a GitRepository)
        config: Configuration
        query: Optional starting tag or tag range

    Returns:
        The assembled tree

    Raises:
        PatternCompileError: If a configured pattern is invalid
        RevisionNotFoundError: If the query names a missing tag
        NoCommitsFoundError: If there are no commits to report
    """
    return ChangelogBuilder(source, config).build(query)
