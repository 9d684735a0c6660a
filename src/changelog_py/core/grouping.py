"""Grouping and sorting of parsed commits.

Commits are bucketed into :class:`CommitGroup` by a configurable field,
and notes are collected into :class:`NoteGroup` by title. Merge and
revert commits are collected separately and never affect groups.

Ordering rule used everywhere: case-sensitive lexical ascending, values
that are missing sort after values that are present, ties keep their
original order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from changelog_py.core.filters import filter_commits

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence

    from changelog_py.config.models import OptionsConfig
    from changelog_py.core.commits import Commit, Note

T = TypeVar("T")


@dataclass(frozen=True)
class CommitGroup:
    """Commits sharing one value of the group-by field."""

    key: str
    title: str
    commits: tuple[Commit, ...]

    def lookup(self, name: str) -> str | None:
        if name == "Title":
            return self.title
        if name == "Key":
            return self.key
        return None


@dataclass(frozen=True)
class NoteGroup:
    """Notes sharing one title, in the order they were discovered."""

    title: str
    notes: tuple[Note, ...]


@dataclass(frozen=True)
class ExtractedCommits:
    """Everything derived from the commits of one revision range."""

    commits: tuple[Commit, ...]
    commit_groups: tuple[CommitGroup, ...]
    note_groups: tuple[NoteGroup, ...]
    merge_commits: tuple[Commit, ...]
    revert_commits: tuple[Commit, ...]


def _missing_last(value: str | None) -> tuple[bool, str]:
    return (value is None, value or "")


def _sorted_by(items: Iterable[T], getter: Callable[[T], str | None]) -> list[T]:
    return sorted(items, key=lambda item: _missing_last(getter(item)))


def sort_commits(commits: Iterable[Commit], sort_by: str) -> list[Commit]:
    """Sort commits by a field, commits lacking it last."""
    return _sorted_by(commits, lambda commit: commit.lookup(sort_by))


def group_commits(
    commits: Iterable[Commit],
    group_by: str,
    sort_by: str,
    title_maps: Mapping[str, str] | None = None,
) -> list[CommitGroup]:
    """Partition commits by the value of ``group_by``.

    Commits without the field belong to no group. Groups come out in the
    order their keys were first seen; commits inside are sorted by ``sort_by``.
    The group title is looked up in ``title_maps``, falling back to the key.
    """
    title_maps = title_maps or {}
    buckets: dict[str, list[Commit]] = {}
    for commit in commits:
        key = commit.lookup(group_by)
        if key is None:
            continue
        buckets.setdefault(key, []).append(commit)

    return [
        CommitGroup(
            key=key,
            title=title_maps.get(key, key),
            commits=tuple(sort_commits(members, sort_by)),
        )
        for key, members in buckets.items()
    ]


def sort_groups(
    groups: Iterable[CommitGroup],
    sort_by: str,
    title_order: Sequence[str] = (),
) -> list[CommitGroup]:
    """Order groups by ``sort_by`` ("Title" or "Key").

    Groups whose title appears in ``title_order`` come first, in that order.
    """
    groups = list(groups)
    ranked = {title: i for i, title in enumerate(title_order)}
    pinned = sorted((g for g in groups if g.title in ranked), key=lambda g: ranked[g.title])
    rest = _sorted_by((g for g in groups if g.title not in ranked), lambda g: g.lookup(sort_by))
    return pinned + rest


def collect_merges(commits: Iterable[Commit]) -> list[Commit]:
    """Commits with a merge sub-record, newest first."""
    return sorted((c for c in commits if c.merge is not None), key=lambda c: c.date, reverse=True)


def collect_reverts(commits: Iterable[Commit]) -> list[Commit]:
    """Commits with a revert sub-record, oldest first."""
    return sorted((c for c in commits if c.revert is not None), key=lambda c: c.date)


def collect_notes(commits: Iterable[Commit]) -> list[NoteGroup]:
    """Gather notes into groups by title.

    Titles keep the order in which they were first discovered, and notes
    keep discovery order (commit order, then position in the body). This is
    not date order.
    """
    buckets: dict[str, list[Note]] = {}
    for commit in commits:
        for note in commit.notes:
            buckets.setdefault(note.title, []).append(note)
    return [NoteGroup(title=title, notes=tuple(notes)) for title, notes in buckets.items()]


def extract_commits(commits: Sequence[Commit], options: OptionsConfig) -> ExtractedCommits:
    """Filter, group and sort the commits of one revision range.

    Merge and revert collections are taken from all commits, before
    filtering. Groups and notes only see commits that pass the filters.
    """
    groups_config = options.commit_groups
    filtered = filter_commits(commits, options.commits.filters)

    groups = group_commits(
        filtered,
        group_by=groups_config.group_by,
        sort_by=options.commits.sort_by,
        title_maps=groups_config.title_maps,
    )

    return ExtractedCommits(
        commits=tuple(filtered),
        commit_groups=tuple(sort_groups(groups, groups_config.sort_by, groups_config.title_order)),
        note_groups=tuple(collect_notes(filtered)),
        merge_commits=tuple(collect_merges(commits)),
        revert_commits=tuple(collect_reverts(commits)),
    )
