"""Commit filtering by header field allow-lists."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from changelog_py.core.commits import Commit


def matches_filters(commit: Commit, filters: Mapping[str, Sequence[str]]) -> bool:
    """Check a commit against every configured field allow-list.

    A commit passes when, for each configured field, it has that header
    field and the value is in the field's allow-list. Commits whose header
    did not match never pass a non-empty filter.
    """
    for name, allowed in filters.items():
        value = commit.get_field(name)
        if value is None or value not in allowed:
            return False
    return True


def filter_commits(
    commits: Sequence[Commit],
    filters: Mapping[str, Sequence[str]],
) -> list[Commit]:
    """Keep the commits that pass all filters, preserving order.

    Args:
        commits: Parsed commits in log order
        filters: Field name to allowed values; empty keeps everything

    Returns:
        Filtered commits
    """
    if not filters:
        return list(commits)
    return [commit for commit in commits if matches_filters(commit, filters)]
