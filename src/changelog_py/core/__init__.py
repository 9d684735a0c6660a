"""Core business logic for changelog-py.

This module contains the fundamental building blocks:
- Pattern rules and commit parsing
- Commit filtering, grouping and sorting
- Tag ordering and version assembly
- Markdown rendering of the assembled tree
"""

from __future__ import annotations

from changelog_py.core.changelog import (
    ChangelogBuilder,
    ChangelogTree,
    LogSource,
    RepositoryInfo,
    Version,
    generate_changelog,
)
from changelog_py.core.commits import (
    Commit,
    CommitParser,
    Contact,
    Merge,
    Note,
    Ref,
    Revert,
)
from changelog_py.core.filters import filter_commits
from changelog_py.core.grouping import (
    CommitGroup,
    NoteGroup,
    extract_commits,
    group_commits,
    sort_groups,
)
from changelog_py.core.patterns import PatternRule
from changelog_py.core.render import render_markdown
from changelog_py.core.tags import Tag, build_tags, select_tags

__all__ = [
    # Assembly
    "ChangelogBuilder",
    "ChangelogTree",
    # Commits
    "Commit",
    "CommitGroup",
    "CommitParser",
    "Contact",
    "LogSource",
    "Merge",
    "Note",
    "NoteGroup",
    "PatternRule",
    "Ref",
    "RepositoryInfo",
    "Revert",
    # Tags
    "Tag",
    "Version",
    "build_tags",
    "extract_commits",
    "filter_commits",
    "generate_changelog",
    "group_commits",
    # Rendering
    "render_markdown",
    "select_tags",
    "sort_groups",
]
