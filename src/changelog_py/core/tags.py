"""Tags: version boundaries in history.

Tags are ordered newest first and linked to their chronological
neighbours. A query selects which tags a changelog covers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from changelog_py.exceptions import InvalidQueryError, PatternCompileError, RevisionNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime


@dataclass(frozen=True, eq=False)
class Tag:
    """A named point in history.

    Tags are immutable. The neighbour links are set once, while the tag
    list is built, with :func:`link_tags`.

    Attributes:
        name: Tag name (e.g. "1.0.0")
        date: Tag date, timezone-aware
        previous: The chronologically older tag, if any
        next: The chronologically newer tag, if any
    """

    name: str
    date: datetime
    previous: Tag | None = field(default=None, repr=False)
    next: Tag | None = field(default=None, repr=False)


def compile_tag_filter(pattern: str | None) -> re.Pattern[str] | None:
    """Compile the tag name filter.

    Raises:
        PatternCompileError: If ``pattern`` is invalid
    """
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternCompileError("tag filter", pattern, str(e)) from e


def link_tags(newer: Tag, older: Tag) -> None:
    """Link two chronologically adjacent tags while a tag list is built."""
    object.__setattr__(newer, "previous", older)
    object.__setattr__(older, "next", newer)


def build_tags(
    raw_tags: Iterable[tuple[str, datetime]],
    tag_filter: re.Pattern[str] | None = None,
) -> list[Tag]:
    """Order tags newest first and link each one to its neighbours.

    Args:
        raw_tags: (name, date) pairs in any order
        tag_filter: Only keep tags whose name matches this regex
    """
    tags = [
        Tag(name=name, date=date)
        for name, date in raw_tags
        if tag_filter is None or tag_filter.search(name)
    ]
    tags.sort(key=lambda tag: tag.date, reverse=True)

    for newer, older in zip(tags, tags[1:]):
        link_tags(newer, older)

    return tags


def _index_of(tags: list[Tag], name: str) -> int:
    for i, tag in enumerate(tags):
        if tag.name == name:
            return i
    raise RevisionNotFoundError(name)


def select_tags(tags: list[Tag], query: str | None) -> list[Tag]:
    """Pick the tags a changelog should cover, newest first.

    Supported queries:

    - ``None`` or ``""``: every tag
    - ``name``: ``name`` and every older tag
    - ``old..new``: from ``new`` down to ``old``, both included
    - ``old..``: from the newest tag down to ``old``
    - ``..new``: same as ``new``

    Raises:
        RevisionNotFoundError: If a named tag does not exist
        InvalidQueryError: If ``old`` is newer than ``new``
    """
    if not query:
        return list(tags)

    if ".." not in query:
        return tags[_index_of(tags, query) :]

    old, new = query.split("..", 1)
    newest = _index_of(tags, new) if new else 0
    oldest = _index_of(tags, old) if old else len(tags) - 1

    if oldest < newest:
        raise InvalidQueryError(f'"{old}" is newer than "{new}" in query "{query}"')

    return tags[newest : oldest + 1]


def is_closed_range(query: str | None) -> bool:
    """Whether ``query`` is an ``old..new`` range with both ends named.

    Only a closed range bounds the changelog from above; every other query
    still reaches the commits after the newest tag.
    """
    if not query or ".." not in query:
        return False
    old, new = query.split("..", 1)
    return bool(old and new)
