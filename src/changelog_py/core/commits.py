"""Commit records and the commit parser.

A raw log is a sequence of blocks, one per commit, in the wire format
defined by :data:`LOG_FORMAT`. Each block is turned into a :class:`Commit`
by applying three independent pattern rules to its subject line:

- the header rule fills the commit's dynamic ``fields`` (e.g. Type/Scope/Subject)
- the merge rule fills an optional :class:`Merge` sub-record
- the revert rule fills an optional :class:`Revert` sub-record

Any combination of the three may match. Mentions, issue references and
notes are scanned from the message text independently of the rules.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING

from changelog_py.core.patterns import PatternRule
from changelog_py.exceptions import LogParseError
from changelog_py.logging import get_logger

if TYPE_CHECKING:
    from changelog_py.config.models import OptionsConfig

logger = get_logger(__name__)

COMMIT_SEPARATOR = "@@__CHANGELOG_PY_COMMIT__@@"
FIELD_SEPARATOR = "@@__CHANGELOG_PY_FIELD__@@"

# hash, short hash, author name/email/date, committer name/email/date,
# subject, body. The body goes last so it may contain anything.
LOG_FORMAT = COMMIT_SEPARATOR + FIELD_SEPARATOR.join(
    ["%H", "%h", "%an", "%ae", "%aI", "%cn", "%ce", "%cI", "%s", "%b"]
)
_FIELD_COUNT = 10

_MENTION_PATTERN = re.compile(r"(?<![\w.@])@(\w[\w-]*)")


@dataclass(frozen=True)
class Contact:
    """Author or committer of a commit."""

    name: str
    email: str
    date: datetime


@dataclass(frozen=True)
class Merge:
    """Fields captured by the merge rule."""

    fields: Mapping[str, str]

    def get(self, name: str) -> str | None:
        return self.fields.get(name)


@dataclass(frozen=True)
class Revert:
    """Fields captured by the revert rule."""

    fields: Mapping[str, str]

    def get(self, name: str) -> str | None:
        return self.fields.get(name)


@dataclass(frozen=True)
class Note:
    """A titled text block embedded in a commit body (e.g. BREAKING CHANGE)."""

    title: str
    body: str


@dataclass(frozen=True)
class Ref:
    """An issue reference introduced by an action keyword, e.g. "Closes #12"."""

    action: str
    ref: str


@dataclass(frozen=True)
class Commit:
    """A parsed commit.

    ``fields`` is None when the header rule did not match the subject;
    otherwise it holds exactly the header rule's field names. Use
    :meth:`get_field` to tell an absent field (None) from an empty one ("").
    """

    hash: str
    short_hash: str
    author: Contact
    committer: Contact
    header: str
    body: str = ""
    fields: Mapping[str, str] | None = None
    merge: Merge | None = None
    revert: Revert | None = None
    mentions: tuple[str, ...] = ()
    issues: tuple[str, ...] = ()
    refs: tuple[Ref, ...] = ()
    notes: tuple[Note, ...] = ()

    @property
    def date(self) -> datetime:
        return self.author.date

    def get_field(self, name: str) -> str | None:
        """Return a header field, or None if the commit does not have it."""
        if self.fields is None:
            return None
        return self.fields.get(name)

    def lookup(self, name: str) -> str | None:
        """Resolve ``name`` against header fields, then built-in attributes.

        Built-ins are ``Header``, ``Hash``, ``ShortHash``, ``Author``,
        ``Committer``, ``Date`` (UTC ISO-8601) and ``Body``.
        """
        value = self.get_field(name)
        if value is not None:
            return value

        match name:
            case "Header":
                return self.header
            case "Hash":
                return self.hash
            case "ShortHash":
                return self.short_hash
            case "Author":
                return self.author.name
            case "Committer":
                return self.committer.name
            case "Date":
                return self.author.date.astimezone(UTC).isoformat()
            case "Body":
                return self.body
        return None


# =============================================================================
# Text scanning
# =============================================================================


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


def _alternation(literals: Iterable[str]) -> str:
    # Longest first.
    return "|".join(re.escape(s) for s in sorted(set(literals), key=len, reverse=True) if s)


def extract_mentions(text: str) -> tuple[str, ...]:
    """Return ``@name`` tokens in first-occurrence order, without duplicates."""
    return _unique(_MENTION_PATTERN.findall(text))


def extract_issues(text: str, pattern: re.Pattern[str] | None) -> tuple[str, ...]:
    """Return issue numbers in first-occurrence order, without duplicates."""
    if pattern is None:
        return ()
    return _unique(pattern.findall(text))


def extract_refs(
    text: str,
    pattern: re.Pattern[str] | None,
    issue_pattern: re.Pattern[str] | None,
) -> tuple[Ref, ...]:
    """Return action references such as "Closes #1, #2" as one Ref per issue."""
    if pattern is None or issue_pattern is None:
        return ()

    refs: list[Ref] = []
    for match in pattern.finditer(text):
        action = match.group("action")
        for number in issue_pattern.findall(match.group("issues")):
            ref = Ref(action=action, ref=number)
            if ref not in refs:
                refs.append(ref)
    return tuple(refs)


def extract_notes(body: str, pattern: re.Pattern[str] | None) -> tuple[Note, ...]:
    """Collect note blocks from a commit body.

    A note starts on a line beginning with a keyword. Its body is the rest
    of that line (after an optional colon) plus every following non-blank
    line, up to a blank line, the next keyword line, or the end of the body.
    """
    if pattern is None or not body:
        return ()

    notes: list[Note] = []
    lines = body.splitlines()
    i = 0
    while i < len(lines):
        match = pattern.match(lines[i])
        if match is None:
            i += 1
            continue

        parts = [match.group("rest")] if match.group("rest").strip() else []
        i += 1
        while i < len(lines) and lines[i].strip() and pattern.match(lines[i]) is None:
            parts.append(lines[i])
            i += 1

        notes.append(Note(title=match.group("keyword"), body="\n".join(parts).strip()))
    return tuple(notes)


# =============================================================================
# Parser
# =============================================================================


def split_log(text: str) -> list[str]:
    """Split raw log output into commit blocks, dropping empty ones."""
    return [block for block in text.split(COMMIT_SEPARATOR) if block.strip()]


def _parse_date(value: str, block_hash: str) -> datetime:
    try:
        date = datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise LogParseError(f"Invalid date {value!r} in commit {block_hash}") from e
    if date.tzinfo is None:
        raise LogParseError(f"Date {value!r} in commit {block_hash} has no timezone")
    return date


class CommitParser:
    """Turns raw commit blocks into :class:`Commit` records.

    Args:
        header: Rule applied to the subject to fill ``Commit.fields``
        merge: Rule that marks merge commits
        revert: Rule that marks revert commits
        issue_prefixes: Prefixes introducing issue numbers (e.g. "#", "gh-")
        note_keywords: Keywords starting note blocks (e.g. "BREAKING CHANGE")
        ref_actions: Keywords introducing issue references (e.g. "Closes")
    """

    def __init__(
        self,
        header: PatternRule,
        merge: PatternRule,
        revert: PatternRule,
        issue_prefixes: Iterable[str] = ("#",),
        note_keywords: Iterable[str] = ("BREAKING CHANGE",),
        ref_actions: Iterable[str] = (),
    ) -> None:
        self.header = header
        self.merge = merge
        self.revert = revert

        prefixes = _alternation(issue_prefixes)
        self._issue_pattern = re.compile(rf"(?:{prefixes})(\d+)") if prefixes else None

        keywords = _alternation(note_keywords)
        self._note_pattern = (
            re.compile(rf"^\s*(?P<keyword>{keywords})(?=[:\s]|$)[:\s]*(?P<rest>.*)$")
            if keywords
            else None
        )

        actions = _alternation(ref_actions)
        self._ref_pattern = (
            re.compile(
                rf"\b(?P<action>{actions})\b:?\s+"
                rf"(?P<issues>(?:{prefixes})\d+(?:\s*,\s*(?:{prefixes})\d+)*)",
                re.IGNORECASE,
            )
            if actions and prefixes
            else None
        )

    @classmethod
    def from_options(cls, options: OptionsConfig) -> CommitParser:
        """Build a parser from configuration, compiling every pattern up front.

        Raises:
            PatternCompileError: If any configured pattern is invalid
        """
        return cls(
            header=PatternRule.from_config("header", options.header),
            merge=PatternRule.from_config("merge", options.merges),
            revert=PatternRule.from_config("revert", options.reverts),
            issue_prefixes=options.issues.prefix,
            note_keywords=options.notes.keywords,
            ref_actions=options.refs.actions,
        )

    def parse_log(self, text: str) -> list[Commit]:
        """Parse every block of a raw log, preserving log order."""
        commits = []
        for block in split_log(text):
            commit = self.parse(block)
            if commit is not None:
                commits.append(commit)
        return commits

    def parse(self, block: str) -> Commit | None:
        """Parse one raw block.

        Returns:
            The commit, or None when its subject is empty.

        Raises:
            LogParseError: If the block does not follow :data:`LOG_FORMAT`
        """
        block = block.lstrip().removeprefix(COMMIT_SEPARATOR)
        parts = block.split(FIELD_SEPARATOR, _FIELD_COUNT - 1)
        if len(parts) != _FIELD_COUNT:
            raise LogParseError(
                f"Expected {_FIELD_COUNT} fields in commit block, got {len(parts)}: {block[:80]!r}"
            )

        (
            long_hash,
            short_hash,
            author_name,
            author_email,
            author_date,
            committer_name,
            committer_email,
            committer_date,
            subject,
            body,
        ) = parts
        long_hash = long_hash.strip()

        subject = subject.strip()
        if not subject:
            logger.debug("commit_skipped", hash=long_hash, reason="empty subject")
            return None

        return self.build(
            hash=long_hash,
            short_hash=short_hash.strip(),
            author=Contact(
                author_name, author_email, _parse_date(author_date, long_hash)
            ),
            committer=Contact(
                committer_name, committer_email, _parse_date(committer_date, long_hash)
            ),
            subject=subject,
            body=body.strip(),
        )

    def build(
        self,
        *,
        hash: str,
        short_hash: str,
        author: Contact,
        committer: Contact,
        subject: str,
        body: str = "",
    ) -> Commit:
        """Classify an already split commit message."""
        fields = self.header.apply(subject)
        merge = self.merge.apply(subject)
        revert = self.revert.apply(subject)
        message = f"{subject}\n\n{body}" if body else subject

        return Commit(
            hash=hash,
            short_hash=short_hash,
            author=author,
            committer=committer,
            header=subject,
            body=body,
            fields=MappingProxyType(fields) if fields is not None else None,
            merge=Merge(MappingProxyType(merge)) if merge is not None else None,
            revert=Revert(MappingProxyType(revert)) if revert is not None else None,
            mentions=extract_mentions(message),
            issues=extract_issues(message, self._issue_pattern),
            refs=extract_refs(message, self._ref_pattern, self._issue_pattern),
            notes=extract_notes(body, self._note_pattern),
        )
