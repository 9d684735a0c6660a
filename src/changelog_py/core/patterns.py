"""Pattern rules: a regular expression plus the field names of its groups.

Rules are user supplied, so nothing here knows about "type" or "scope".
Capture groups are bound to field names by position.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from changelog_py.exceptions import PatternCompileError

if TYPE_CHECKING:
    from changelog_py.config.models import PatternConfig


@dataclass(frozen=True)
class PatternRule:
    """A compiled pattern and its ordered field names.

    Attributes:
        regex: Compiled expression, or None for a rule that never matches
        fields: Field names bound positionally to the capture groups
    """

    regex: re.Pattern[str] | None
    fields: tuple[str, ...]

    @classmethod
    def compile(cls, name: str, pattern: str, fields: list[str] | tuple[str, ...]) -> PatternRule:
        """Compile ``pattern`` into a rule.

        Args:
            name: Rule name used in error messages ("header", "merge", ...)
            pattern: Regular expression; empty disables the rule
            fields: Field names for the capture groups, in order

        Raises:
            PatternCompileError: If the expression is invalid
        """
        if not pattern:
            return cls(regex=None, fields=tuple(fields))
        try:
            regex = re.compile(pattern)
        except re.error as e:
            raise PatternCompileError(name, pattern, str(e)) from e
        return cls(regex=regex, fields=tuple(fields))

    @classmethod
    def from_config(cls, name: str, config: PatternConfig) -> PatternRule:
        return cls.compile(name, config.pattern, config.pattern_maps)

    def apply(self, text: str) -> dict[str, str] | None:
        """Match ``text`` and map the captured groups to field names.

        Returns:
            One entry per declared field, or None when the rule does not match.
            Groups that did not participate, and fields without a group, map
            to an empty string.
        """
        if self.regex is None:
            return None

        match = self.regex.search(text)
        if match is None:
            return None

        groups = match.groups()
        return {
            field: (groups[i] or "") if i < len(groups) else ""
            for i, field in enumerate(self.fields)
        }
