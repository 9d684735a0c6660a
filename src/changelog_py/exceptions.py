"""Exception hierarchy for changelog-py.

Every error raised on purpose by the package derives from
:class:`ChangelogPyError`, so callers (the CLI in particular) can catch a
single type and report its message.
"""

from __future__ import annotations


class ChangelogPyError(Exception):
    """Base class for all changelog-py errors."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(ChangelogPyError):
    """Configuration could not be loaded or is invalid."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml could be located."""


class ConfigValidationError(ConfigError):
    """Configuration values failed validation."""


# =============================================================================
# Parsing
# =============================================================================


class PatternCompileError(ChangelogPyError):
    """A configured regular expression failed to compile."""

    def __init__(self, name: str, pattern: str, reason: str) -> None:
        self.name = name
        self.pattern = pattern
        super().__init__(f"Invalid {name} pattern {pattern!r}: {reason}")


class LogParseError(ChangelogPyError):
    """A raw commit block from the log source is malformed."""


# =============================================================================
# Assembly
# =============================================================================


class RevisionNotFoundError(ChangelogPyError):
    """The requested starting tag or revision does not exist."""

    def __init__(self, revision: str) -> None:
        self.revision = revision
        super().__init__(f'"{revision}" was not found')


class InvalidQueryError(ChangelogPyError):
    """A revision range query is malformed."""


class NoCommitsFoundError(ChangelogPyError):
    """The resolved revision range contains no commits."""

    def __init__(self, message: str = "No commits found") -> None:
        super().__init__(message)


# =============================================================================
# VCS
# =============================================================================


class GitError(ChangelogPyError):
    """A git command failed or timed out."""

    def __init__(
        self,
        message: str,
        stderr: str | None = None,
        returncode: int | None = None,
    ) -> None:
        self.stderr = stderr
        self.returncode = returncode
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
