"""Git repository access via subprocess.

:class:`GitRepository` is the log source used by the changelog builder.
It only reads: commit logs in the parser's wire format and the list of
tags with their dates.
"""

from __future__ import annotations

import subprocess
from datetime import datetime
from pathlib import Path

from changelog_py.core.commits import FIELD_SEPARATOR, LOG_FORMAT
from changelog_py.exceptions import GitError, LogParseError
from changelog_py.logging import get_logger

logger = get_logger(__name__)

TAG_FORMAT = f"%(refname:short){FIELD_SEPARATOR}%(creatordate:iso-strict)"


class GitRepository:
    """A local git repository.

    Args:
        path: Repository working directory
        bin: Git executable
        timeout: Seconds before a git command is considered hung

    Raises:
        GitError: If ``path`` is not inside a git repository
    """

    def __init__(self, path: Path | str, *, bin: str = "git", timeout: float = 30.0) -> None:
        self.path = Path(path).resolve()
        self.bin = bin
        self.timeout = timeout
        self._run("rev-parse", "--git-dir")

    def _run(self, *args: str) -> str:
        cmd = [self.bin, *args]
        logger.debug("git_command", args=list(args))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                cwd=self.path,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise GitError(f"{self.bin} not found") from e
        except subprocess.TimeoutExpired as e:
            raise GitError(f"git {args[0]} timed out after {self.timeout}s") from e
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"git {args[0]} failed with exit code {e.returncode}",
                stderr=e.stderr,
                returncode=e.returncode,
            ) from e
        return result.stdout

    def has_commits(self) -> bool:
        """Check whether HEAD points to a commit (false in a fresh repository).

        Raises:
            GitError: If git fails for any other reason, or times out
        """
        try:
            self._run("rev-parse", "--verify", "--quiet", "HEAD")
        except GitError as e:
            # --quiet exits 1 without output when HEAD does not resolve.
            if e.returncode == 1 and not (e.stderr or "").strip():
                return False
            raise
        return True

    def log(self, rev_range: str) -> str:
        """Return raw commit blocks for ``rev_range``, newest first.

        An empty repository has no history, so the log is empty.
        """
        if not self.has_commits():
            return ""
        return self._run(
            "log",
            "--no-decorate",
            "--no-color",
            f"--pretty=format:{LOG_FORMAT}",
            rev_range,
            "--",
        )

    def tags(self) -> list[tuple[str, datetime]]:
        """Return (name, date) for every tag."""
        output = self._run("for-each-ref", f"--format={TAG_FORMAT}", "refs/tags")

        tags = []
        for line in output.splitlines():
            if not line.strip():
                continue
            name, _, raw_date = line.partition(FIELD_SEPARATOR)
            try:
                date = datetime.fromisoformat(raw_date.strip())
            except ValueError as e:
                raise LogParseError(f"Invalid date {raw_date!r} for tag {name}") from e
            tags.append((name, date))
        return tags
