"""Version control access for changelog-py."""

from __future__ import annotations

from changelog_py.vcs.git import GitRepository

__all__ = ["GitRepository"]
