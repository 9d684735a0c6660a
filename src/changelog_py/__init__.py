"""changelog-py: structured changelogs from git history.

Commits are parsed with user-supplied patterns, filtered, grouped and
assembled into a tag/version tree that a renderer turns into text.
"""

from __future__ import annotations

__version__ = "0.1.0"
