"""Configuration management for changelog-py."""

from __future__ import annotations

from changelog_py.config.loader import load_config
from changelog_py.config.models import (
    ChangelogPyConfig,
    CommitGroupsConfig,
    CommitsConfig,
    GitConfig,
    InfoConfig,
    IssuesConfig,
    NotesConfig,
    OptionsConfig,
    PatternConfig,
    RefsConfig,
)

__all__ = [
    "ChangelogPyConfig",
    "CommitGroupsConfig",
    "CommitsConfig",
    "GitConfig",
    "InfoConfig",
    "IssuesConfig",
    "NotesConfig",
    "OptionsConfig",
    "PatternConfig",
    "RefsConfig",
    "load_config",
]
