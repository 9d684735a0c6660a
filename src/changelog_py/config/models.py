"""Configuration models for changelog-py.

The models mirror the ``[tool.changelog-py]`` table of pyproject.toml.
Defaults describe a conventional-commit setup, so a project with no
configuration at all still gets a sensible changelog.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_HEADER_PATTERN = r"^(\w*)(?:\(([\w\$\.\-\*\s]*)\))?\:\s(.*)$"
DEFAULT_MERGE_PATTERN = r"^Merge pull request #(\d+) from (.*)$"
DEFAULT_REVERT_PATTERN = r'^Revert "([\s\S]*)"$'


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class InfoConfig(_Model):
    """Repository metadata handed to the renderer."""

    title: str = "CHANGELOG"
    repository_url: str = ""


class PatternConfig(_Model):
    """A regular expression and the field names bound to its groups."""

    pattern: str = ""
    pattern_maps: list[str] = Field(default_factory=list)


class CommitsConfig(_Model):
    """Commit filtering and ordering."""

    filters: dict[str, list[str]] = Field(default_factory=dict)
    sort_by: str = "Scope"


class CommitGroupsConfig(_Model):
    """How filtered commits are bucketed and how the buckets are ordered."""

    group_by: str = "Type"
    sort_by: str = "Title"
    title_maps: dict[str, str] = Field(default_factory=dict)
    title_order: list[str] = Field(default_factory=list)


class IssuesConfig(_Model):
    """Issue reference detection."""

    prefix: list[str] = Field(default_factory=lambda: ["#"])


class RefsConfig(_Model):
    """Action keywords that introduce issue references (e.g. "Closes")."""

    actions: list[str] = Field(default_factory=list)


class NotesConfig(_Model):
    """Keywords marking note blocks in commit bodies."""

    keywords: list[str] = Field(default_factory=lambda: ["BREAKING CHANGE"])


class OptionsConfig(_Model):
    """Parsing, filtering, grouping and tag selection options."""

    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    commit_groups: CommitGroupsConfig = Field(default_factory=CommitGroupsConfig)
    header: PatternConfig = Field(
        default_factory=lambda: PatternConfig(
            pattern=DEFAULT_HEADER_PATTERN,
            pattern_maps=["Type", "Scope", "Subject"],
        )
    )
    merges: PatternConfig = Field(
        default_factory=lambda: PatternConfig(
            pattern=DEFAULT_MERGE_PATTERN,
            pattern_maps=["Ref", "Source"],
        )
    )
    reverts: PatternConfig = Field(
        default_factory=lambda: PatternConfig(
            pattern=DEFAULT_REVERT_PATTERN,
            pattern_maps=["Header"],
        )
    )
    issues: IssuesConfig = Field(default_factory=IssuesConfig)
    refs: RefsConfig = Field(default_factory=RefsConfig)
    notes: NotesConfig = Field(default_factory=NotesConfig)
    tag_filter_pattern: str | None = None
    next_tag: str | None = None


class GitConfig(_Model):
    """How the git binary is invoked."""

    bin: str = "git"
    timeout: float = Field(default=30.0, gt=0)


class ChangelogPyConfig(_Model):
    """Root configuration model."""

    info: InfoConfig = Field(default_factory=InfoConfig)
    options: OptionsConfig = Field(default_factory=OptionsConfig)
    git: GitConfig = Field(default_factory=GitConfig)
