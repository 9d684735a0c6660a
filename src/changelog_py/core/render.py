"""Built-in markdown rendering of a changelog tree.

The tree is renderer-agnostic; this module is the default renderer used
by the CLI. Each version becomes a ``##`` section with one ``###``
subsection per commit group, followed by reverts, merged pull requests
and note groups.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from changelog_py.core.changelog import ChangelogTree, Version
    from changelog_py.core.commits import Commit


def format_commit(commit: Commit) -> str:
    """Format a grouped commit as a bullet line.

    Uses the ``Scope`` and ``Subject`` header fields when present and falls
    back to the raw subject line.
    """
    subject = commit.get_field("Subject") or commit.header
    scope = commit.get_field("Scope")
    prefix = f"**{scope}:** " if scope else ""
    return f"* {prefix}{subject}"


def _compare_base(version: Version, older: Version | None) -> str | None:
    if version.tag is not None and version.tag.previous is not None:
        return version.tag.previous.name
    if version.unreleased and older is not None:
        return older.name
    return None


def render_version(
    version: Version,
    repository_url: str = "",
    older: Version | None = None,
) -> str:
    """Render one version as markdown.

    Args:
        version: Version to render
        repository_url: Base URL used for compare links; empty disables links
        older: The version listed after this one, used as the compare base
               for unreleased commits
    """
    tag = version.tag
    title = version.name
    base = _compare_base(version, older)
    if repository_url and base:
        target = "HEAD" if version.unreleased else version.name
        title = f"[{title}]({repository_url}/compare/{base}...{target})"
    date = f" ({tag.date.strftime('%Y-%m-%d')})" if tag is not None else ""
    anchor = tag.name if tag is not None else "unreleased"

    lines = [f'<a name="{anchor}"></a>', f"## {title}{date}", ""]

    for group in version.commit_groups:
        lines.append(f"### {group.title}")
        lines.append("")
        lines.extend(format_commit(commit) for commit in group.commits)
        lines.append("")

    if version.revert_commits:
        lines.append("### Reverts")
        lines.append("")
        for commit in version.revert_commits:
            header = commit.revert.get("Header") if commit.revert else None
            lines.append(f"* {header or commit.header}")
        lines.append("")

    if version.merge_commits:
        lines.append("### Pull Requests")
        lines.append("")
        lines.extend(f"* {commit.header}" for commit in version.merge_commits)
        lines.append("")

    for note_group in version.note_groups:
        lines.append(f"### {note_group.title}")
        lines.append("")
        for note in note_group.notes:
            lines.append(note.body)
            lines.append("")

    return "\n".join(lines)


def render_markdown(tree: ChangelogTree) -> str:
    """Render a whole changelog tree as markdown."""
    sections = []
    if tree.info.title:
        sections.append(f"# {tree.info.title}")

    versions = tree.versions
    for i, version in enumerate(versions):
        older = versions[i + 1] if i + 1 < len(versions) else None
        sections.append(render_version(version, tree.info.repository_url, older))
    return "\n\n".join(sections).rstrip() + "\n"
