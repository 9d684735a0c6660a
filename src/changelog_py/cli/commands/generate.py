"""Implementation of the 'generate' command.

The generate command assembles the changelog from git history and
renders it as markdown, either to the console or to a file.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.markdown import Markdown
from rich.panel import Panel

from changelog_py.config import load_config
from changelog_py.core.changelog import generate_changelog
from changelog_py.core.render import render_markdown
from changelog_py.exceptions import ChangelogPyError, ConfigError
from changelog_py.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console


def run_generate(
    path: str | None,
    query: str | None,
    output: str | None,
    next_tag: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the generate command.

    Args:
        path: Optional path to project directory
        query: Optional starting tag or tag range (e.g. "1.0.0..2.0.0")
        output: File to write the changelog to; prints to console when None
        next_tag: Name for the unreleased commits (overrides config)
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    # Load configuration
    try:
        config = load_config(project_path)
    except ConfigError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    if next_tag:
        config = config.model_copy(
            update={"options": config.options.model_copy(update={"next_tag": next_tag})}
        )

    try:
        repo = GitRepository(project_path, bin=config.git.bin, timeout=config.git.timeout)
        tree = generate_changelog(repo, config, query=query)
    except ChangelogPyError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    content = render_markdown(tree)

    if output is None:
        console.print(Markdown(content))
        return

    output_path = project_path / output
    output_path.write_text(content)
    console.print(
        Panel(
            f"[green]Wrote {len(tree.versions)} version(s) to[/] [cyan]{output_path}[/]",
            title="[green]Changelog Generated[/]",
            border_style="green",
        )
    )
