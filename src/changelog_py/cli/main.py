"""changelog-py command line interface."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from changelog_py import __version__
from changelog_py.logging import configure_logging

app = typer.Typer(
    name="changelog-py",
    help="Generate structured changelogs from git history.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"changelog-py {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version."),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
    log_json: Annotated[bool, typer.Option("--log-json", help="Emit logs as JSON.")] = False,
) -> None:
    """changelog-py: structured changelogs from git history."""
    configure_logging("DEBUG" if verbose else "WARNING", json=log_json)


@app.command()
def generate(
    query: Annotated[
        str | None,
        typer.Argument(help='Starting tag or tag range, e.g. "1.0.0" or "1.0.0..2.0.0".'),
    ] = None,
    path: Annotated[str | None, typer.Option("--path", "-p", help="Project directory.")] = None,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Write the changelog to this file.")
    ] = None,
    next_tag: Annotated[
        str | None, typer.Option("--next-tag", help="Name for unreleased commits.")
    ] = None,
) -> None:
    """Generate a changelog from the repository history."""
    from changelog_py.cli.commands.generate import run_generate

    run_generate(
        path=path,
        query=query,
        output=output,
        next_tag=next_tag,
        console=console,
        err_console=err_console,
    )


if __name__ == "__main__":
    app()
