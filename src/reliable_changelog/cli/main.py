"""reliable-changelog command line entry point."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from reliable_changelog import __version__

app = typer.Typer(
    name="reliable-changelog",
    help="Compute the next semantic version and changelog from conventional commits.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"reliable-changelog {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    """reliable-changelog: versions and changelogs from conventional commits."""


@app.command()
def release(
    path: Annotated[str | None, typer.Argument(help="Project directory.")] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Record git commands instead of running them."),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging.")] = False,
) -> None:
    """Bump the version, commit, tag and push a release."""
    from reliable_changelog.cli.commands.release import run_release_command

    _configure_logging(verbose)
    run_release_command(path, dry_run, console, err_console)


@app.command()
def preview(
    path: Annotated[str | None, typer.Argument(help="Project directory.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging.")] = False,
) -> None:
    """Show the next version and changelog without changing anything."""
    from reliable_changelog.cli.commands.preview import run_preview

    _configure_logging(verbose)
    run_preview(path, console, err_console)
