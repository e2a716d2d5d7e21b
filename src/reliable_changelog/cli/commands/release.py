"""Implementation of the 'release' command.

The release command computes the next version and changelog, writes the
version file, then commits, tags and pushes. On GitHub Actions it also
publishes the step outputs and a job summary.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from reliable_changelog.config import ExecutionMode, inputs_from_env, load_config
from reliable_changelog.exceptions import ReliableChangelogError
from reliable_changelog.github import warning_annotation, write_outputs, write_summary
from reliable_changelog.release import run_release
from reliable_changelog.vcs import GitRepository

if TYPE_CHECKING:
    from collections.abc import Mapping

    from rich.console import Console

    from reliable_changelog.release import ReleaseResult


def run_release_command(
    path: str | None,
    dry_run: bool,
    console: Console,
    err_console: Console,
    environ: Mapping[str, str] | None = None,
) -> ReleaseResult:
    """Run the release command.

    Args:
        path: Optional path to project directory
        dry_run: Record git side effects instead of running them
        console: Console for standard output
        err_console: Console for error output
        environ: Environment to read action inputs and output files from
    """
    env = os.environ if environ is None else environ
    project_path = Path(path) if path else Path.cwd()
    mode = ExecutionMode.DRY_RUN if dry_run else ExecutionMode.LIVE

    # Load configuration
    try:
        config = load_config(project_path, inputs_from_env(env), mode)
    except ReliableChangelogError as e:
        err_console.print(f"[red]Error loading config:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    repo = GitRepository(project_path, mode)

    try:
        result = run_release(config, repo, project_path)
    except ReliableChangelogError as e:
        err_console.print(f"[red]Release failed:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    in_actions = env.get("GITHUB_ACTIONS") == "true"
    for advisory in result.advisories:
        err_console.print(f"[yellow]Warning:[/] {advisory}")
        if in_actions:
            # Workflow commands must stay on one line.
            console.print(
                warning_annotation(str(advisory)),
                markup=False,
                highlight=False,
                soft_wrap=True,
            )

    if output_file := env.get("GITHUB_OUTPUT"):
        write_outputs(Path(output_file), result.outputs())

    if result.skipped:
        console.print(f"[yellow]No releasable changes since {result.tag}. Nothing to do.[/]")
        return result

    if summary_file := env.get("GITHUB_STEP_SUMMARY"):
        try:
            write_summary(Path(summary_file), result.tag, result.changelog)
        except OSError as e:
            err_console.print(f'[yellow]Warning:[/] Was unable to create summary! Error: "{e}"')

    mode_str = "[yellow]DRY-RUN[/]" if dry_run else "[green]RELEASED[/]"
    console.print(
        Panel(
            Text(result.changelog) if result.changelog else "[dim]No changelog entries.[/]",
            title=f"{mode_str} {result.tag}",
            border_style="yellow" if dry_run else "green",
        )
    )
    if dry_run:
        console.print("[dim]Git commands that would have run:[/]")
        for command in repo.commands_run:
            console.print(f"  [cyan]{escape(command)}[/]", highlight=False)

    return result
