"""Implementation of the 'preview' command.

Shows the version and changelog the next release would produce without
touching the repository.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from reliable_changelog.config import ExecutionMode, inputs_from_env, load_config
from reliable_changelog.exceptions import ReliableChangelogError
from reliable_changelog.release import plan_release
from reliable_changelog.vcs import GitRepository

if TYPE_CHECKING:
    from collections.abc import Mapping

    from rich.console import Console


def run_preview(
    path: str | None,
    console: Console,
    err_console: Console,
    environ: Mapping[str, str] | None = None,
) -> None:
    """Run the preview command.

    Args:
        path: Optional path to project directory
        console: Console for standard output
        err_console: Console for error output
        environ: Environment to read action inputs from
    """
    env = os.environ if environ is None else environ
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path, inputs_from_env(env), ExecutionMode.DRY_RUN)
        repo = GitRepository(project_path, ExecutionMode.DRY_RUN)
        plan = plan_release(config, repo, project_path)
    except ReliableChangelogError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    for advisory in plan.advisories:
        err_console.print(f"[yellow]Warning:[/] {advisory}")

    table = Table(title="Commits by type", show_header=True)
    table.add_column("Type", style="cyan")
    table.add_column("Commits", justify="right")
    for commit_type in config.policy.included_types:
        table.add_row(commit_type, str(plan.classification.count(commit_type)))
    console.print(table)

    if plan.classification.is_major_change:
        console.print("[bold magenta]Major release marker found.[/]")

    if not plan.has_changes:
        console.print(
            f"\n[yellow]Version stays at {plan.current_version}; "
            "not enough commits for a bump.[/]"
        )
        return

    console.print(
        f"\nNext release: [cyan]{plan.current_version}[/] -> [green]{plan.next_version}[/] "
        f"(tag [green]{plan.tag}[/])\n"
    )
    console.print(
        Panel(
            Text(plan.changelog) if plan.changelog else "[dim]No changelog entries.[/]",
            title="[yellow]Changelog Preview[/]",
            border_style="yellow",
        )
    )
