"""GitHub Actions output surface: step outputs, job summary and annotations."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path


def format_output(name: str, value: str) -> str:
    """Format one step output in the ``$GITHUB_OUTPUT`` file syntax.

    Multi-line values use the heredoc form with a random delimiter.
    """
    if "\n" not in value:
        return f"{name}={value}\n"
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def write_outputs(path: Path, outputs: Mapping[str, str]) -> None:
    """Append step outputs to the ``$GITHUB_OUTPUT`` file."""
    with path.open("a", encoding="utf-8") as f:
        for name, value in outputs.items():
            f.write(format_output(name, value))


def write_summary(path: Path, tag: str, changelog: str) -> None:
    """Append the release heading and changelog to the job summary."""
    with path.open("a", encoding="utf-8") as f:
        f.write(f"## {tag}\n\n{changelog}\n")


def warning_annotation(message: str) -> str:
    """Workflow command that shows message as a warning annotation."""
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    return f"::warning::{escaped}"
