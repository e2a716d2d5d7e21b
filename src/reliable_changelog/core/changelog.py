"""Changelog rendering from classified commits.

The renderer only reads a ClassificationResult; it never looks at versions,
so the version calculator and the renderer can't disagree about which
commits were part of a release.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reliable_changelog.config.models import VersionPolicy
    from reliable_changelog.core.commits import ClassificationResult, CommitLine


def format_commit_line(line: CommitLine, *, strip_prefix: bool) -> str:
    """Format a single bullet for the changelog."""
    return line.stripped() if strip_prefix else line.text


def render_section(label: str, lines: tuple[CommitLine, ...], *, strip_prefix: bool) -> list[str]:
    """Render one labelled section followed by a blank separator line."""
    return [label, *(format_commit_line(line, strip_prefix=strip_prefix) for line in lines), ""]


def render_changelog(classification: ClassificationResult, policy: VersionPolicy) -> str:
    """Render classified commits as labelled sections.

    Sections follow the policy's included-types order. Types without commits
    produce no section at all.

    Args:
        classification: Classified changelog lines
        policy: Version policy supplying order, labels and prefix stripping

    Returns:
        Newline-joined sections; pass through clean_changelog before publishing
    """
    output: list[str] = []

    for commit_type in policy.included_types:
        lines = classification.lines_for(commit_type)
        if lines:
            output.extend(
                render_section(
                    policy.label_for(commit_type),
                    lines,
                    strip_prefix=policy.strip_commit_prefix,
                )
            )

    return "\n".join(output)


def clean_changelog(changelog: str) -> str:
    """Trim leading and trailing whitespace from a rendered changelog."""
    return changelog.strip()
