"""Commit history provider.

Turns the git log since the last release into bullet text of the form
``* <type>: <description>``, which is what the classifier consumes.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from reliable_changelog.exceptions import ChangelogError, GitError

if TYPE_CHECKING:
    from reliable_changelog.core.version import SemanticVersion
    from reliable_changelog.vcs.git import Commit, GitRepository

SUPPORTED_PRESETS: frozenset[str] = frozenset({"angular", "conventionalcommits"})

CONVENTIONAL_SUBJECT = re.compile(
    r"^(?P<type>[A-Za-z]+)(?:\((?P<scope>[^)]*)\))?(?P<breaking>!)?:\s*(?P<description>.+)$"
)


def _tag_pattern(tag_prefix: str) -> re.Pattern[str]:
    return re.compile(
        rf"^{re.escape(tag_prefix)}(\d+)\.(\d+)\.(\d+)(?:-([0-9A-Za-z.-]+))?$"
    )


def release_tags(tags: list[str], tag_prefix: str, *, skip_unstable: bool) -> list[str]:
    """Filter and sort release tags, newest first.

    Tags with a prerelease suffix (``v1.2.0-rc.1``) are dropped when
    skip_unstable is set. A stable release sorts above its prereleases.
    """
    pattern = _tag_pattern(tag_prefix)
    keyed = []

    for tag in tags:
        match = pattern.match(tag)
        if not match:
            continue
        prerelease = match.group(4)
        if prerelease and skip_unstable:
            continue
        major, minor, patch = (int(match.group(i)) for i in (1, 2, 3))
        keyed.append(((major, minor, patch, prerelease is None, prerelease or ""), tag))

    keyed.sort(reverse=True)
    return [tag for _, tag in keyed]


def format_commit_bullet(commit: Commit) -> str | None:
    """Render a commit subject as a changelog bullet.

    Returns None for merge commits.
    """
    subject = commit.subject
    if not subject or subject.startswith("Merge "):
        return None

    match = CONVENTIONAL_SUBJECT.match(subject)
    if not match:
        return f"* {subject}"

    scope = match.group("scope")
    prefix = f"**{scope}:** " if scope else ""
    return f"* {match.group('type').lower()}: {prefix}{match.group('description').strip()}"


def generate_changelog_text(
    repo: GitRepository,
    tag_prefix: str,
    preset: str = "angular",
    version: SemanticVersion | str | None = None,
    release_count: int = 1,
    path: str | None = None,
    *,
    skip_unstable: bool = True,
    today: date | None = None,
) -> str:
    """Generate raw changelog text from the commit history.

    Args:
        repo: Repository to read history from
        tag_prefix: Prefix of release tags, e.g. "v"
        preset: Commit convention; "angular" or "conventionalcommits"
        version: Version used in the header line, or None for "Unreleased"
        release_count: How many releases back to include; 0 means all history
        path: Only include commits touching this path
        skip_unstable: Ignore prerelease tags when locating previous releases
        today: Date for the header line (defaults to the current UTC date)

    Returns:
        A header line followed by one bullet per commit, newest first

    Raises:
        ChangelogError: If the preset is unknown or the history can't be read
    """
    if preset not in SUPPORTED_PRESETS:
        raise ChangelogError(
            f'Unknown changelog preset "{preset}"; expected one of '
            f"{', '.join(sorted(SUPPORTED_PRESETS))}"
        )
    if release_count < 0:
        raise ChangelogError(f"release count cannot be negative, got {release_count}")

    try:
        all_tags = repo.get_tags(f"{tag_prefix}*")
        tags = release_tags(all_tags, tag_prefix, skip_unstable=skip_unstable)

        since_ref = None
        if release_count > 0 and len(tags) >= release_count:
            since_ref = tags[release_count - 1]

        commits = repo.get_commits(since_ref, path)
    except GitError as e:
        raise ChangelogError(f"Could not read commit history: {e}") from e

    header_date = (today or datetime.now(UTC).date()).isoformat()
    title = f"{tag_prefix}{version}" if version is not None else "Unreleased"
    lines = [f"## {title} ({header_date})", ""]

    for commit in commits:
        bullet = format_commit_bullet(commit)
        if bullet is not None:
            lines.append(bullet)

    return "\n".join(lines) + "\n"
