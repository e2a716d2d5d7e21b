"""Release orchestration.

A run pulls the full history, computes the next version and changelog from a
single classification of the commits since the last release, persists the
version, then commits, tags and pushes. Configuration and persistence errors
are raised before any git side effect.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from reliable_changelog.core.changelog import clean_changelog, render_changelog
from reliable_changelog.core.commits import classify
from reliable_changelog.core.history import generate_changelog_text
from reliable_changelog.core.version import SemanticVersion, compute_next_version
from reliable_changelog.project.version_store import VersionLocation

if TYPE_CHECKING:
    from pathlib import Path

    from reliable_changelog.config.models import ReleaseConfig
    from reliable_changelog.core.commits import ClassificationAdvisory, ClassificationResult
    from reliable_changelog.vcs.git import GitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleasePlan:
    """Everything computed for a release before any side effect."""

    location: VersionLocation
    current_version: SemanticVersion
    next_version: SemanticVersion
    tag: str
    changelog: str
    classification: ClassificationResult

    @property
    def has_changes(self) -> bool:
        return self.next_version != self.current_version

    @property
    def advisories(self) -> tuple[ClassificationAdvisory, ...]:
        return self.classification.advisories


@dataclass(frozen=True)
class ReleaseResult:
    """Outcome of a release run."""

    changelog: str
    version: str
    tag: str
    skipped: bool
    advisories: tuple[ClassificationAdvisory, ...] = ()

    def outputs(self) -> dict[str, str]:
        """Values exposed as action outputs."""
        return {
            "changelog": self.changelog,
            "version": self.version,
            "tag": self.tag,
            "skipped": "true" if self.skipped else "false",
        }


def resolve_current_version(
    config: ReleaseConfig, project_path: Path
) -> tuple[VersionLocation, SemanticVersion]:
    """Locate and parse the current version.

    Raises:
        ConfigurationError: If the version file type, path or value is invalid
        PersistenceError: If the version file can't be read
    """
    location = VersionLocation.from_config(
        config.current_version, config.version_path, project_path
    )
    return location, SemanticVersion.parse(location.read())


def plan_release(config: ReleaseConfig, repo: GitRepository, project_path: Path) -> ReleasePlan:
    """Compute the next version and changelog without side effects.

    Raises:
        ConfigurationError: If the version source or policy is invalid
        PersistenceError: If the version file can't be read
        ChangelogError: If the commit history can't be read
    """
    location, current_version = resolve_current_version(config, project_path)
    if location.is_file:
        logger.info('Using "%s" as version file', config.current_version)
        logger.debug("Version path steps: %s", list(config.version_path))

    # The header version is provisional; the renderer drops the header.
    changelog_text = generate_changelog_text(
        repo,
        config.tag_prefix,
        config.changelog_preset,
        current_version.bump_major(),
        1,
        skip_unstable=True,
    )

    # Version and changelog must come from the same classification.
    classification = classify(changelog_text, config.policy)
    next_version = compute_next_version(current_version, classification, config.policy)
    changelog = clean_changelog(render_changelog(classification, config.policy))

    for advisory in classification.advisories:
        logger.warning(advisory.message)

    return ReleasePlan(
        location=location,
        current_version=current_version,
        next_version=next_version,
        tag=config.tag_for(next_version),
        changelog=changelog,
        classification=classification,
    )


def run_release(config: ReleaseConfig, repo: GitRepository, project_path: Path) -> ReleaseResult:
    """Run a full release.

    Args:
        config: Release configuration
        repo: Repository to release from
        project_path: Directory that relative version file paths resolve against

    Returns:
        ReleaseResult; ``skipped`` is set when no commit qualifies for a bump

    Raises:
        ReliableChangelogError: On any failure; partial git side effects
            (commit, tag) are not rolled back
    """
    logger.info('Using "%s" preset', config.changelog_preset)
    logger.info('Using "%s" as commit message', config.git.message)
    logger.info('Using "%s" as git user.name', config.git.user_name)
    logger.info('Using "%s" as git user.email', config.git.user_email)
    logger.info('Using "%s" as tag prefix', config.tag_prefix)
    logger.info('Using "%s" as git branch', config.git.branch)

    # Surface version source errors before touching the repository.
    resolve_current_version(config, project_path)

    logger.info("Pulling to make sure we have the full git history")

    repo.pull(config.git.pull_method)

    plan = plan_release(config, repo, project_path)

    logger.info('Calculated version: "%s"', plan.next_version)
    logger.info('Calculated tag: "%s"', plan.tag)

    if not plan.has_changes:
        logger.info("No releasable commits since the last release, skipping")
        return ReleaseResult(
            changelog=plan.changelog,
            version=str(plan.current_version),
            tag=config.tag_for(plan.current_version),
            skipped=True,
            advisories=plan.advisories,
        )

    if plan.location.is_file:
        if config.is_dry_run:
            logger.info('Dry run: not writing version file "%s"', config.current_version)
        else:
            logger.info('Bumping version file "%s"', config.current_version)
            plan.location.update(str(plan.next_version))

    repo.config("user.email", config.git.user_email)
    repo.config("user.name", config.git.user_name)
    repo.add(".")
    # A literal version leaves nothing staged; the release commit is still made.
    repo.commit(config.git.commit_message(plan.tag), allow_empty=not plan.location.is_file)
    repo.create_tag(plan.tag)

    logger.info("Pushing all changes")
    repo.push(config.git.branch)

    return ReleaseResult(
        changelog=plan.changelog,
        version=str(plan.next_version),
        tag=plan.tag,
        skipped=False,
        advisories=plan.advisories,
    )
