"""Configuration models for reliable-changelog.

All models are frozen: a configuration is read once at the start of a run and
never changes afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from reliable_changelog.core.commits import COMMIT_TYPES

DEFAULT_SECTION_LABELS: dict[str, str] = {
    "feat": "New Features",
    "fix": "Bug Fixes",
    "build": "Build Pipeline Improvements",
    "docs": "Documentation Changes",
    "ci": "CI Changes",
    "perf": "Performance Improvements",
    "refactor": "Refactoring",
    "revert": "Reverted Changes",
    "style": "Styling Changes",
    "test": "Testing Changes",
}


def _split_csv(value: Any) -> Any:
    """Accept "a,b,c" strings as well as real sequences."""
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return value


class ExecutionMode(StrEnum):
    """Whether git side effects are really executed."""

    LIVE = "live"
    DRY_RUN = "dry-run"


class VersionPolicy(BaseModel):
    """Rules for classifying commits, bumping versions and labelling sections."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    major_release_commit_message: str = "feat: major release"
    included_types: tuple[str, ...] = ("feat", "fix", "build")
    minor_commit_types: tuple[str, ...] = ("feat",)
    patch_commit_types: tuple[str, ...] = (
        "fix",
        "build",
        "docs",
        "ci",
        "perf",
        "refactor",
        "revert",
        "style",
        "test",
    )
    minor_version_bump_interval: int = 5
    patch_version_bump_interval: int = 5
    strip_commit_prefix: bool = True
    section_labels: Mapping[str, str] = Field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_SECTION_LABELS))
    )

    @field_validator("included_types", "minor_commit_types", "patch_commit_types", mode="before")
    @classmethod
    def _parse_type_lists(cls, value: Any) -> Any:
        return _split_csv(value)

    @field_validator("included_types")
    @classmethod
    def _check_included_types(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("at least one commit type must be included")
        unknown = [t for t in value if t not in COMMIT_TYPES]
        if unknown:
            raise ValueError(
                f"unknown commit type(s) {', '.join(unknown)}; "
                f"expected any of {', '.join(COMMIT_TYPES)}"
            )
        # Duplicates would render the same section twice.
        return tuple(dict.fromkeys(value))

    @field_validator("minor_version_bump_interval", "patch_version_bump_interval")
    @classmethod
    def _check_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"bump interval must be a positive integer, got {value}")
        return value

    @field_validator("major_release_commit_message")
    @classmethod
    def _check_marker(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("major release commit message cannot be empty")
        return value

    @field_validator("section_labels", mode="before")
    @classmethod
    def _merge_labels(cls, value: Any) -> Any:
        if not isinstance(value, Mapping):
            return value
        unknown = [t for t in value if t not in COMMIT_TYPES]
        if unknown:
            raise ValueError(
                f"section labels given for unknown commit type(s) {', '.join(unknown)}"
            )
        return {**DEFAULT_SECTION_LABELS, **value}

    @field_validator("section_labels")
    @classmethod
    def _freeze_labels(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    def label_for(self, commit_type: str) -> str:
        return self.section_labels.get(commit_type, commit_type)


class GitConfig(BaseModel):
    """Identity and transport settings for the release commit."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    message: str = "chore(release): {version}"
    user_name: str = "Reliable Changelog Action"
    user_email: str = "reliable.changelog.action@github.com"
    pull_method: str = "--ff-only"
    branch: str = "main"

    @field_validator("branch")
    @classmethod
    def _strip_ref(cls, value: str) -> str:
        return value.removeprefix("refs/heads/")

    def commit_message(self, tag: str) -> str:
        """Render the release commit message for a tag.

        The [skip ci] suffix keeps the release commit from triggering the
        workflow that produced it.
        """
        return f"{self.message.replace('{version}', tag)} [skip ci]"


class ReleaseConfig(BaseModel):
    """Root configuration for a release run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tag_prefix: str = "v"
    current_version: str = "./package.json"
    version_path: tuple[str, ...] = ("version",)
    changelog_preset: str = "angular"
    mode: ExecutionMode = ExecutionMode.LIVE
    git: GitConfig = Field(default_factory=GitConfig)
    policy: VersionPolicy = Field(default_factory=VersionPolicy)

    @field_validator("version_path", mode="before")
    @classmethod
    def _split_path(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(value.split("."))
        return value

    @field_validator("version_path")
    @classmethod
    def _check_path(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value or any(not segment for segment in value):
            raise ValueError("version path must be a non-empty, dot separated property path")
        return value

    @field_validator("current_version")
    @classmethod
    def _check_current_version(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("current version cannot be empty")
        return value

    @property
    def is_version_file(self) -> bool:
        """True when current_version names a file rather than a literal version."""
        return self.current_version.startswith("./")

    @property
    def is_dry_run(self) -> bool:
        return self.mode is ExecutionMode.DRY_RUN

    def tag_for(self, version: object) -> str:
        return f"{self.tag_prefix}{version}"
