"""Configuration management for reliable-changelog."""

from __future__ import annotations

from reliable_changelog.config.loader import inputs_from_env, load_config
from reliable_changelog.config.models import (
    DEFAULT_SECTION_LABELS,
    ExecutionMode,
    GitConfig,
    ReleaseConfig,
    VersionPolicy,
)

__all__ = [
    "DEFAULT_SECTION_LABELS",
    "ExecutionMode",
    "GitConfig",
    "ReleaseConfig",
    "VersionPolicy",
    "inputs_from_env",
    "load_config",
]
