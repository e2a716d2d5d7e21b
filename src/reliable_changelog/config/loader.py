"""Configuration loading.

Settings are merged from three layers, later layers winning:

1. model defaults
2. the ``[tool.reliable-changelog]`` table of the project's pyproject.toml
3. action inputs (``INPUT_<NAME>`` environment variables on GitHub Actions)

Both file and input layers use the same flat, kebab-case keys as the action
inputs, e.g. ``tag-prefix`` or ``minor-version-bump-interval``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from reliable_changelog.config.models import ExecutionMode, ReleaseConfig
from reliable_changelog.core.commits import COMMIT_TYPES
from reliable_changelog.exceptions import ConfigNotFoundError, ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

TOOL_NAME = "reliable-changelog"

# input name -> (section, field); section None means the root model
_INPUT_FIELDS: dict[str, tuple[str | None, str]] = {
    "git-message": ("git", "message"),
    "git-user-name": ("git", "user_name"),
    "git-user-email": ("git", "user_email"),
    "git-pull-method": ("git", "pull_method"),
    "git-branch": ("git", "branch"),
    "tag-prefix": (None, "tag_prefix"),
    "current-version": (None, "current_version"),
    "version-path": (None, "version_path"),
    "strip-commit-prefix": ("policy", "strip_commit_prefix"),
    "major-release-commit-message": ("policy", "major_release_commit_message"),
    "included-types": ("policy", "included_types"),
    "minor-commit-types": ("policy", "minor_commit_types"),
    "minor-version-bump-interval": ("policy", "minor_version_bump_interval"),
    "patch-commit-types": ("policy", "patch_commit_types"),
    "patch-version-bump-interval": ("policy", "patch_version_bump_interval"),
}

_LABEL_SUFFIX = "-section-label"

INPUT_NAMES: tuple[str, ...] = (
    *_INPUT_FIELDS,
    *(f"{commit_type}{_LABEL_SUFFIX}" for commit_type in COMMIT_TYPES),
)


def find_pyproject_toml(start_path: Path | None = None) -> Path:
    """Find pyproject.toml by searching upward from start_path.

    Args:
        start_path: Directory to start searching from (defaults to cwd)

    Returns:
        Path to pyproject.toml

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found
    """
    current = (start_path or Path.cwd()).resolve()

    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate

    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or any parent directory")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Load and parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_tool_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.reliable-changelog]`` table, or an empty dict."""
    return dict(pyproject.get("tool", {}).get(TOOL_NAME, {}))


def inputs_from_env(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Collect action inputs from the environment.

    GitHub Actions exposes an input ``tag-prefix`` as ``INPUT_TAG-PREFIX``.
    Empty values are treated as unset.
    """
    env = os.environ if environ is None else environ
    inputs: dict[str, str] = {}

    for name in INPUT_NAMES:
        for key in (f"INPUT_{name.upper()}", f"INPUT_{name.upper().replace('-', '_')}"):
            value = env.get(key, "")
            if value.strip():
                inputs[name] = value.strip()
                break

    return inputs


def build_config_data(flat: Mapping[str, Any]) -> dict[str, Any]:
    """Turn flat, kebab-case settings into the nested ReleaseConfig shape.

    Raises:
        ConfigValidationError: If a key is not a known setting
    """
    data: dict[str, Any] = {"git": {}, "policy": {}}
    labels: dict[str, Any] = {}

    for key, value in flat.items():
        if key in _INPUT_FIELDS:
            section, field = _INPUT_FIELDS[key]
            if section is None:
                data[field] = value
            else:
                data[section][field] = value
        elif key.endswith(_LABEL_SUFFIX) and key.removesuffix(_LABEL_SUFFIX) in COMMIT_TYPES:
            labels[key.removesuffix(_LABEL_SUFFIX)] = value
        else:
            raise ConfigValidationError(f"Unknown setting: {key}")

    if labels:
        data["policy"]["section_labels"] = labels

    return data


def load_config(
    project_path: Path | None = None,
    inputs: Mapping[str, Any] | None = None,
    mode: ExecutionMode = ExecutionMode.LIVE,
) -> ReleaseConfig:
    """Load the release configuration for a project.

    Args:
        project_path: Project directory (defaults to cwd)
        inputs: Action inputs, overriding values from pyproject.toml
        mode: Execution mode for git side effects

    Returns:
        Validated ReleaseConfig

    Raises:
        ConfigValidationError: If the merged settings are invalid
    """
    flat: dict[str, Any] = {}

    try:
        pyproject_path = find_pyproject_toml(project_path)
    except ConfigNotFoundError:
        pyproject_path = None

    if pyproject_path is not None:
        flat.update(extract_tool_config(load_pyproject_toml(pyproject_path)))

    flat.update(inputs or {})

    data = build_config_data(flat)
    data["mode"] = mode

    try:
        return ReleaseConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration: {e}") from e
