"""Version-bearing document access.

Two kinds of documents hold a project version:

- mapping documents (JSON, YAML), where the version sits at a property path
  such as ``("tool", "package", "version")`` and the document is
  re-serialized on write
- flat text documents (TOML), where only a single ``key = "value"`` line is
  addressed and replaced in place, leaving every other byte untouched
"""

from __future__ import annotations

import copy
import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from reliable_changelog.exceptions import (
    ConfigurationError,
    PersistenceError,
    UnsupportedFormatError,
    VersionNotFoundError,
    VersionPathError,
    VersionTypeError,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

_MISSING = object()


class MappingFormat(StrEnum):
    JSON = "json"
    YAML = "yaml"


def type_name(value: Any) -> str:
    """Name a document value by its structural type."""
    if value is _MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def _child(container: Any, segment: str) -> Any:
    if isinstance(container, dict):
        return container.get(segment, _MISSING)
    if isinstance(container, list) and segment.isdigit() and int(segment) < len(container):
        return container[int(segment)]
    return _MISSING


def _walk_to_parent(document: Any, path: Sequence[str]) -> Any:
    if not isinstance(document, dict | list):
        raise VersionPathError("<root>", "object", type_name(document))

    current = document
    for segment in path[:-1]:
        child = _child(current, segment)
        if not isinstance(child, dict | list):
            raise VersionPathError(segment, "object", type_name(child))
        current = child
    return current


def read_path(document: Any, path: Sequence[str]) -> str:
    """Return the string stored at a property path.

    Raises:
        VersionPathError: If an intermediate segment is missing or not a container
        VersionTypeError: If the leaf is not a string
    """
    parent = _walk_to_parent(document, path)
    leaf = _child(parent, path[-1])
    if not isinstance(leaf, str):
        raise VersionTypeError(path[-1], type_name(leaf))
    return leaf


def write_path(document: Any, path: Sequence[str], value: str) -> Any:
    """Return a copy of the document with the string at path replaced."""
    updated = copy.deepcopy(document)
    read_path(updated, path)

    parent = _walk_to_parent(updated, path)
    last = path[-1]
    if isinstance(parent, list):
        parent[int(last)] = value
    else:
        parent[last] = value
    return updated


class VersionDocument(ABC):
    """A parsed version-bearing file."""

    path: Path

    @abstractmethod
    def read(self, property_path: Sequence[str]) -> str:
        """Return the version string at property_path."""

    @abstractmethod
    def write(self, property_path: Sequence[str], value: str) -> VersionDocument:
        """Return a new document with the version at property_path set to value."""

    @abstractmethod
    def dumps(self) -> str:
        """Serialize the document."""

    def save(self) -> Path:
        self.path.write_text(self.dumps(), encoding="utf-8")
        return self.path


@dataclass(frozen=True)
class MappingVersionDocument(VersionDocument):
    """A JSON or YAML document with arbitrary nesting."""

    path: Path
    data: Any
    format: MappingFormat

    def read(self, property_path: Sequence[str]) -> str:
        return read_path(self.data, property_path)

    def write(self, property_path: Sequence[str], value: str) -> MappingVersionDocument:
        return replace(self, data=write_path(self.data, property_path, value))

    def dumps(self) -> str:
        if self.format is MappingFormat.JSON:
            return json.dumps(self.data, indent=2, ensure_ascii=False) + "\n"
        return yaml.safe_dump(
            self.data,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )


def flat_property_regex(key: str) -> re.Pattern[str]:
    """Regex matching a ``key = "value"`` line, capturing the value."""
    return re.compile(rf'^(\s*{re.escape(key)}\s*=\s*")([^"\n]*)(")', re.MULTILINE)


@dataclass(frozen=True)
class FlatTextVersionDocument(VersionDocument):
    """A line oriented ``key = "value"`` document such as pyproject.toml.

    Only single-segment property paths are supported. The first matching line
    in the file is used.
    """

    path: Path
    text: str

    def _match(self, property_path: Sequence[str]) -> re.Match[str]:
        if len(property_path) != 1:
            raise ConfigurationError(
                f"Only a single top-level property is supported for {self.path.name}, "
                f"got \"{'.'.join(property_path)}\""
            )
        regex = flat_property_regex(property_path[0])
        match = regex.search(self.text)
        if match is None:
            raise VersionNotFoundError(
                f'Expected version property "{property_path[0]}" to match regex '
                f'"{regex.pattern}" but it did not.'
            )
        return match

    def read(self, property_path: Sequence[str]) -> str:
        return self._match(property_path).group(2)

    def write(self, property_path: Sequence[str], value: str) -> FlatTextVersionDocument:
        match = self._match(property_path)
        text = self.text[: match.start(2)] + value + self.text[match.end(2) :]
        return replace(self, text=text)

    def dumps(self) -> str:
        return self.text


def _extension(path: Path) -> str:
    return path.suffix.removeprefix(".").lower()


def open_version_document(path: Path) -> VersionDocument:
    """Load a version document, choosing its kind by file extension.

    Raises:
        ConfigurationError: If the file does not exist
        UnsupportedFormatError: If the extension is not json, toml, yaml or yml
        PersistenceError: If the file can't be parsed
    """
    extension = _extension(path)
    if extension not in ("json", "toml", "yaml", "yml"):
        raise UnsupportedFormatError(str(path), extension)

    if not path.is_file():
        raise ConfigurationError(f"Version file not found: {path}")

    content = path.read_text(encoding="utf-8")

    if extension == "toml":
        return FlatTextVersionDocument(path, content)

    try:
        if extension == "json":
            return MappingVersionDocument(path, json.loads(content), MappingFormat.JSON)
        return MappingVersionDocument(path, yaml.safe_load(content), MappingFormat.YAML)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise PersistenceError(f"Could not parse version file {path}: {e}") from e


def get_version_from_file(file_path: Path, property_path: Sequence[str]) -> str:
    """Read the version string from a version-bearing file."""
    return open_version_document(file_path).read(property_path)


def update_version_file(file_path: Path, property_path: Sequence[str], new_version: str) -> Path:
    """Write a new version into a version-bearing file.

    Writing the same version twice leaves the file byte-identical.

    Returns:
        Path to the updated file
    """
    document = open_version_document(file_path)
    return document.write(property_path, new_version).save()


@dataclass(frozen=True)
class VersionLocation:
    """Where the current version comes from.

    Either a literal version string, which is never persisted, or a file plus
    the property path of the version inside it.
    """

    literal: str | None = None
    file_path: Path | None = None
    property_path: tuple[str, ...] = ("version",)

    @classmethod
    def from_config(
        cls,
        current_version: str,
        property_path: Sequence[str],
        base_dir: Path,
    ) -> VersionLocation:
        """Build a location from the current-version setting.

        Values starting with ``./`` are paths relative to base_dir.
        """
        if current_version.startswith("./"):
            return cls(
                file_path=(base_dir / current_version).resolve(),
                property_path=tuple(property_path),
            )
        return cls(literal=current_version, property_path=tuple(property_path))

    @property
    def is_file(self) -> bool:
        return self.file_path is not None

    def read(self) -> str:
        if self.file_path is None:
            return self.literal or ""
        return get_version_from_file(self.file_path, self.property_path)

    def update(self, new_version: str) -> Path | None:
        """Persist new_version; a literal location has nothing to update."""
        if self.file_path is None:
            return None
        return update_version_file(self.file_path, self.property_path, new_version)
