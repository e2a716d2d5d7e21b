"""Access to the project's version-bearing files."""

from __future__ import annotations

from reliable_changelog.project.version_store import (
    FlatTextVersionDocument,
    MappingVersionDocument,
    VersionDocument,
    VersionLocation,
    get_version_from_file,
    open_version_document,
    update_version_file,
)

__all__ = [
    "FlatTextVersionDocument",
    "MappingVersionDocument",
    "VersionDocument",
    "VersionLocation",
    "get_version_from_file",
    "open_version_document",
    "update_version_file",
]
