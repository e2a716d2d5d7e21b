"""reliable-changelog: conventional-commit driven versions and changelogs."""

from __future__ import annotations

__version__ = "0.1.0"
