"""Exception hierarchy for reliable-changelog.

Every error raised by the package derives from ReliableChangelogError so the
CLI can report a failed run with a single handler.
"""

from __future__ import annotations


class ReliableChangelogError(Exception):
    """Base exception for all reliable-changelog errors."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationError(ReliableChangelogError):
    """Invalid or missing configuration. Always raised before any mutation."""


class ConfigNotFoundError(ConfigurationError):
    """A configuration file could not be found."""


class ConfigValidationError(ConfigurationError):
    """Configuration values failed validation."""


class UnsupportedFormatError(ConfigurationError):
    """The version file has an extension no version document supports."""

    def __init__(self, path: str, extension: str) -> None:
        self.path = path
        self.extension = extension
        super().__init__(
            f'Expected version file "{path}" to end with ".json", ".toml", ".yaml", '
            f'or ".yml", but it ended with ".{extension}".'
        )


class VersionPathError(ConfigurationError):
    """The version property path cannot be resolved inside the document."""

    def __init__(self, segment: str, expected: str, actual: str) -> None:
        self.segment = segment
        self.expected = expected
        self.actual = actual
        super().__init__(
            f'Expected property "{segment}" to be of type "{expected}" '
            f'but was of type "{actual}".'
        )


class VersionFormatError(ConfigurationError):
    """A version string is not in X.Y.Z form."""


# =============================================================================
# Persistence
# =============================================================================


class PersistenceError(ReliableChangelogError):
    """Reading or writing the version document failed."""


class VersionTypeError(PersistenceError):
    """The version leaf exists but is not a string."""

    def __init__(self, segment: str, actual: str) -> None:
        self.segment = segment
        self.actual = actual
        super().__init__(
            f'Expected version property "{segment}" to be of type "string" '
            f'but was of type "{actual}".'
        )


class VersionNotFoundError(PersistenceError):
    """The version value could not be located in a flat text document."""


# =============================================================================
# Changelog
# =============================================================================


class ChangelogError(ReliableChangelogError):
    """The commit history could not be turned into changelog text."""


# =============================================================================
# Side effects
# =============================================================================


class SideEffectError(ReliableChangelogError):
    """A source control side effect failed. Earlier side effects are not rolled back."""


class GitError(SideEffectError):
    """A git command exited with a non-zero status."""

    def __init__(self, message: str, command: str = "", stderr: str = "") -> None:
        self.command = command
        self.stderr = stderr
        super().__init__(message)

    def __str__(self) -> str:
        base = super().__str__()
        if self.stderr:
            return f"{base}\n{self.stderr.strip()}"
        return base


class PushError(GitError):
    """Pushing the release commit and tag failed."""
