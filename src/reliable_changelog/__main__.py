"""Allow running as ``python -m reliable_changelog``."""

from __future__ import annotations

from reliable_changelog.cli.main import app

if __name__ == "__main__":
    app()
