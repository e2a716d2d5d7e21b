"""Command line interface for reliable-changelog."""
