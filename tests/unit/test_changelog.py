"""Unit tests for changelog rendering."""

from __future__ import annotations

from reliable_changelog.config.models import VersionPolicy
from reliable_changelog.core.changelog import (
    clean_changelog,
    format_commit_line,
    render_changelog,
)
from reliable_changelog.core.commits import CommitLine, classify


class TestFormatCommitLine:
    """Tests for format_commit_line()."""

    def test_strip_prefix(self):
        """Prefix stripping turns `* fix: x` into `* x`."""
        line = CommitLine("* fix: correct overflow", "fix")
        assert format_commit_line(line, strip_prefix=True) == "* correct overflow"

    def test_keep_prefix(self):
        line = CommitLine("* fix: correct overflow", "fix")
        assert format_commit_line(line, strip_prefix=False) == "* fix: correct overflow"


class TestRenderChangelog:
    """Tests for render_changelog()."""

    def test_sections_with_labels(self, sample_changelog: str, policy: VersionPolicy):
        """Each included type with commits gets a labelled section."""
        result = render_changelog(classify(sample_changelog, policy), policy)

        assert result == "\n".join(
            [
                "New Features",
                "* add user authentication",
                "* support dark mode",
                "",
                "Bug Fixes",
                "* handle null response",
                "",
                "Build Pipeline Improvements",
                "* pin toolchain",
                "",
            ]
        )

    def test_without_stripping(self, policy: VersionPolicy):
        policy = VersionPolicy(strip_commit_prefix=False)
        result = render_changelog(classify("* fix: correct overflow", policy), policy)

        assert result == "Bug Fixes\n* fix: correct overflow\n"

    def test_empty_sections_omitted(self):
        """Types without commits produce no header."""
        policy = VersionPolicy(included_types="feat,docs,fix")
        result = render_changelog(classify("* feat: a\n* fix: b", policy), policy)

        assert "Documentation Changes" not in result
        assert result.count("\n\n") == 1

    def test_configured_order(self):
        """Sections follow the configured order, not the canonical one."""
        policy = VersionPolicy(included_types="fix,feat")
        result = render_changelog(classify("* feat: a\n* fix: b", policy), policy)

        assert result.index("Bug Fixes") < result.index("New Features")

    def test_custom_labels(self):
        policy = VersionPolicy(section_labels={"feat": "### Features"})
        result = render_changelog(classify("* feat: a", policy), policy)

        assert result.startswith("### Features\n")

    def test_excluded_types_not_rendered(self, policy: VersionPolicy):
        result = render_changelog(classify("* docs: readme\n* fix: b", policy), policy)

        assert "readme" not in result

    def test_major_marker_not_rendered(self, policy: VersionPolicy):
        result = render_changelog(classify("* feat: major release\n* fix: b", policy), policy)

        assert "major release" not in result
        assert "New Features" not in result

    def test_non_bullet_lines_dropped(self, policy: VersionPolicy):
        """Headers and blank lines from the raw text never reach the output."""
        text = "## v1.0.0 (2024-01-01)\n\n* fix: b\nnot a bullet"
        result = render_changelog(classify(text, policy), policy)

        assert result == "Bug Fixes\n* b\n"

    def test_multi_type_line_rendered_in_both_sections(self, policy: VersionPolicy):
        """Known quirk: a line with two type tokens appears in both sections."""
        result = render_changelog(classify("* feat: explain * fix: usage", policy), policy)

        assert "New Features\n* explain * fix: usage" in result
        assert "Bug Fixes\n* feat: explain * fix: usage" in result

    def test_nothing_to_render(self, policy: VersionPolicy):
        assert render_changelog(classify("", policy), policy) == ""


class TestCleanChangelog:
    """Tests for clean_changelog()."""

    def test_trims_surrounding_whitespace(self):
        assert clean_changelog("\nBug Fixes\n* b\n\n") == "Bug Fixes\n* b"

    def test_keeps_inner_separators(self):
        text = "New Features\n* a\n\nBug Fixes\n* b\n"
        assert clean_changelog(text) == "New Features\n* a\n\nBug Fixes\n* b"
