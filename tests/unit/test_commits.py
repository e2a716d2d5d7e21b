"""Tests for commit classification."""

from __future__ import annotations

import dataclasses

import pytest

from reliable_changelog.config.models import VersionPolicy
from reliable_changelog.core.commits import (
    COMMIT_TYPES,
    ClassificationAdvisory,
    CommitLine,
    classify,
)


class TestCommitLine:
    """Tests for CommitLine."""

    def test_description(self):
        """Description is the text after the type token."""
        line = CommitLine("* fix: correct overflow", "fix")
        assert line.description == "correct overflow"

    def test_stripped(self):
        """Stripping replaces the type prefix with a bare bullet."""
        line = CommitLine("* fix: correct overflow", "fix")
        assert line.stripped() == "* correct overflow"

    def test_stripped_drops_colon(self):
        """The type's colon is not re-appended to the description."""
        line = CommitLine("* feat: add x", "feat")
        assert not line.stripped().endswith(":")

    def test_stripped_without_space(self):
        """A bullet without a space after the colon is still stripped."""
        line = CommitLine("* fix:tight spacing", "fix")
        assert line.stripped() == "* tight spacing"

    def test_only_leading_token_is_stripped(self):
        """A token further along the line leaves the bullet untouched."""
        line = CommitLine("* feat: explain * fix: usage", "fix")

        assert not line.has_leading_token
        assert line.stripped() == "* feat: explain * fix: usage"
        assert line.description == "feat: explain * fix: usage"

    def test_stripped_keeps_scope_markup(self):
        """Scope markup is part of the description."""
        line = CommitLine("* fix: **api:** handle null", "fix")
        assert line.stripped() == "* **api:** handle null"

    def test_immutable(self):
        """CommitLine cannot be modified."""
        line = CommitLine("* fix: a", "fix")
        with pytest.raises(dataclasses.FrozenInstanceError):
            line.text = "* fix: b"  # type: ignore[misc]


class TestClassify:
    """Tests for classify()."""

    def test_buckets_by_type(self, sample_changelog: str, policy: VersionPolicy):
        """Lines are bucketed under their included type."""
        result = classify(sample_changelog, policy)

        assert [line.text for line in result.lines_for("feat")] == [
            "* feat: add user authentication",
            "* feat: support dark mode",
        ]
        assert result.count("fix") == 1
        assert result.count("build") == 1

    def test_preserves_original_order(self, policy: VersionPolicy):
        """Bucket order follows the changelog order."""
        text = "* feat: one\n* fix: two\n* feat: three\n* feat: four"
        result = classify(text, policy)

        assert [line.description for line in result.lines_for("feat")] == [
            "one",
            "three",
            "four",
        ]

    def test_bucket_order_is_canonical(self):
        """Buckets enumerate in canonical order regardless of configured order."""
        policy = VersionPolicy(included_types="test,fix,feat")
        result = classify("* test: t\n* feat: f\n* fix: x", policy)

        assert list(result) == ["feat", "fix", "test"]

    def test_only_included_types_have_buckets(self, policy: VersionPolicy):
        """Types outside the included types get no bucket."""
        result = classify("* docs: update readme", policy)

        assert "docs" not in result.buckets
        assert result.lines_for("docs") == ()

    def test_major_marker_sets_flag(self, policy: VersionPolicy):
        """The major release marker sets is_major_change."""
        result = classify("* fix: a\n* feat: major release", policy)

        assert result.is_major_change

    def test_major_marker_excluded_from_buckets(self, policy: VersionPolicy):
        """The major marker line is not bucketed as a feat."""
        result = classify("* feat: major release\n* feat: add x", policy)

        assert [line.text for line in result.lines_for("feat")] == ["* feat: add x"]

    def test_custom_major_marker(self):
        """A custom marker is honoured."""
        policy = VersionPolicy(major_release_commit_message="BREAKING RELEASE")
        result = classify("* BREAKING RELEASE", policy)

        assert result.is_major_change

    def test_no_major_marker(self, sample_changelog: str, policy: VersionPolicy):
        assert not classify(sample_changelog, policy).is_major_change

    def test_type_token_requires_colon(self, policy: VersionPolicy):
        """A bullet merely starting with a type name is not matched."""
        result = classify("* features were added\n* fixes: plural", policy)

        assert result.count("feat") == 0
        assert result.count("fix") == 0

    def test_line_matching_two_types_lands_in_both(self, policy: VersionPolicy):
        """Known quirk: a line containing two type tokens is bucketed twice."""
        line = "* feat: document the * fix: syntax"
        result = classify(line, policy)

        assert [entry.text for entry in result.lines_for("feat")] == [line]
        assert [entry.text for entry in result.lines_for("fix")] == [line]

    def test_lines_are_not_joined(self, policy: VersionPolicy):
        """A token split across lines is not matched."""
        result = classify("* feat\n: add x", policy)

        assert result.count("feat") == 0

    def test_empty_text(self, policy: VersionPolicy):
        result = classify("", policy)

        assert result.is_empty
        assert result.advisories == ()

    def test_result_is_read_only(self, sample_changelog: str, policy: VersionPolicy):
        """Buckets cannot be modified after classification."""
        result = classify(sample_changelog, policy)

        with pytest.raises(TypeError):
            result.buckets["feat"] = ()  # type: ignore[index]


class TestAdvisories:
    """Tests for advisories on excluded commit types."""

    def test_excluded_type_produces_advisory(self, sample_changelog: str, policy: VersionPolicy):
        """docs commits with docs excluded produce an advisory."""
        result = classify(sample_changelog, policy)

        assert result.advisories == (ClassificationAdvisory("docs", 1),)

    def test_advisory_message(self):
        advisory = ClassificationAdvisory("ci", 2)

        assert advisory.message == (
            'There were commits for ci but it is not included in "included-types"'
        )
        assert str(advisory) == advisory.message

    def test_advisories_in_canonical_order(self, policy: VersionPolicy):
        result = classify("* test: t\n* ci: c\n* docs: d\n* docs: e", policy)

        assert [a.commit_type for a in result.advisories] == ["docs", "ci", "test"]
        assert result.advisories[0].count == 2

    def test_unknown_types_are_ignored(self, policy: VersionPolicy):
        """Types outside the vocabulary neither bucket nor advise."""
        result = classify("* chore: tidy up\n* wip: stuff", policy)

        assert result.advisories == ()
        assert result.is_empty

    def test_all_types_included_no_advisories(self, sample_changelog: str):
        policy = VersionPolicy(included_types=COMMIT_TYPES)
        result = classify(sample_changelog, policy)

        assert result.advisories == ()
        assert result.count("docs") == 1
