"""
Tests for version comparison (winget_detect/versioning.py).
"""

import pytest

from winget_detect.models import ComparisonResult
from winget_detect.versioning import (
    compare_versions,
    is_blank,
    is_numeric_version,
)

LOWER = ComparisonResult.LOWER
EQUAL = ComparisonResult.EQUAL
HIGHER = ComparisonResult.HIGHER


class TestBlankInputs:
    """A blank side means there is no constraint to violate."""

    @pytest.mark.parametrize("version, reference", [
        ("", "9.9.9"),
        ("1.0", ""),
        ("   ", "1.0"),
        ("1.0", "\t"),
        (None, "1.0"),
        ("1.0", None),
    ])
    def test_blank_is_equal(self, version, reference):
        assert compare_versions(version, reference) is EQUAL

    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank("")
        assert is_blank("  ")
        assert not is_blank("0")


class TestNumericVersions:
    """Tests for dotted numeric comparison."""

    def test_less_than(self):
        assert compare_versions("1.0.0", "1.0.1") is LOWER
        assert compare_versions("1.0.0", "1.1.0") is LOWER
        assert compare_versions("1.0.0", "2.0.0") is LOWER

    def test_greater_than(self):
        assert compare_versions("1.0.1", "1.0.0") is HIGHER
        assert compare_versions("2.5.0", "2.0.0") is HIGHER

    def test_equal(self):
        assert compare_versions("2.5.3", "2.5.3") is EQUAL

    def test_zero_padding(self):
        """Missing components count as zero."""
        assert compare_versions("1.2.0", "1.2") is EQUAL
        assert compare_versions("1.2", "1.2.0.0") is EQUAL
        assert compare_versions("1.2", "1.2.0.1") is LOWER

    def test_components_compare_numerically(self):
        """1.10 is newer than 1.9 even though it sorts lower as text."""
        assert compare_versions("1.10", "1.9") is HIGHER
        assert compare_versions("2.0.0", "1.99.99") is HIGHER

    def test_surrounding_whitespace_ignored(self):
        assert compare_versions(" 1.2.3 ", "1.2.3") is EQUAL

    @pytest.mark.parametrize("a, b", [
        ("1.0", "1.0.1"),
        ("3.2.1", "3.10"),
        ("120.0.6099.130", "121.0"),
        ("0.0.1", "0.1"),
    ])
    def test_antisymmetric(self, a, b):
        assert compare_versions(a, b) is LOWER
        assert compare_versions(b, a) is HIGHER

    @pytest.mark.parametrize("v", ["0", "1.2", "10.0.19045.3803", "2024.1.1"])
    def test_reflexive(self, v):
        assert compare_versions(v, v) is EQUAL


class TestLexicalFallback:
    """Non-numeric versions fall back to string comparison."""

    def test_identical_strings_equal(self):
        assert compare_versions("abc", "abc") is EQUAL
        assert compare_versions("Unknown", "Unknown") is EQUAL

    def test_code_point_ordering(self):
        assert compare_versions("abc", "abd") is LOWER
        assert compare_versions("abd", "abc") is HIGHER

    def test_suffixed_version_is_lexical(self):
        """Pre-release suffixes are not understood, only compared as text."""
        assert compare_versions("1.2.0-beta", "1.2.0") is HIGHER
        assert compare_versions("1.10-beta", "1.9-beta") is LOWER

    def test_mixed_numeric_and_text(self):
        # "Unknown" > "1.0" because "U" sorts after "1"
        assert compare_versions("Unknown", "1.0") is HIGHER

    def test_never_raises(self):
        for value in ("< 1.0", "1..2", ".1", "1.", "v1.2", "∞"):
            assert compare_versions(value, "1.0") in (LOWER, EQUAL, HIGHER)


class TestHelpers:
    """Tests for helper predicates."""

    def test_is_numeric_version(self):
        assert is_numeric_version("1")
        assert is_numeric_version("1.2.3.4")
        assert not is_numeric_version("1.2.0-beta")
        assert not is_numeric_version("v1.2")
        assert not is_numeric_version("1..2")
