"""
Version comparison for detection rules.

Versions made only of dot-separated non-negative integers are compared
component by component, the shorter one padded with zeros ("1.2" == "1.2.0").
Anything else (pre-release tags, "Unknown", vendor build strings) falls back
to plain string comparison. That fallback is approximate: "1.10-beta" sorts
before "1.9-beta". Callers should treat non-numeric results as a best guess.
"""

from __future__ import annotations

import re

from packaging.version import InvalidVersion, Version

from .models import ComparisonResult

NUMERIC_VERSION_RE = re.compile(r"^\d+(?:\.\d+)*$")


def is_blank(value: str | None) -> bool:
    """Return True for None, empty or whitespace-only strings."""
    return value is None or not value.strip()


def is_numeric_version(value: str) -> bool:
    """Check whether a version string is plain dotted numeric (e.g. "120.0.1")."""
    return bool(NUMERIC_VERSION_RE.match(value.strip()))


def _ordering(left, right) -> ComparisonResult:
    if left < right:
        return ComparisonResult.LOWER
    if left > right:
        return ComparisonResult.HIGHER
    return ComparisonResult.EQUAL


def compare_versions(version: str | None, reference: str | None) -> ComparisonResult:
    """
    Classify a version relative to a reference version.

    Args:
        version: Version being checked (the installed one)
        reference: Version to compare against (the required minimum)

    Returns:
        LOWER if version < reference, HIGHER if version > reference,
        EQUAL if they match or either side is blank (no constraint)
    """
    if is_blank(version) or is_blank(reference):
        return ComparisonResult.EQUAL

    version = version.strip()
    reference = reference.strip()

    if is_numeric_version(version) and is_numeric_version(reference):
        try:
            # Release segments compare with implicit zero padding
            return _ordering(Version(version), Version(reference))
        except InvalidVersion:
            pass

    if version == reference:
        return ComparisonResult.EQUAL
    return _ordering(version, reference)
