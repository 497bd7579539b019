"""
Parse package-manager output into PackageCandidate records.

Structured (JSON) output may be a single object or an array of objects; it is
normalized here into a list of candidates so nothing past this module deals
with the raw shape. Tabular output is sliced using column offsets taken from
the header row.
"""

from __future__ import annotations

import json
import re
from typing import Any

from .models import PackageCandidate

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")
SEPARATOR_RE = re.compile(r"^-+$")


class OutputParseError(ValueError):
    """Raised when structured output cannot be parsed."""


def _field(record: dict[str, Any], name: str) -> str:
    """Case-insensitive field lookup, returning "" for missing or null values."""
    for key, value in record.items():
        if isinstance(key, str) and key.lower() == name:
            return "" if value is None else str(value)
    return ""


def candidate_from_record(record: dict[str, Any]) -> PackageCandidate:
    """Map one structured record to a PackageCandidate."""
    return PackageCandidate(
        name=_field(record, "name"),
        id=_field(record, "id"),
        version=_field(record, "version"),
        source=_field(record, "source") or None,
    )


def parse_structured_output(output: str) -> list[PackageCandidate]:
    """
    Parse JSON output into candidates, preserving order.

    Args:
        output: Tool standard output

    Returns:
        Candidates in the order the tool emitted them (empty for blank output)

    Raises:
        OutputParseError: If the output is not JSON or not an object/array
    """
    if not output or not output.strip():
        return []

    text = "\n".join(clean_line(line) for line in output.split("\n"))
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise OutputParseError(f"Invalid JSON at line {e.lineno} column {e.colno}: {e.msg}") from e

    if isinstance(data, dict):
        records = [data]
    elif isinstance(data, list):
        records = data
    else:
        raise OutputParseError(f"Unexpected JSON value of type {type(data).__name__}")

    return [candidate_from_record(r) for r in records if isinstance(r, dict)]


def clean_line(line: str) -> str:
    """Drop ANSI escapes and progress output overwritten with carriage returns."""
    line = ANSI_ESCAPE_RE.sub("", line).rstrip("\r")
    if "\r" in line:
        line = line.rsplit("\r", 1)[-1]
    return line.rstrip()


def table_lines(output: str) -> list[str]:
    """Split tabular output into meaningful lines (no blanks, no ---- rules)."""
    lines = []
    for raw in output.split("\n"):
        line = clean_line(raw)
        if not line.strip() or SEPARATOR_RE.match(line.strip()):
            continue
        lines.append(line)
    return lines


def parse_table_output(output: str) -> PackageCandidate | None:
    """
    Parse the last row of tabular list output.

    The first line is the header and the last line the data row. Exact-id
    queries are expected to print a single row; when several rows appear only
    the last one is read.

    Args:
        output: Tool standard output

    Returns:
        Candidate, or None when the table has no data row or its header has no
        usable "Id" / "Version" columns
    """
    if not output:
        return None

    lines = table_lines(output)
    if len(lines) < 2:
        return None

    header, row = lines[0], lines[-1]
    lowered = header.lower()
    id_offset = lowered.find("id")
    version_offset = lowered.find("version")
    if id_offset < 0 or version_offset < 0 or version_offset <= id_offset:
        return None

    name = row[:id_offset].strip()
    package_id = row[id_offset:version_offset].strip()
    version_tokens = row[version_offset:].strip().split()
    version = version_tokens[0] if version_tokens else ""

    if not package_id:
        return None

    return PackageCandidate(name=name, id=package_id, version=version, source=None)
