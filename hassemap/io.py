"""
Row input and report output.

Input records are JSON objects, supplied either as one JSON array or as
newline-delimited JSON (one object per line). Each record becomes a row: its
field names in the order they appear in the document.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Mapping, TextIO

from hassemap.exceptions import RecordError
from hassemap.poset import Poset

logger = logging.getLogger(__name__)


def keys_in_order(record: Any) -> List[str]:
    """
    Return the field names of one record in document order.

    Raises:
        RecordError: If the record is not a JSON object.
    """
    if not isinstance(record, Mapping):
        raise RecordError(f"Row must be a JSON object, got {type(record).__name__}")
    return [str(k) for k in record.keys()]


def parse_rows(text: str) -> List[List[str]]:
    """
    Parse input text into rows of field names.

    Args:
        text: A JSON array of objects, or NDJSON. Blank lines are skipped.

    Returns:
        One row per record, in input order.

    Raises:
        RecordError: On invalid JSON or a record that is not an object.
    """
    stripped = text.strip()
    if not stripped:
        return []

    if stripped.startswith("["):
        try:
            values = json.loads(stripped)
        except json.JSONDecodeError as exc:
            raise RecordError(f"Invalid JSON array: {exc}") from exc
        rows = [keys_in_order(v) for v in values]
    else:
        rows = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                value = json.loads(line)
            except json.JSONDecodeError as exc:
                raise RecordError(f"Invalid JSON on line {lineno}: {exc}") from exc
            try:
                rows.append(keys_in_order(value))
            except RecordError as exc:
                raise RecordError(f"Line {lineno}: {exc}") from exc

    logger.debug("Parsed %d row(s)", len(rows))
    return rows


def read_rows(stream: TextIO) -> List[List[str]]:
    """Read and parse every row from a text stream."""
    return parse_rows(stream.read())


def format_report(poset: Poset) -> str:
    """
    Render the topological order, Hasse edges and ambiguities as text.

    Only keys with at least one successor (or incomparable partner) get a
    line in the corresponding section.
    """
    keys = poset.keys
    result = poset.topological_order()
    if result.ok:
        lines = [f"Topological order: {list(result.order)!r}"]
    else:
        lines = [f"Topological order: cycle, blocked keys {list(result.blocked)!r}"]

    lines.append("Hasse edges:")
    for u, vs in enumerate(poset.succ):
        if vs:
            lines.append(f"  {keys[u]} -> {[keys[v] for v in vs]!r}")

    lines.append("Ambiguities:")
    for i, js in enumerate(poset.amb):
        if js:
            lines.append(f"  {keys[i]} ? {[keys[j] for j in js]!r}")
    return "\n".join(lines)
