"""
Unit tests for row parsing and report formatting.
"""

import io

import pytest

from hassemap import Poset, RecordError
from hassemap.io import format_report, keys_in_order, parse_rows, read_rows


class TestParseRows:
    """Test suite for parse_rows."""

    def test_json_array(self) -> None:
        """Parse a JSON array of objects, keeping field order."""
        text = '[{"b": 1, "a": 2}, {"c": null, "b": [1, 2]}]'

        assert parse_rows(text) == [["b", "a"], ["c", "b"]]

    def test_ndjson_skips_blank_lines(self) -> None:
        """Parse one object per line and skip blank lines."""
        text = '{"x": 1, "y": 2}\n\n   \n{"y": 3, "z": {"nested": true}}\n'

        assert parse_rows(text) == [["x", "y"], ["y", "z"]]

    def test_empty_input(self) -> None:
        """Empty or whitespace-only input gives no rows."""
        assert parse_rows("") == []
        assert parse_rows("  \n\n") == []

    def test_empty_array(self) -> None:
        """An empty array gives no rows."""
        assert parse_rows("[]") == []

    def test_invalid_json_line_raises(self) -> None:
        """Report the line of invalid NDJSON."""
        with pytest.raises(RecordError, match="line 2"):
            parse_rows('{"a": 1}\n{"b": \n')

    def test_invalid_array_raises(self) -> None:
        """Report an invalid JSON array."""
        with pytest.raises(RecordError, match="Invalid JSON array"):
            parse_rows('[{"a": 1},')

    def test_non_object_record_raises(self) -> None:
        """Records must be JSON objects."""
        with pytest.raises(RecordError, match="must be a JSON object"):
            parse_rows("[1, 2]")
        with pytest.raises(RecordError, match="Line 1"):
            parse_rows('"text"\n')

    def test_read_rows_from_stream(self) -> None:
        """Read rows from a text stream."""
        stream = io.StringIO('{"a": 1, "b": 2}\n')

        assert read_rows(stream) == [["a", "b"]]

    def test_keys_in_order(self) -> None:
        """Field names are returned as strings in order."""
        assert keys_in_order({"z": 0, "a": 1}) == ["z", "a"]
        with pytest.raises(RecordError):
            keys_in_order(["a"])


class TestFormatReport:
    """Test suite for format_report."""

    def test_report_for_partial_order(self) -> None:
        """List the order, non-empty Hasse rows and non-empty ambiguity rows."""
        poset = Poset.from_rows([["a", "b"], ["c", "b"]])

        assert format_report(poset).splitlines() == [
            "Topological order: ['a', 'c', 'b']",
            "Hasse edges:",
            "  a -> ['b']",
            "  c -> ['b']",
            "Ambiguities:",
            "  a ? ['c']",
        ]

    def test_report_for_cycle(self) -> None:
        """Report the blocked keys when no order exists."""
        poset = Poset.from_rows([["a", "b"], ["b", "a"]])
        report = format_report(poset)

        assert report.splitlines()[0] == "Topological order: cycle, blocked keys ['a', 'b']"
        assert "  a -> ['b']" in report
        assert "  b -> ['a']" in report

    def test_report_for_empty_poset(self) -> None:
        """An empty poset prints only the headers."""
        assert format_report(Poset.from_rows([])).splitlines() == [
            "Topological order: []",
            "Hasse edges:",
            "Ambiguities:",
        ]
