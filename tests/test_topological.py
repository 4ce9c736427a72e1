"""
Unit tests for topological extraction.

Tests the smallest-index tie-break, cycle reporting and the raising variants.
"""

import pytest

from hassemap import CycleError, Poset, TopologicalResult, topological_order
from hassemap.topological import kahn_order, topological_result


class TestKahnOrder:
    """Test suite for kahn_order."""

    def test_ties_go_to_smallest_index(self) -> None:
        """Eligible nodes are placed in ascending index order."""
        placed, blocked = kahn_order([[3], [3], [], []])

        assert placed == [0, 1, 2, 3]
        assert blocked == []

    def test_successor_released_before_larger_ready_index(self) -> None:
        """A released successor with a smaller index jumps ahead."""
        placed, blocked = kahn_order([[], [], [0], []])

        assert placed == [1, 2, 0, 3]
        assert blocked == []

    def test_blocked_includes_nodes_after_cycle(self) -> None:
        """Every node whose in-degree never reached zero is reported."""
        placed, blocked = kahn_order([[1], [2], [1, 3], []])

        assert placed == [0]
        assert blocked == [1, 2, 3]

    def test_empty(self) -> None:
        """An empty relation yields empty results."""
        assert kahn_order([]) == ([], [])


class TestTopologicalResult:
    """Test suite for TopologicalResult."""

    def test_success_unwraps(self) -> None:
        """A successful result unwraps to a list."""
        result = topological_result([[1], []], ["x", "y"])

        assert result == TopologicalResult(order=("x", "y"), blocked=(), is_cycle=False)
        assert result.ok
        assert result.unwrap() == ["x", "y"]

    def test_failure_raises_with_blocked(self) -> None:
        """A failed result never carries a partial order."""
        result = topological_result([[1], [0], []], ["x", "y", "z"])

        assert result.is_cycle
        assert result.order == ()
        assert result.blocked == ("x", "y")
        with pytest.raises(CycleError) as info:
            result.unwrap()
        assert info.value.blocked == ("x", "y")

    def test_length_mismatch_raises(self) -> None:
        """Reject succ and keys of different lengths."""
        with pytest.raises(ValueError, match="same length"):
            topological_result([[]], [])


class TestPosetTopologicalOrder:
    """Test suite for Poset.topological_order."""

    def test_order_respects_every_edge(self) -> None:
        """Every Hasse edge points forward in the order, and all keys appear."""
        poset = Poset.from_rows(
            [["s", "a", "t"], ["s", "b", "t"], ["c", "a"], ["b", "d"], ["e"]]
        )
        order = poset.linear_extension()
        position = {key: i for i, key in enumerate(order)}

        assert sorted(order) == sorted(poset.keys)
        for u, v in poset.edges():
            assert position[u] < position[v]

    def test_order_of_appearance_breaks_ties(self) -> None:
        """Unrelated keys come out in order of first appearance."""
        poset = Poset.from_rows([["z"], ["y"], ["x", "w"]])

        assert poset.linear_extension() == ["z", "y", "x", "w"]

    def test_cycle_reports_full_blocked_set(self) -> None:
        """A two-key contradiction blocks both keys."""
        poset = Poset.from_rows([["a", "b"], ["b", "a"]])
        result = topological_order(poset)

        assert result.is_cycle
        assert set(result.blocked) == {"a", "b"}

    def test_keys_after_cycle_are_blocked(self) -> None:
        """Keys that only follow a cycle are blocked too; others are not."""
        poset = Poset.from_rows([["a", "b", "c"], ["b", "a"], ["d"]])
        result = poset.topological_order()

        assert result.is_cycle
        assert result.blocked == ("a", "b", "c")

    def test_linear_extension_raises_cycle_error(self) -> None:
        """linear_extension raises a ValueError subclass on cycles."""
        poset = Poset.from_rows([["a", "b"], ["b", "a"]])

        with pytest.raises(ValueError, match="cycle"):
            poset.linear_extension()

    def test_works_on_unnormalized_draft(self) -> None:
        """Extraction also runs on a draft relation."""
        poset = Poset()
        poset.add_row(["a", "b", "c"])

        assert poset.linear_extension() == ["a", "b", "c"]
