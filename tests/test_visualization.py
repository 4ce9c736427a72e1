"""
Unit tests for Hasse diagram visualization.
"""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt

from hassemap import Poset
from hassemap.visualization import HasseVisualizer


def test_plot_hasse_runs_and_returns_axes() -> None:
    """Create a Hasse diagram plot without raising errors."""
    poset = Poset.from_rows([["a", "b", "d"], ["a", "c", "d"]])

    ax = HasseVisualizer.plot_hasse(poset, show_incomparable=True)
    assert ax is not None
    assert "4 keys" in ax.get_title()
    plt.close(ax.figure)


def test_layered_positions_put_minimal_elements_at_bottom() -> None:
    """Minimal elements sit on level 0, centered around zero."""
    poset = Poset.from_rows([["a", "b", "d"], ["a", "c", "d"]])
    pos = HasseVisualizer.layered_positions(poset)

    assert pos["a"] == (0.0, 0.0)
    assert pos["b"] == (-0.5, 1.0)
    assert pos["c"] == (0.5, 1.0)
    assert pos["d"] == (0.0, 2.0)


def test_plot_hasse_with_cycle_falls_back_to_circular_layout() -> None:
    """A cyclic relation is still drawn."""
    poset = Poset.from_rows([["a", "b"], ["b", "a"], ["c"]])

    ax = HasseVisualizer.plot_hasse(poset, title="Cycle")
    assert ax.get_title() == "Cycle"
    plt.close(ax.figure)


def test_plot_hasse_empty_poset() -> None:
    """An empty poset gets a placeholder plot."""
    _, ax = plt.subplots()
    result = HasseVisualizer.plot_hasse(Poset.from_rows([]), ax=ax)

    assert result is ax
    assert result.get_title() == "Hasse Diagram"
    plt.close(ax.figure)
