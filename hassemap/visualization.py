"""
Visualization tools for inferred posets.

This module draws Hasse diagrams with matplotlib and networkx.
"""

from __future__ import annotations

from typing import Dict, Hashable, Optional, Tuple

import matplotlib.pyplot as plt
import networkx as nx
import numpy as np

from hassemap.exceptions import CycleError
from hassemap.network_analysis import PosetAnalyzer, to_networkx
from hassemap.poset import Poset


class HasseVisualizer:
    """
    Draws the Hasse diagram of a Poset.

    Acyclic posets are laid out bottom-up by level, minimal elements at the
    bottom. When the relation has a cycle no levels exist; a circular layout
    is used and blocked keys are highlighted.
    """

    @staticmethod
    def layered_positions(poset: Poset) -> Dict[Hashable, Tuple[float, float]]:
        """
        Compute node positions from the level layering.

        Args:
            poset: Acyclic, normalized poset.

        Returns:
            Mapping from key to (x, y); y is the level, x spreads each level
            symmetrically around zero in order of appearance.

        Raises:
            CycleError: If the poset has a cycle.
        """
        pos: Dict[Hashable, Tuple[float, float]] = {}
        for level, layer in enumerate(PosetAnalyzer(poset).levels()):
            xs = np.arange(len(layer), dtype=float) - (len(layer) - 1) / 2.0
            for key, x in zip(layer, xs):
                pos[key] = (float(x), float(level))
        return pos

    @staticmethod
    def plot_hasse(
        poset: Poset,
        ax: Optional[plt.Axes] = None,
        *,
        show_incomparable: bool = False,
        title: Optional[str] = None,
    ) -> plt.Axes:
        """
        Plot the Hasse diagram of a poset.

        Args:
            poset: Normalized poset to draw.
            ax: Matplotlib axes to plot on. If None, creates new figure.
            show_incomparable: Whether to draw incomparable pairs as dotted
                undirected lines.
            title: Axes title. Defaults to a summary of the poset size.

        Returns:
            Matplotlib axes object.
        """
        if ax is None:
            _, ax = plt.subplots(figsize=(8, 6))

        graph = to_networkx(poset, relation="hasse")
        if graph.number_of_nodes() == 0:
            ax.text(0.5, 0.5, "Empty poset", ha="center", va="center", fontsize=12)
            ax.set_title(title or "Hasse Diagram")
            ax.axis("off")
            return ax

        blocked = set()
        try:
            pos = HasseVisualizer.layered_positions(poset)
        except CycleError as exc:
            blocked = set(exc.blocked)
            pos = nx.circular_layout(graph)

        colors = ["#e74c3c" if key in blocked else "#3498db" for key in graph.nodes()]
        nx.draw_networkx_nodes(graph, pos, node_size=600, node_color=colors, ax=ax)
        nx.draw_networkx_edges(
            graph,
            pos,
            arrows=True,
            arrowsize=12,
            edge_color="black",
            ax=ax,
        )
        nx.draw_networkx_labels(
            graph, pos, labels={k: str(k) for k in graph.nodes()}, font_size=9, ax=ax
        )

        if show_incomparable:
            incomparable = to_networkx(poset, relation="incomparability")
            nx.draw_networkx_edges(
                incomparable,
                pos,
                style="dotted",
                edge_color="#95a5a6",
                alpha=0.7,
                ax=ax,
            )

        ax.set_title(
            title
            or f"Hasse Diagram ({graph.number_of_nodes()} keys, {graph.number_of_edges()} edges)"
        )
        ax.axis("off")
        return ax
