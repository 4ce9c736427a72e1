"""
Graph analysis tools for inferred posets.

This module converts a Poset into networkx graphs and provides structural
diagnostics: cycle groups, level layering, antichain bounds and invariant
checks.
"""

from __future__ import annotations

import logging
from typing import Dict, Hashable, List

import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import connected_components

from hassemap.exceptions import CycleError
from hassemap.poset import Poset
from hassemap.topological import kahn_order

try:
    import networkx as nx
except ImportError as exc:  # pragma: no cover
    raise ImportError(
        "Poset analysis requires networkx. Install with: pip install networkx"
    ) from exc

logger = logging.getLogger(__name__)


def to_networkx(poset: Poset, *, relation: str = "hasse") -> nx.Graph:
    """
    Build a networkx graph from a poset.

    Nodes are keys and carry an "index" attribute holding the order of
    appearance.

    Args:
        poset: Poset to convert.
        relation: "hasse" for a DiGraph of succ edges, "incomparability"
            for an undirected Graph of amb pairs.

    Returns:
        networkx graph with every key as a node.

    Raises:
        ValueError: If relation is unknown.
    """
    kind = str(relation).strip().lower()
    if kind == "hasse":
        graph: nx.Graph = nx.DiGraph()
        pairs = poset.edges()
    elif kind == "incomparability":
        graph = nx.Graph()
        pairs = poset.incomparable_pairs()
    else:
        raise ValueError(f"Unknown relation: {relation!r}")

    for idx, key in enumerate(poset.keys):
        graph.add_node(key, index=idx)
    graph.add_edges_from(pairs)
    return graph


class PosetAnalyzer:
    """
    Structural diagnostics for a normalized Poset.
    """

    def __init__(self, poset: Poset) -> None:
        """
        Initialize analyzer with a poset.

        Args:
            poset: Poset to analyze.

        Raises:
            RuntimeError: If the poset has rows that are not normalized.
        """
        if not poset.is_normalized:
            raise RuntimeError("Poset has rows that are not normalized; call normalize() first")
        self.poset = poset

    def _adjacency(self) -> csr_matrix:
        n = len(self.poset)
        rows: List[int] = []
        cols: List[int] = []
        for u, vs in enumerate(self.poset.succ):
            rows.extend([u] * len(vs))
            cols.extend(vs)
        data = np.ones(len(rows), dtype=np.int8)
        return csr_matrix((data, (rows, cols)), shape=(n, n))

    def cycle_groups(self) -> List[List[Hashable]]:
        """
        Find groups of keys that mutually precede each other.

        Returns:
            Strongly connected components with more than one key. Keys in a
            group are in order of appearance; groups are ordered by their
            earliest key.
        """
        n = len(self.poset)
        if n == 0:
            return []
        _, labels = connected_components(
            self._adjacency(), directed=True, connection="strong"
        )
        members: Dict[int, List[int]] = {}
        for idx, label in enumerate(labels.tolist()):
            members.setdefault(int(label), []).append(idx)

        keys = self.poset.keys
        groups = [sorted(m) for m in members.values() if len(m) > 1]
        groups.sort(key=lambda g: g[0])
        return [[keys[i] for i in g] for g in groups]

    def levels(self) -> List[List[Hashable]]:
        """
        Layer keys by the longest chain that ends at them.

        Level 0 holds the minimal elements; every Hasse edge goes from a lower
        level to a higher one. Keys inside a level are in order of appearance.

        Raises:
            CycleError: If the poset contains a cycle.
        """
        succ = self.poset.succ
        placed, blocked = kahn_order(succ)
        if blocked:
            keys = self.poset.keys
            raise CycleError([keys[i] for i in blocked])

        depth = [0] * len(succ)
        for u in placed:
            for v in succ[u]:
                depth[v] = max(depth[v], depth[u] + 1)

        layers: List[List[Hashable]] = [[] for _ in range(max(depth, default=-1) + 1)]
        for idx, key in enumerate(self.poset.keys):
            layers[depth[idx]].append(key)
        return layers

    def height(self) -> int:
        """Number of keys in a longest chain (0 for an empty poset)."""
        return len(self.levels())

    def width_lower_bound(self) -> int:
        """
        Size of the largest level.

        Each level is an antichain, so this bounds the poset width from below.
        """
        return max((len(layer) for layer in self.levels()), default=0)

    def minimal_elements(self) -> List[Hashable]:
        """Keys with no predecessor in the Hasse diagram."""
        has_pred = set(v for vs in self.poset.succ for v in vs)
        return [k for i, k in enumerate(self.poset.keys) if i not in has_pred]

    def maximal_elements(self) -> List[Hashable]:
        """Keys with no successor in the Hasse diagram."""
        return [k for k, vs in zip(self.poset.keys, self.poset.succ) if not vs]

    def check_invariants(self) -> List[str]:
        """
        Check the structural guarantees of a normalized poset.

        Checked: identity and keys are inverse, every stored index is in
        range, no self-loop, no Hasse edge is implied by another path (edges
        on a cycle included), and every pair outside a cycle is either
        ordered or listed in amb exactly once.

        Returns:
            Human-readable violations; empty when the poset is healthy.
        """
        poset = self.poset
        keys = poset.keys
        n = len(keys)
        succ = poset.succ
        amb = poset.amb
        problems: List[str] = []

        for key, idx in poset.identity.items():
            if idx >= n or keys[idx] != key:
                problems.append(f"identity[{key!r}] = {idx} does not match keys")

        for u in range(n):
            for v in succ[u]:
                if not 0 <= v < n:
                    problems.append(f"succ[{u}] holds out-of-range index {v}")
                elif v == u:
                    problems.append(f"succ[{u}] holds a self-loop")
            for j in amb[u]:
                if not u < j < n:
                    problems.append(f"amb[{u}] holds invalid index {j}")
        if problems:
            return problems

        graph = nx.DiGraph()
        graph.add_nodes_from(range(n))
        graph.add_edges_from((u, v) for u in range(n) for v in succ[u])
        for u, v in list(graph.edges()):
            graph.remove_edge(u, v)
            if nx.has_path(graph, u, v):
                problems.append(f"edge {keys[u]!r} -> {keys[v]!r} is implied by another path")
            graph.add_edge(u, v)

        reach = {u: nx.descendants(graph, u) for u in range(n)}
        amb_pairs = {(i, j) for i in range(n) for j in amb[i]}
        for i in range(n):
            for j in range(i + 1, n):
                forward = j in reach[i]
                backward = i in reach[j]
                listed = (i, j) in amb_pairs
                if forward and backward:
                    if listed:
                        problems.append(f"cyclic pair ({keys[i]!r}, {keys[j]!r}) listed as incomparable")
                    continue
                if int(forward) + int(backward) + int(listed) != 1:
                    problems.append(
                        f"pair ({keys[i]!r}, {keys[j]!r}) is not exactly one of ordered or incomparable"
                    )

        if problems:
            logger.warning("Poset invariant check found %d problem(s)", len(problems))
        return problems
