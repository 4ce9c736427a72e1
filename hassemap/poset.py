"""
Partial order inference from sample linear extensions.

A Poset is built from rows, each row being a totally ordered list of keys.
Every ordered pair of positions in a row contributes a draft edge; the draft
relation is then normalized into its Hasse diagram (transitive reduction),
and the pairs left unconstrained in both directions are recorded as
incomparable.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import (
    Dict,
    Hashable,
    Iterable,
    List,
    Mapping,
    Sequence,
    Set,
    Tuple,
)

import numpy as np

from hassemap.exceptions import DuplicateKeyError
from hassemap.topological import TopologicalResult, topological_result

logger = logging.getLogger(__name__)

DUPLICATE_POLICIES = ("first", "error")


class Poset:
    """
    A partial order over hashable keys, discovered row by row.

    Keys get dense integer indices in order of first appearance. The public
    tables are exposed read-only:

    - identity: key -> index
    - keys: index -> key
    - succ: sorted direct (Hasse) successors per index
    - amb: per index i, sorted indices j > i incomparable with i

    Rows added through add_row() only grow the draft relation; succ and amb
    describe the normalized relation once normalize() has run.
    """

    def __init__(self, *, duplicates: str = "first") -> None:
        """
        Create an empty poset.

        Args:
            duplicates: What to do with a key repeated inside one row.
                "first" keeps the first occurrence, "error" raises
                DuplicateKeyError.

        Raises:
            ValueError: If duplicates is not a known policy.
        """
        policy = str(duplicates).strip().lower()
        if policy not in DUPLICATE_POLICIES:
            raise ValueError(f"Unknown duplicate policy: {duplicates!r}")
        self._duplicates = policy
        self._identity: Dict[Hashable, int] = {}
        self._keys: List[Hashable] = []
        self._succ: List[Set[int]] = []
        self._amb: List[List[int]] = []
        self._reach = np.zeros((0, 0), dtype=bool)
        self._n_rows = 0
        self._dirty = False

    @classmethod
    def from_rows(
        cls, rows: Iterable[Sequence[Hashable]], *, duplicates: str = "first"
    ) -> "Poset":
        """
        Build and normalize a poset from a batch of rows.

        Args:
            rows: Each row lists keys in their observed order.
            duplicates: Duplicate-key policy, see Poset().

        Returns:
            Normalized Poset.
        """
        poset = cls(duplicates=duplicates)
        poset.add_rows(rows)
        return poset

    # Read-only views

    @property
    def identity(self) -> Mapping[Hashable, int]:
        return MappingProxyType(self._identity)

    @property
    def keys(self) -> Tuple[Hashable, ...]:
        return tuple(self._keys)

    @property
    def succ(self) -> Tuple[Tuple[int, ...], ...]:
        return tuple(tuple(sorted(vs)) for vs in self._succ)

    @property
    def amb(self) -> Tuple[Tuple[int, ...], ...]:
        return tuple(tuple(js) for js in self._amb)

    @property
    def n_rows(self) -> int:
        """Number of rows folded in so far."""
        return self._n_rows

    @property
    def is_normalized(self) -> bool:
        return not self._dirty

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        try:
            return key in self._identity
        except TypeError:
            return False

    def __repr__(self) -> str:
        n_edges = sum(len(vs) for vs in self._succ)
        return (
            f"Poset(n_keys={len(self._keys)}, n_edges={n_edges}, "
            f"n_rows={self._n_rows}, normalized={self.is_normalized})"
        )

    def index_of(self, key: Hashable) -> int:
        """
        Return the index of a key.

        Raises:
            KeyError: If the key has never been seen.
        """
        try:
            return self._identity[key]
        except KeyError:
            raise KeyError(f"Unknown key: {key!r}") from None

    def key_at(self, index: int) -> Hashable:
        """
        Return the key stored at an index.

        Raises:
            IndexError: If index is out of range.
        """
        i = int(index)
        if i < 0 or i >= len(self._keys):
            raise IndexError(f"index {index!r} out of range for {len(self._keys)} keys")
        return self._keys[i]

    # Registry and draft relation

    def _add_key(self, key: Hashable) -> int:
        i = self._identity.get(key)
        if i is not None:
            return i
        i = len(self._keys)
        self._identity[key] = i
        self._keys.append(key)
        self._succ.append(set())
        self._amb.append([])
        return i

    def _dedupe(self, row: Sequence[Hashable]) -> List[Hashable]:
        seen: Set[Hashable] = set()
        out: List[Hashable] = []
        for key in row:
            if key in seen:
                if self._duplicates == "error":
                    raise DuplicateKeyError(key, self._n_rows)
                continue
            seen.add(key)
            out.append(key)
        if len(out) != len(row):
            logger.debug(
                "Row %d: dropped %d repeated key(s)", self._n_rows, len(row) - len(out)
            )
        return out

    def add_row(self, row: Sequence[Hashable]) -> None:
        """
        Fold one row into the draft relation without normalizing.

        Every key is registered, and for each pair of positions i < j an edge
        row[i] -> row[j] is recorded.

        Args:
            row: Keys in their observed order.

        Raises:
            DuplicateKeyError: If the row repeats a key under the "error" policy.
        """
        # A rejected row registers no keys.
        row = self._dedupe(list(row))
        idx = [self._add_key(k) for k in row]
        for pos, u in enumerate(idx):
            self._succ[u].update(idx[pos + 1 :])
        self._n_rows += 1
        self._dirty = True

    def add_rows(self, rows: Iterable[Sequence[Hashable]]) -> None:
        """Fold several rows into the draft relation, then normalize."""
        for row in rows:
            self.add_row(row)
        self.normalize()

    # Normalization

    def _reachability(self) -> np.ndarray:
        """R[s, t] is True when a path of length >= 1 leads from s to t."""
        n = len(self._keys)
        reach = np.zeros((n, n), dtype=bool)
        for s in range(n):
            row = reach[s]
            stack = [s]
            while stack:
                u = stack.pop()
                for v in self._succ[u]:
                    if not row[v]:
                        row[v] = True
                        stack.append(v)
        return reach

    def _reduce(self, reach: np.ndarray) -> List[Set[int]]:
        """
        Drop edges implied by a longer path between different classes.

        Nodes that reach each other form one class (a cycle). Edges inside a
        class are left to _drop_redundant. An edge u -> v between two
        classes is dropped when some edge leaving u's class lands on a third
        class that still reaches v. Without cycles every class is a single
        node and this is the plain transitive reduction.
        """
        n = len(self._keys)
        reflexive = reach | np.eye(n, dtype=bool)
        same = reflexive & reflexive.T
        adjacency = np.zeros((n, n), dtype=bool)
        for u, vs in enumerate(self._succ):
            if vs:
                adjacency[u, list(vs)] = True

        reduced: List[Set[int]] = []
        for u in range(n):
            out = adjacency[same[u]].any(axis=0) & ~same[u]
            kept: Set[int] = set()
            for v in self._succ[u]:
                if same[u, v]:
                    kept.add(v)
                    continue
                via = out & ~same[v] & reach[:, v]
                if not via.any():
                    kept.add(v)
            reduced.append(kept)
        return reduced

    @staticmethod
    def _drop_redundant(succ: List[Set[int]]) -> List[Set[int]]:
        """
        Drop each edge whose target stays reachable without it.

        Edges are visited in ascending (u, v) order and removed one at a
        time, so reachability never changes and no surviving edge has an
        alternate path. Only relations with a cycle have anything left to
        drop after the class-based pass.
        """
        for u in range(len(succ)):
            for v in sorted(succ[u]):
                succ[u].discard(v)
                seen = {u}
                stack = [u]
                found = False
                while stack and not found:
                    w = stack.pop()
                    for x in succ[w]:
                        if x == v:
                            found = True
                            break
                        if x not in seen:
                            seen.add(x)
                            stack.append(x)
                if not found:
                    succ[u].add(v)
        return succ

    @staticmethod
    def _incomparable(reach: np.ndarray) -> List[List[int]]:
        unrelated = np.triu(~(reach | reach.T), k=1)
        return [np.flatnonzero(row).tolist() for row in unrelated]

    def normalize(self) -> None:
        """
        Recompute the Hasse diagram and the incomparable pairs in place.

        Reachability is recomputed from scratch, so calling this repeatedly
        without new rows gives identical results.
        """
        n = len(self._keys)
        n_before = sum(len(vs) for vs in self._succ)
        reach = self._reachability()
        self._succ = self._drop_redundant(self._reduce(reach))
        self._amb = self._incomparable(reach)
        self._reach = reach
        self._dirty = False
        logger.debug(
            "Normalized %d keys: %d draft edges -> %d Hasse edges, %d incomparable pairs",
            n,
            n_before,
            sum(len(vs) for vs in self._succ),
            sum(len(js) for js in self._amb),
        )

    # Queries

    def _require_normalized(self) -> None:
        if self._dirty:
            raise RuntimeError("Poset has rows that are not normalized; call normalize() first")

    def reachability(self) -> np.ndarray:
        """
        Return a copy of the reachability matrix from the last normalization.

        Raises:
            RuntimeError: If rows were added since the last normalize().
        """
        self._require_normalized()
        return self._reach.copy()

    def reaches(self, a: Hashable, b: Hashable) -> bool:
        """Whether a directed path of length >= 1 leads from key a to key b."""
        self._require_normalized()
        return bool(self._reach[self.index_of(a), self.index_of(b)])

    def compare(self, a: Hashable, b: Hashable) -> str:
        """
        Compare two keys.

        Returns:
            "=" for the same key, "<" if a precedes b, ">" if b precedes a,
            "||" if they are incomparable and "cycle" if each reaches the other.
        """
        self._require_normalized()
        i, j = self.index_of(a), self.index_of(b)
        if i == j:
            return "="
        forward = bool(self._reach[i, j])
        backward = bool(self._reach[j, i])
        if forward and backward:
            return "cycle"
        if forward:
            return "<"
        if backward:
            return ">"
        return "||"

    def edges(self) -> List[Tuple[Hashable, Hashable]]:
        """Hasse edges as (key, key) pairs, ordered by source then target index."""
        return [
            (self._keys[u], self._keys[v])
            for u, vs in enumerate(self._succ)
            for v in sorted(vs)
        ]

    def incomparable_pairs(self) -> List[Tuple[Hashable, Hashable]]:
        """Incomparable pairs as (key, key), the earlier-seen key first."""
        return [(self._keys[i], self._keys[j]) for i, js in enumerate(self._amb) for j in js]

    def topological_order(self) -> TopologicalResult:
        """
        Extract one deterministic linear extension of succ.

        Returns:
            TopologicalResult holding either every key in order or, if a
            cycle prevents a full order, every key left blocked.
        """
        return topological_result(self.succ, self._keys)

    def linear_extension(self) -> List[Hashable]:
        """
        Return one deterministic linear extension.

        Raises:
            CycleError: If a cycle prevents a full order.
        """
        return self.topological_order().unwrap()


def from_rows(
    rows: Iterable[Sequence[Hashable]], *, duplicates: str = "first"
) -> Poset:
    """Build and normalize a Poset from rows."""
    return Poset.from_rows(rows, duplicates=duplicates)


def normalize(poset: Poset) -> Poset:
    """Normalize a Poset in place and return it."""
    poset.normalize()
    return poset


def topological_order(poset: Poset) -> TopologicalResult:
    """One deterministic linear extension of a Poset, or its blocked keys."""
    return poset.topological_order()
