"""
Deterministic topological ordering with cycle reporting.

Kahn's algorithm over an integer-indexed successor relation. Whenever several
nodes are eligible, the one with the smallest index (order of first
appearance) is placed first, so the result is fully reproducible.
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass
from typing import Generic, Hashable, List, Sequence, Tuple, TypeVar

from hassemap.exceptions import CycleError

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


@dataclass(frozen=True)
class TopologicalResult(Generic[K]):
    """
    Outcome of a topological extraction.

    Attributes:
        order: All keys as one linear extension. Empty when is_cycle is True;
            a partial order is never returned.
        blocked: Keys that could not be placed because they lie on a cycle
            or come after one, in order of appearance. Empty on success.
        is_cycle: Whether extraction failed because of a cycle.
    """

    order: Tuple[K, ...]
    blocked: Tuple[K, ...]
    is_cycle: bool

    @property
    def ok(self) -> bool:
        return not self.is_cycle

    def unwrap(self) -> List[K]:
        """
        Return the linear extension.

        Raises:
            CycleError: If extraction failed; carries the blocked keys.
        """
        if self.is_cycle:
            raise CycleError(self.blocked)
        return list(self.order)


def kahn_order(succ: Sequence[Sequence[int]]) -> Tuple[List[int], List[int]]:
    """
    Run Kahn's algorithm with a smallest-index tie-break.

    Args:
        succ: succ[i] lists the direct successors of node i.

    Returns:
        (placed, blocked) index lists. blocked is empty exactly when every
        node was placed; otherwise it holds every node whose in-degree never
        reached zero, ascending.
    """
    n = len(succ)
    indeg = [0] * n
    for vs in succ:
        for v in vs:
            indeg[v] += 1

    ready = [i for i in range(n) if indeg[i] == 0]
    heapq.heapify(ready)
    placed: List[int] = []
    while ready:
        u = heapq.heappop(ready)
        placed.append(u)
        for v in succ[u]:
            indeg[v] -= 1
            if indeg[v] == 0:
                heapq.heappush(ready, v)

    blocked = [i for i in range(n) if indeg[i] > 0]
    return placed, blocked


def topological_result(
    succ: Sequence[Sequence[int]], keys: Sequence[K]
) -> TopologicalResult[K]:
    """
    Resolve a Kahn extraction over indices into a TopologicalResult of keys.

    Args:
        succ: Successor lists by index.
        keys: keys[i] is the key for index i.

    Returns:
        TopologicalResult with either the full order or the blocked set.
    """
    if len(succ) != len(keys):
        raise ValueError("succ and keys must have the same length")

    placed, blocked = kahn_order(succ)
    if blocked:
        logger.warning(
            "Topological order failed: %d of %d keys blocked by a cycle",
            len(blocked),
            len(keys),
        )
        return TopologicalResult(
            order=(),
            blocked=tuple(keys[i] for i in blocked),
            is_cycle=True,
        )
    return TopologicalResult(
        order=tuple(keys[i] for i in placed),
        blocked=(),
        is_cycle=False,
    )
