"""
HasseMap: partial orders inferred from sample linear extensions.

Rows of keys are folded into a draft ordering relation, reduced to its Hasse
diagram, and queried for incomparable pairs and a deterministic topological
order.
"""

from hassemap.exceptions import CycleError, DuplicateKeyError, HasseMapError, RecordError
from hassemap.poset import Poset, from_rows, normalize, topological_order
from hassemap.topological import TopologicalResult

__all__ = [
    "Poset",
    "TopologicalResult",
    "from_rows",
    "normalize",
    "topological_order",
    "HasseMapError",
    "CycleError",
    "DuplicateKeyError",
    "RecordError",
]

__version__ = "0.1.0"
