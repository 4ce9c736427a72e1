"""
Exception types raised by hassemap.
"""

from __future__ import annotations

from typing import Hashable, Sequence, Tuple


class HasseMapError(Exception):
    """Base class for all hassemap errors."""


class CycleError(HasseMapError, ValueError):
    """
    Raised when no linear extension exists because the relation has a cycle.

    Attributes:
        blocked: Every key that could not be placed, in order of appearance.
            This includes keys on a cycle and keys that only follow one.
    """

    def __init__(self, blocked: Sequence[Hashable]) -> None:
        self.blocked: Tuple[Hashable, ...] = tuple(blocked)
        super().__init__(
            f"Relation has at least one cycle; {len(self.blocked)} key(s) blocked: "
            f"{list(self.blocked)!r}"
        )


class DuplicateKeyError(HasseMapError, ValueError):
    """Raised when a row repeats a key and the duplicate policy is "error"."""

    def __init__(self, key: Hashable, row_index: int) -> None:
        self.key = key
        self.row_index = int(row_index)
        super().__init__(f"Row {self.row_index} contains duplicate key {key!r}")


class RecordError(HasseMapError, ValueError):
    """Raised when an input record cannot be turned into a row of keys."""
