"""Exceptions and reported conditions for the layout pipeline.

Only ``UnknownHeadError`` and strict-mode ``MalformedHistoryError`` are raised.
Ordering problems and truncated history are normal input shapes, so they are
collected as diagnostics on the layout result instead.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OrderingViolation:
    """A parent resolves at or before the row of its child."""

    row: int
    commit_id: str
    parent_id: str
    parent_row: int

    def describe(self) -> str:
        return (
            f"row {self.row}: parent {self.parent_id} of {self.commit_id} "
            f"appears at row {self.parent_row}, not below it"
        )


@dataclass(frozen=True)
class DanglingReference:
    """A parent id has no row in the supplied (possibly truncated) window."""

    row: int
    commit_id: str
    parent_id: str

    def describe(self) -> str:
        return f"row {self.row}: parent {self.parent_id} of {self.commit_id} is outside the history window"


Diagnostic = OrderingViolation | DanglingReference


class GraphLayoutError(Exception):
    """Base class for commit-graph errors."""


class UnknownHeadError(GraphLayoutError):
    """A merge-preview head is neither a row nor an unresolved lane of the layout."""

    def __init__(self, head_id: str) -> None:
        super().__init__(f"unknown merge head '{head_id}': not present in the layout")
        self.head_id = head_id


class MalformedHistoryError(GraphLayoutError):
    """Raised in strict mode when the input is not in ancestors-after-descendants order."""

    def __init__(self, violations: list[OrderingViolation]) -> None:
        lines = "\n".join(v.describe() for v in violations)
        super().__init__(f"history is not in topological order:\n{lines}")
        self.violations = violations
