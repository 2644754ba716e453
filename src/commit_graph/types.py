"""Shared type definitions for commit-graph.

Enums used across the input model, layout, and renderers.
"""

from __future__ import annotations

from enum import Enum, auto


class EdgeKind(Enum):
    Straight = auto()  # same column in both rows
    Branch = auto()  # first-parent line moving to another column
    Merge = auto()  # line to a second or later parent
    MergePreview = auto()  # line from a hypothetical merge to a selected head


class ParentStatus(Enum):
    Resolved = auto()  # parent appears in a later row
    Missing = auto()  # parent is not in the supplied window
    OutOfOrder = auto()  # parent appears at or before the child's row
