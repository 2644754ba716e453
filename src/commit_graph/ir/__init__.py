"""Intermediate representation: input records and the indexed commit graph."""

from commit_graph.ir.graph import CommitGraphModel, CommitVertex, ModelReport
from commit_graph.ir.history import UNCOMMITTED_ID, CommitRecord, mark_current, with_uncommitted_changes

__all__ = [
    "UNCOMMITTED_ID",
    "CommitGraphModel",
    "CommitRecord",
    "CommitVertex",
    "ModelReport",
    "mark_current",
    "with_uncommitted_changes",
]
