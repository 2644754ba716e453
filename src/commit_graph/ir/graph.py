"""Commit graph model: indexes the input rows over a networkx DiGraph.

This module owns the read-only view every layout pass works from: one
``CommitVertex`` per input row, an id→row lookup for parent resolution, and a
child→parent DiGraph restricted to parents present in the window. Parents that
are missing or that sit at or above their child are reported, not raised.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

import networkx as nx

from commit_graph.errors import DanglingReference, OrderingViolation
from commit_graph.ir.history import CommitRecord
from commit_graph.types import ParentStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitVertex:
    id: str
    parent_ids: tuple[str, ...]
    row: int
    is_committed: bool = True
    is_current: bool = False

    @property
    def is_merge(self) -> bool:
        return len(self.parent_ids) > 1

    @property
    def has_parents(self) -> bool:
        return len(self.parent_ids) > 0


@dataclass
class ModelReport:
    """Conditions found while indexing the input."""

    violations: list[OrderingViolation] = field(default_factory=list)
    dangling: list[DanglingReference] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)


class CommitGraphModel:
    """Read-only indexed view over an ordered commit sequence.

    Wraps a networkx DiGraph (edges child → parent) and exposes the lookups
    the row resolver needs.
    """

    def __init__(
        self,
        vertices: list[CommitVertex],
        rows_by_id: dict[str, int],
        digraph: nx.DiGraph,
        report: ModelReport,
    ) -> None:
        self.vertices = vertices
        self.rows_by_id = rows_by_id
        self.digraph = digraph
        self.report = report

    @classmethod
    def from_records(cls, records: Iterable[CommitRecord]) -> CommitGraphModel:
        """Build a model from records given newest first."""
        vertices: list[CommitVertex] = []
        rows_by_id: dict[str, int] = {}
        report = ModelReport()

        for row, rec in enumerate(records):
            vertices.append(
                CommitVertex(
                    id=rec.id,
                    parent_ids=tuple(rec.parent_ids),
                    row=row,
                    is_committed=rec.is_committed,
                    is_current=rec.is_current,
                )
            )
            if rec.id in rows_by_id:
                logger.warning("duplicate commit id %s at row %d; keeping row %d", rec.id, row, rows_by_id[rec.id])
                report.duplicates.append(rec.id)
                continue
            rows_by_id[rec.id] = row

        digraph: nx.DiGraph = nx.DiGraph()
        for vertex in vertices:
            if vertex.id not in digraph:
                digraph.add_node(vertex.id, row=vertex.row)

        for vertex in vertices:
            for parent_id in vertex.parent_ids:
                parent_row = rows_by_id.get(parent_id)
                if parent_row is None:
                    report.dangling.append(DanglingReference(vertex.row, vertex.id, parent_id))
                    continue
                if parent_row <= vertex.row:
                    report.violations.append(OrderingViolation(vertex.row, vertex.id, parent_id, parent_row))
                digraph.add_edge(vertex.id, parent_id)

        for violation in report.violations:
            logger.warning("ordering violation: %s", violation.describe())
        for ref in report.dangling:
            logger.debug("dangling reference: %s", ref.describe())

        return cls(vertices=vertices, rows_by_id=rows_by_id, digraph=digraph, report=report)

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self) -> Iterator[CommitVertex]:
        return iter(self.vertices)

    def vertex(self, row: int) -> CommitVertex:
        return self.vertices[row]

    def row_of(self, commit_id: str) -> int | None:
        return self.rows_by_id.get(commit_id)

    def __contains__(self, commit_id: object) -> bool:
        return commit_id in self.rows_by_id

    def parent_status(self, row: int, parent_id: str) -> ParentStatus:
        parent_row = self.rows_by_id.get(parent_id)
        if parent_row is None:
            return ParentStatus.Missing
        if parent_row <= row:
            return ParentStatus.OutOfOrder
        return ParentStatus.Resolved

    def heads(self) -> list[str]:
        """Commits no other commit in the window names as a parent, in row order."""
        return [v.id for v in self.vertices if self.rows_by_id.get(v.id) == v.row and self.digraph.in_degree(v.id) == 0]

    @property
    def violations(self) -> list[OrderingViolation]:
        return self.report.violations

    @property
    def dangling(self) -> list[DanglingReference]:
        return self.report.dangling
