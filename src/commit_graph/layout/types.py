"""Layout types shared by the layout engine, the merge-preview overlay and renderers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from commit_graph.errors import Diagnostic
from commit_graph.types import EdgeKind

if TYPE_CHECKING:
    from commit_graph.layout.resolver import LayoutState

# Commit id shown for the prepended merge-preview row
MERGE_PREVIEW_ID = "merge-preview"


@dataclass
class PassingLane:
    """A lane drawn straight through a row it neither starts nor ends in."""

    column: int
    color: int
    is_committed: bool
    is_merge_preview: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "column": self.column,
            "color": self.color,
            "isCommitted": self.is_committed,
            "isMergePreview": self.is_merge_preview,
        }


@dataclass
class LineSegment:
    """A connector between a vertex in one row and its continuation in the next.

    ``to_row`` is None for a dangling segment: its destination lies outside the
    supplied history window, so it is drawn leaving the viewport.
    """

    from_column: int
    to_column: int
    from_row: int
    to_row: int | None
    color: int
    is_committed: bool
    is_merge_preview: bool = False
    kind: EdgeKind = EdgeKind.Straight

    @property
    def is_dangling(self) -> bool:
        return self.to_row is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "fromColumn": self.from_column,
            "toColumn": self.to_column,
            "fromRow": self.from_row,
            "toRow": self.to_row,
            "color": self.color,
            "isCommitted": self.is_committed,
            "isMergePreview": self.is_merge_preview,
            "kind": self.kind.name,
        }


@dataclass
class RowGraphData:
    """Everything a renderer needs to draw one row of the graph gutter."""

    column: int
    color: int
    is_committed: bool
    is_current: bool
    is_merge: bool
    has_children: bool
    has_parents: bool
    passing_lanes: list[PassingLane] = field(default_factory=list)
    incoming_lines: list[LineSegment] = field(default_factory=list)
    outgoing_lines: list[LineSegment] = field(default_factory=list)
    is_merge_preview: bool = False

    def columns(self) -> Iterable[int]:
        """Every column this row references."""
        yield self.column
        for lane in self.passing_lanes:
            yield lane.column
        yield from segment_columns(self.incoming_lines)
        yield from segment_columns(self.outgoing_lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "column": self.column,
            "color": self.color,
            "isCommitted": self.is_committed,
            "isCurrent": self.is_current,
            "isMerge": self.is_merge,
            "hasChildren": self.has_children,
            "hasParents": self.has_parents,
            "isMergePreview": self.is_merge_preview,
            "passingLanes": [lane.to_dict() for lane in self.passing_lanes],
            "incomingLines": [line.to_dict() for line in self.incoming_lines],
            "outgoingLines": [line.to_dict() for line in self.outgoing_lines],
        }


@dataclass
class LayoutResult:
    """Self-contained layout output with everything renderers need.

    ``first_row`` is the segment-row index of ``rows[0]``. It is 0 for a plain
    layout and -1 once a merge-preview row has been prepended, so the rows of
    the base layout keep the indices their segments refer to. The ``overlay_*``
    maps hold preview connectors that cross base rows, keyed by row index.
    """

    rows: list[RowGraphData]
    commit_ids: list[str]
    max_columns: int
    diagnostics: list[Diagnostic] = field(default_factory=list)
    unresolved: dict[str, int] = field(default_factory=dict)
    checkpoint: LayoutState | None = None
    first_row: int = 0
    overlay_passing: dict[int, list[PassingLane]] = field(default_factory=dict)
    overlay_incoming: dict[int, list[LineSegment]] = field(default_factory=dict)
    overlay_outgoing: dict[int, list[LineSegment]] = field(default_factory=dict)
    # commits in the window no other commit names as a parent
    heads: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def last_row(self) -> int:
        return self.first_row + len(self.rows) - 1

    def row_at(self, row_index: int) -> RowGraphData:
        return self.rows[row_index - self.first_row]

    def index_of(self, commit_id: str) -> int | None:
        """Segment-row index of ``commit_id``, or None when it has no row."""
        try:
            return self.commit_ids.index(commit_id) + self.first_row
        except ValueError:
            return None

    @property
    def has_merge_preview(self) -> bool:
        return bool(self.rows) and self.rows[0].is_merge_preview

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows": [
                {"id": commit_id, **row.to_dict()} for commit_id, row in zip(self.commit_ids, self.rows, strict=True)
            ],
            "maxColumns": self.max_columns,
            "firstRow": self.first_row,
            "unresolved": dict(self.unresolved),
            "heads": list(self.heads),
            "diagnostics": [d.describe() for d in self.diagnostics],
            "overlayPassing": {str(k): [lane.to_dict() for lane in v] for k, v in self.overlay_passing.items()},
            "overlayIncoming": {str(k): [line.to_dict() for line in v] for k, v in self.overlay_incoming.items()},
            "overlayOutgoing": {str(k): [line.to_dict() for line in v] for k, v in self.overlay_outgoing.items()},
        }


def segment_columns(segments: Iterable[LineSegment]) -> Iterable[int]:
    for seg in segments:
        yield seg.from_column
        yield seg.to_column


def get_max_columns(
    rows: Iterable[RowGraphData],
    passing: Iterable[PassingLane] = (),
    segments: Iterable[LineSegment] = (),
) -> int:
    """Gutter width in columns: one more than the largest column referenced.

    An empty layout still needs one column.
    """
    highest = -1
    for row in rows:
        highest = max(highest, *row.columns())
    for lane in passing:
        highest = max(highest, lane.column)
    for col in segment_columns(segments):
        highest = max(highest, col)
    return highest + 1 if highest >= 0 else 1
