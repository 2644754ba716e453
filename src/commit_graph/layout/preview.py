"""Merge-preview overlay: a hypothetical merge commit drawn above a layout.

The overlay never touches the layout it is given. It prepends one synthetic
row at segment-row ``first_row - 1`` and publishes the connectors that cross
existing rows in the result's ``overlay_*`` maps, so the base rows can be
shared as-is with the new result.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from commit_graph.errors import GraphLayoutError, UnknownHeadError
from commit_graph.layout.occupancy import OccupancyGrid
from commit_graph.layout.types import (
    MERGE_PREVIEW_ID,
    LayoutResult,
    LineSegment,
    PassingLane,
    RowGraphData,
    get_max_columns,
)
from commit_graph.types import EdgeKind

logger = logging.getLogger(__name__)


class MergePreviewOverlay:
    """Prepends a merge-preview row joining the tip to a set of branch heads."""

    def __init__(self, layout: LayoutResult) -> None:
        self.layout = layout
        # per-apply routing state
        self._grid = OccupancyGrid.create(0, 0)
        self._passing: dict[int, list[PassingLane]] = {}
        self._incoming: dict[int, list[LineSegment]] = {}
        self._outgoing: dict[int, list[LineSegment]] = {}
        self._column = 0
        self._row = -1

    def apply(self, heads: Iterable[str], tip_id: str | None = None) -> LayoutResult:
        """Return a new layout with the merge-preview row in front.

        The tip is ``tip_id`` when given, else the row flagged ``is_current``,
        else the first row.

        Raises:
            UnknownHeadError: A head (or ``tip_id``) is neither a row nor an
                unresolved parent of the layout.
            GraphLayoutError: The layout already carries a merge preview, or
                does not start at the top of the history.
        """
        base = self.layout
        if base.has_merge_preview:
            raise GraphLayoutError("layout already carries a merge preview")
        if base.first_row != 0:
            raise GraphLayoutError("a merge preview can only sit above the first row of a history")

        tip_index = self._find_tip(tip_id)
        tip_commit = base.commit_ids[tip_index] if tip_index is not None else None

        selected: list[str] = []
        for head in heads:
            if head not in base.commit_ids and head not in base.unresolved:
                raise UnknownHeadError(head)
            if head == tip_commit or head in selected:
                continue
            selected.append(head)

        preview_row = base.first_row - 1
        if tip_index is not None:
            tip = base.rows[tip_index]
            column, color = tip.column, tip.color
        else:
            column, color = 0, 0

        self._grid = OccupancyGrid.from_layout(base)
        self._passing = {}
        self._incoming = {}
        self._outgoing = {}
        self._column = column
        self._row = preview_row

        outgoing: list[LineSegment] = []
        if tip_index is not None:
            outgoing.append(self._connect(tip_index, column, color, is_merge_preview=False))

        for head in selected:
            index = base.index_of(head)
            if index is not None:
                target = base.row_at(index)
                outgoing.append(self._connect(index, target.column, target.color, is_merge_preview=True))
            else:
                outgoing.append(self._connect_unresolved(color))

        preview = RowGraphData(
            column=column,
            color=color,
            is_committed=False,
            is_current=False,
            is_merge=len(selected) >= 1,
            has_children=False,
            has_parents=bool(outgoing),
            outgoing_lines=outgoing,
            is_merge_preview=True,
        )
        rows = [preview, *base.rows]

        overlay_segments = [seg for segs in [*self._incoming.values(), *self._outgoing.values()] for seg in segs]
        overlay_passing = [lane for lanes in self._passing.values() for lane in lanes]
        logger.debug("merge preview of %s over %d rows", selected, len(base.rows))

        return LayoutResult(
            rows=rows,
            commit_ids=[MERGE_PREVIEW_ID, *base.commit_ids],
            max_columns=get_max_columns(rows, overlay_passing, overlay_segments),
            diagnostics=list(base.diagnostics),
            unresolved=dict(base.unresolved),
            checkpoint=base.checkpoint,
            first_row=preview_row,
            overlay_passing=self._passing,
            overlay_incoming=self._incoming,
            overlay_outgoing=self._outgoing,
            heads=list(base.heads),
        )

    def _find_tip(self, tip_id: str | None) -> int | None:
        base = self.layout
        if tip_id is not None:
            index = base.index_of(tip_id)
            if index is None:
                raise UnknownHeadError(tip_id)
            return index - base.first_row
        for i, row in enumerate(base.rows):
            if row.is_current:
                return i
        return 0 if base.rows else None

    def _connect(self, index: int, target_column: int, color: int, is_merge_preview: bool) -> LineSegment:
        """Join the preview vertex to the row at base index ``index``."""
        kind = EdgeKind.MergePreview if is_merge_preview else EdgeKind.Branch
        if index == 0:
            seg = self._segment(self._row, self._column, target_column, color, is_merge_preview, kind)
            self._incoming.setdefault(0, []).append(seg)
            return seg

        lane_column = self._claim_column(0, index - 1, color, is_merge_preview)
        first = self._segment(self._row, self._column, lane_column, color, is_merge_preview, kind)
        self._incoming.setdefault(0, []).append(first)
        self._incoming.setdefault(index, []).append(
            self._segment(index - 1, lane_column, target_column, color, is_merge_preview, kind)
        )
        return first

    def _connect_unresolved(self, color: int) -> LineSegment:
        """Run a preview lane down the whole layout and out of the viewport."""
        last = len(self.layout.rows) - 1
        if last < 0:
            return LineSegment(self._column, self._column, self._row, None, color, False, True, EdgeKind.MergePreview)

        lane_column = self._claim_column(0, last, color, True)
        first = self._segment(self._row, self._column, lane_column, color, True, EdgeKind.MergePreview)
        self._incoming.setdefault(0, []).append(first)
        self._outgoing.setdefault(last, []).append(
            LineSegment(lane_column, lane_column, last, None, color, False, True, EdgeKind.MergePreview)
        )
        return first

    def _claim_column(self, first: int, last: int, color: int, is_merge_preview: bool) -> int:
        column = self._grid.lowest_free_column(first, last)
        self._grid.mark_column_blocked(column, first, last)
        for row in range(first, last + 1):
            self._passing.setdefault(row, []).append(
                PassingLane(column=column, color=color, is_committed=False, is_merge_preview=is_merge_preview)
            )
        return column

    @staticmethod
    def _segment(
        from_row: int, from_column: int, to_column: int, color: int, is_merge_preview: bool, kind: EdgeKind
    ) -> LineSegment:
        return LineSegment(
            from_column=from_column,
            to_column=to_column,
            from_row=from_row,
            to_row=from_row + 1,
            color=color,
            is_committed=False,
            is_merge_preview=is_merge_preview,
            kind=EdgeKind.Straight if from_column == to_column and kind is EdgeKind.Branch else kind,
        )
