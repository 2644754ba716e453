"""Column occupancy for routing overlay lanes through an existing layout."""

from __future__ import annotations

from dataclasses import dataclass

from commit_graph.layout.types import LayoutResult


@dataclass
class OccupancyGrid:
    """2D boolean grid of (row, column) cells already drawn on by a layout.

    Rows are indexed from the layout's first row. Columns at or beyond
    ``width`` are always free.
    """

    width: int
    height: int
    blocked: list[list[bool]]

    @classmethod
    def create(cls, width: int, height: int) -> OccupancyGrid:
        blocked = [[False] * width for _ in range(height)]
        return cls(width=width, height=height, blocked=blocked)

    @classmethod
    def from_layout(cls, layout: LayoutResult) -> OccupancyGrid:
        """Block every cell a vertex, passing lane or segment of ``layout`` touches.

        A diagonal segment blocks its whole column span in both of the rows it
        joins, since the connector is drawn between them.
        """
        grid = cls.create(layout.max_columns, len(layout.rows))
        base = layout.first_row
        for i, row in enumerate(layout.rows):
            grid.mark_blocked(i, row.column)
            for lane in row.passing_lanes:
                grid.mark_blocked(i, lane.column)
            for seg in [*row.incoming_lines, *row.outgoing_lines]:
                grid.mark_span_blocked(seg.from_row - base, seg.from_column, seg.to_column)
                if seg.to_row is not None:
                    grid.mark_span_blocked(seg.to_row - base, seg.from_column, seg.to_column)
        return grid

    def _grow(self, width: int) -> None:
        if width <= self.width:
            return
        for cells in self.blocked:
            cells.extend([False] * (width - self.width))
        self.width = width

    def mark_blocked(self, row: int, col: int) -> None:
        self.mark_span_blocked(row, col, col)

    def mark_span_blocked(self, row: int, col1: int, col2: int) -> None:
        """Mark columns ``col1..col2`` (either order, inclusive) of one row as blocked."""
        if row < 0 or row >= self.height:
            return
        lo, hi = (col1, col2) if col1 <= col2 else (col2, col1)
        self._grow(hi + 1)
        for col in range(max(0, lo), hi + 1):
            self.blocked[row][col] = True

    def mark_column_blocked(self, col: int, row1: int, row2: int) -> None:
        """Mark one column blocked on rows ``row1..row2`` inclusive."""
        for row in range(max(0, row1), min(self.height, row2 + 1)):
            self.mark_blocked(row, col)

    def is_free(self, col: int, row: int) -> bool:
        if col < 0 or row < 0 or row >= self.height:
            return False
        if col >= self.width:
            return True
        return not self.blocked[row][col]

    def lowest_free_column(self, row1: int, row2: int) -> int:
        """Leftmost column free on every row from ``row1`` to ``row2`` inclusive."""
        for col in range(self.width + 1):
            if all(self.is_free(col, row) for row in range(row1, row2 + 1)):
                return col
        return self.width
