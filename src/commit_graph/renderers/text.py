"""Text renderer: draws a layout as a ``git log --graph`` style gutter.

Every row takes two text lines: the vertex line, holding the commit glyph,
passing lanes and the label, then a connector line holding the segments that
run down to the next row. Lane column ``c`` is drawn at text column ``2c``;
diagonals sit in the odd columns between lanes.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from commit_graph.config import RenderConfig
from commit_graph.layout.types import MERGE_PREVIEW_ID, LayoutResult, LineSegment, PassingLane
from commit_graph.renderers.canvas import Canvas
from commit_graph.renderers.charset import CharSet

_PREVIEW_LABEL = "(merge preview)"

# ─── Segment Painting ────────────────────────────────────────────────────────


def _all_segments(layout: LayoutResult) -> Iterator[LineSegment]:
    for row in layout.rows:
        yield from row.incoming_lines
        yield from row.outgoing_lines
    for segs in layout.overlay_incoming.values():
        yield from segs
    for segs in layout.overlay_outgoing.values():
        yield from segs


def _paint_vertical(canvas: Canvas, seg: LineSegment, y: int) -> None:
    canvas.set(seg.from_column * 2, y, canvas.chars.line(seg.is_committed))


def _paint_diagonal(canvas: Canvas, seg: LineSegment, y: int) -> None:
    ch = canvas.chars
    x1 = seg.from_column * 2
    x2 = seg.to_column * 2
    if x2 > x1:
        for x in range(x1 + 1, x2 - 1):
            canvas.set_if_blank(x, y, ch.fill)
        canvas.set(x2 - 1, y, ch.down_right)
    else:
        for x in range(x2 + 2, x1):
            canvas.set_if_blank(x, y, ch.fill)
        canvas.set(x2 + 1, y, ch.down_left)


def _continuing(upper: list[PassingLane], lower: list[PassingLane]) -> list[PassingLane]:
    """Lanes passing through two consecutive rows on the same column."""
    below = {lane.column for lane in lower}
    return [lane for lane in upper if lane.column in below]


# ─── Public Renderer ─────────────────────────────────────────────────────────


class TextRenderer:
    """ASCII/Unicode text renderer."""

    def __init__(self, config: RenderConfig | None = None) -> None:
        self.config = config or RenderConfig()

    def render(self, layout: LayoutResult, subjects: Mapping[str, str] | None = None) -> str:
        if not layout.rows:
            return ""
        cs = CharSet.Unicode if self.config.unicode else CharSet.Ascii
        subjects = subjects or {}

        labels = [
            self._label(commit_id, row.is_merge_preview, subjects)
            for commit_id, row in zip(layout.commit_ids, layout.rows, strict=True)
        ]
        gutter = layout.max_columns * 2
        top = 1 if any(seg.from_row < layout.first_row for seg in layout.rows[0].incoming_lines) else 0
        width = gutter + 1 + max((len(label) for label in labels), default=0)
        height = top + 2 * len(layout.rows)
        canvas = Canvas(width, height, cs)

        def connector_y(from_row: int) -> int:
            return top + 2 * (from_row - layout.first_row) + 1

        # Lanes continuing straight down between rows
        for i, row in enumerate(layout.rows):
            row_index = layout.first_row + i
            base = row.passing_lanes
            overlay = layout.overlay_passing.get(row_index, [])
            if i + 1 < len(layout.rows):
                lanes = _continuing(base, layout.rows[i + 1].passing_lanes)
                lanes += _continuing(overlay, layout.overlay_passing.get(row_index + 1, []))
            else:
                lanes = [*base, *overlay]
            for lane in lanes:
                canvas.set(lane.column * 2, connector_y(row_index), canvas.chars.line(lane.is_committed))

        segments = list(_all_segments(layout))
        for seg in segments:
            if seg.is_dangling or seg.from_column == seg.to_column:
                _paint_vertical(canvas, seg, connector_y(seg.from_row))
        for seg in segments:
            if not seg.is_dangling and seg.from_column != seg.to_column:
                _paint_diagonal(canvas, seg, connector_y(seg.from_row))

        for i, row in enumerate(layout.rows):
            row_index = layout.first_row + i
            y = top + 2 * i
            for lane in [*row.passing_lanes, *layout.overlay_passing.get(row_index, [])]:
                canvas.set(lane.column * 2, y, canvas.chars.line(lane.is_committed))
            canvas.set(row.column * 2, y, canvas.chars.vertex(row))
            canvas.write_str(gutter + 1, y, labels[i])

        return canvas.to_string()

    def _label(self, commit_id: str, is_merge_preview: bool, subjects: Mapping[str, str]) -> str:
        if is_merge_preview and commit_id == MERGE_PREVIEW_ID:
            return _PREVIEW_LABEL
        parts = []
        if self.config.show_ids:
            parts.append(commit_id[: self.config.id_length])
        subject = subjects.get(commit_id, "")
        if self.config.show_subjects and subject:
            parts.append(subject)
        return " ".join(parts)
