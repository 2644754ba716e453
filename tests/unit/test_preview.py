"""Tests for layout/preview.py and layout/occupancy.py."""

from __future__ import annotations

import pytest

from commit_graph.errors import GraphLayoutError, UnknownHeadError
from commit_graph.ir.history import CommitRecord
from commit_graph.layout.engine import full_layout
from commit_graph.layout.occupancy import OccupancyGrid
from commit_graph.layout.preview import MergePreviewOverlay
from commit_graph.layout.types import MERGE_PREVIEW_ID, LayoutResult, LineSegment, PassingLane
from commit_graph.types import EdgeKind

# ─── Helpers ──────────────────────────────────────────────────────────────────


def lay(*commits: tuple[str, ...], head_id: str | None = None) -> LayoutResult:
    return full_layout([CommitRecord.new(*c) for c in commits], head_id=head_id)


def feature_branch() -> LayoutResult:
    """T (HEAD) and F both branch off A; F sits in column 1."""
    return lay(("T", "A"), ("F", "A"), ("A",), head_id="T")


# ─── Occupancy Grid Tests ─────────────────────────────────────────────────────


class TestOccupancyGrid:
    def test_create_all_free(self):
        grid = OccupancyGrid.create(3, 2)
        assert all(grid.is_free(c, r) for c in range(3) for r in range(2))

    def test_out_of_rows_not_free(self):
        grid = OccupancyGrid.create(3, 2)
        assert not grid.is_free(0, 2)
        assert not grid.is_free(-1, 0)

    def test_columns_past_width_are_free(self):
        grid = OccupancyGrid.create(1, 1)
        assert grid.is_free(5, 0)

    def test_span_blocks_both_orders(self):
        grid = OccupancyGrid.create(4, 1)
        grid.mark_span_blocked(0, 2, 0)
        assert [grid.is_free(c, 0) for c in range(4)] == [False, False, False, True]

    def test_span_grows_grid(self):
        grid = OccupancyGrid.create(1, 1)
        grid.mark_span_blocked(0, 3, 3)
        assert grid.width == 4
        assert not grid.is_free(3, 0)

    def test_lowest_free_column(self):
        grid = OccupancyGrid.create(3, 3)
        grid.mark_blocked(0, 0)
        grid.mark_blocked(2, 1)
        assert grid.lowest_free_column(0, 2) == 2
        assert grid.lowest_free_column(1, 1) == 0

    def test_from_layout_blocks_rows_and_diagonals(self):
        """Vertices, passing lanes and both ends of a diagonal are blocked."""
        grid = OccupancyGrid.from_layout(feature_branch())
        assert not grid.is_free(0, 0)
        assert grid.is_free(1, 0)
        assert not grid.is_free(0, 1) and not grid.is_free(1, 1)
        assert not grid.is_free(1, 2)


# ─── Merge Preview Tests ──────────────────────────────────────────────────────


class TestMergePreview:
    def test_rows_are_shared_unchanged(self):
        """The preview adds one row in front; base rows follow as the same objects."""
        base = feature_branch()
        before = base.to_dict()
        result = MergePreviewOverlay(base).apply(["F"])

        assert len(result.rows) == len(base.rows) + 1
        assert all(a is b for a, b in zip(result.rows[1:], base.rows))
        assert result.commit_ids == [MERGE_PREVIEW_ID, "T", "F", "A"]
        assert base.to_dict() == before
        assert base.first_row == 0

    def test_preview_row_flags(self):
        result = MergePreviewOverlay(feature_branch()).apply(["F"])
        preview = result.rows[0]
        assert preview.is_merge_preview
        assert preview.is_merge
        assert not preview.is_committed
        assert preview.has_parents and not preview.has_children
        assert (preview.column, preview.color) == (0, 0)
        assert result.first_row == -1
        assert result.has_merge_preview

    def test_tip_connection_not_flagged(self):
        """The line down to the tip is a plain uncommitted line."""
        result = MergePreviewOverlay(feature_branch()).apply(["F"])
        tip_line = result.rows[0].outgoing_lines[0]
        assert tip_line == LineSegment(0, 0, -1, 0, 0, False)
        assert result.overlay_incoming[0][0] is tip_line

    def test_head_routed_through_free_column(self):
        """The line to F runs down a free column and bends into F's row."""
        result = MergePreviewOverlay(feature_branch()).apply(["F"])
        head_line = result.rows[0].outgoing_lines[1]
        assert head_line.is_merge_preview
        assert head_line.kind is EdgeKind.MergePreview
        assert (head_line.from_row, head_line.to_row, head_line.to_column) == (-1, 0, 1)
        assert result.overlay_passing == {0: [PassingLane(1, 1, False, True)]}
        (into_f,) = result.overlay_incoming[1]
        assert (into_f.from_row, into_f.from_column, into_f.to_row, into_f.to_column) == (0, 1, 1, 1)
        assert into_f.is_merge_preview
        assert result.max_columns == 2

    def test_head_on_first_row_is_direct(self):
        """A head right under the preview gets one direct line, no lane."""
        base = lay(("F", "A"), ("T", "A"), ("A",), head_id="T")
        result = MergePreviewOverlay(base).apply(["F"])
        direct = [seg for seg in result.rows[0].outgoing_lines if seg.is_merge_preview]
        assert len(direct) == 1
        assert (direct[0].to_row, direct[0].to_column) == (0, 0)

    def test_tip_defaults_to_first_row(self):
        base = lay(("T", "A"), ("F", "A"), ("A",))
        result = MergePreviewOverlay(base).apply(["F"])
        assert result.rows[0].outgoing_lines[0].to_column == 0

    def test_explicit_tip(self):
        base = lay(("T", "A"), ("F", "A"), ("A",))
        result = MergePreviewOverlay(base).apply(["T"], tip_id="F")
        assert (result.rows[0].column, result.rows[0].color) == (1, 1)

    def test_unresolved_head_leaves_viewport(self):
        """A head outside the window gets a lane down every row and a dangling end."""
        base = lay(("B", "A"))
        result = MergePreviewOverlay(base).apply(["A"])
        assert result.overlay_passing[0][0].column == 1
        (tail,) = result.overlay_outgoing[0]
        assert tail.is_dangling and tail.is_merge_preview

    def test_duplicate_heads_and_tip_ignored(self):
        result = MergePreviewOverlay(feature_branch()).apply(["F", "T", "F"])
        assert len(result.rows[0].outgoing_lines) == 2

    def test_no_heads(self):
        """With no heads the preview row is a plain child of the tip, not a merge."""
        result = MergePreviewOverlay(feature_branch()).apply([])
        assert not result.rows[0].is_merge
        assert len(result.rows[0].outgoing_lines) == 1

    def test_unknown_head_raises(self):
        base = feature_branch()
        with pytest.raises(UnknownHeadError) as excinfo:
            MergePreviewOverlay(base).apply(["F", "nope"])
        assert excinfo.value.head_id == "nope"
        assert len(base.rows) == 3

    def test_unknown_tip_raises(self):
        with pytest.raises(UnknownHeadError):
            MergePreviewOverlay(feature_branch()).apply(["F"], tip_id="nope")

    def test_second_preview_rejected(self):
        once = MergePreviewOverlay(feature_branch()).apply(["F"])
        with pytest.raises(GraphLayoutError):
            MergePreviewOverlay(once).apply(["F"])

    def test_viewport_covers_overlay(self):
        result = MergePreviewOverlay(feature_branch()).apply(["F"])
        columns = [lane.column for lanes in result.overlay_passing.values() for lane in lanes]
        assert all(col < result.max_columns for col in columns)

    def test_to_dict_includes_overlays(self):
        data = MergePreviewOverlay(feature_branch()).apply(["F"]).to_dict()
        assert data["firstRow"] == -1
        assert data["rows"][0]["isMergePreview"] is True
        assert data["overlayPassing"]["0"][0]["isMergePreview"] is True
