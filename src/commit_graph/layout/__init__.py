"""Layout engine and public API."""

from __future__ import annotations

from commit_graph.layout.engine import GraphLayoutEngine, full_layout
from commit_graph.layout.lanes import ColorAllocator, Lane, LaneTable
from commit_graph.layout.occupancy import OccupancyGrid
from commit_graph.layout.preview import MergePreviewOverlay
from commit_graph.layout.resolver import LayoutState, RowResolver
from commit_graph.layout.types import (
    MERGE_PREVIEW_ID,
    LayoutResult,
    LineSegment,
    PassingLane,
    RowGraphData,
    get_max_columns,
)

__all__ = [
    "MERGE_PREVIEW_ID",
    "ColorAllocator",
    "GraphLayoutEngine",
    "Lane",
    "LaneTable",
    "LayoutResult",
    "LayoutState",
    "LineSegment",
    "MergePreviewOverlay",
    "OccupancyGrid",
    "PassingLane",
    "RowGraphData",
    "RowResolver",
    "full_layout",
    "get_max_columns",
]
