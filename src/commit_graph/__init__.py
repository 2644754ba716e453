"""commit-graph: lane layout for commit history graphs, with a text renderer."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from commit_graph.config import LayoutConfig, RenderConfig
from commit_graph.errors import GraphLayoutError, MalformedHistoryError, UnknownHeadError
from commit_graph.ir.history import CommitRecord, with_uncommitted_changes
from commit_graph.layout import (
    GraphLayoutEngine,
    LayoutResult,
    MergePreviewOverlay,
    full_layout,
    get_max_columns,
)
from commit_graph.renderers.text import TextRenderer

__all__ = [
    "CommitRecord",
    "GraphLayoutEngine",
    "GraphLayoutError",
    "LayoutConfig",
    "LayoutResult",
    "MalformedHistoryError",
    "MergePreviewOverlay",
    "RenderConfig",
    "TextRenderer",
    "UnknownHeadError",
    "compute_layout",
    "full_layout",
    "get_max_columns",
    "preview_merge",
    "render_history",
]


def compute_layout(
    commits: Iterable[CommitRecord],
    head_id: str | None = None,
    config: LayoutConfig | None = None,
) -> LayoutResult:
    """Lay out commits given newest first.

    Args:
        commits: Commit records in ancestors-after-descendants order.
        head_id: Commit to flag as the current HEAD; None keeps record flags.
        config: Layout options; defaults to an 8-color palette, lenient mode.

    Returns:
        The per-row layout together with its required column count.

    Raises:
        MalformedHistoryError: In strict mode, if a parent is not below its child.
    """
    return full_layout(commits, head_id=head_id, config=config)


def preview_merge(layout: LayoutResult, heads: Iterable[str], tip_id: str | None = None) -> LayoutResult:
    """Return ``layout`` with a merge-preview row for ``heads`` in front.

    Raises:
        UnknownHeadError: If a head is not present in the layout.
    """
    return MergePreviewOverlay(layout).apply(heads, tip_id=tip_id)


def render_history(
    commits: Sequence[CommitRecord],
    unicode: bool = True,
    head_id: str | None = None,
    merge_heads: Sequence[str] = (),
    uncommitted: bool = False,
) -> str:
    """Lay out commits and render them as a text graph.

    Args:
        commits: Commit records, newest first.
        unicode: True for Unicode glyphs; False for ASCII fallback.
        head_id: Current HEAD. Required for ``uncommitted``.
        merge_heads: Branch heads to draw a merge preview for; empty for none.
        uncommitted: Add a working-tree row above HEAD.

    Returns:
        The rendered text, or empty string if there are no commits.

    Raises:
        ValueError: If ``uncommitted`` is set without a ``head_id``.
        UnknownHeadError: If a merge head is not present in the history.
    """
    records = list(commits)
    if uncommitted:
        if head_id is None:
            raise ValueError("an uncommitted row needs a head_id to attach to")
        records = with_uncommitted_changes(records, head_id)
    layout = compute_layout(records, head_id=head_id)
    if merge_heads:
        layout = preview_merge(layout, merge_heads)
    subjects = {rec.id: rec.subject for rec in records if rec.subject}
    return TextRenderer(RenderConfig(unicode=unicode)).render(layout, subjects)
