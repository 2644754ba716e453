"""Layout engine: drives the row resolver over a whole commit sequence."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace

from commit_graph.config import LayoutConfig
from commit_graph.errors import Diagnostic, MalformedHistoryError
from commit_graph.ir.graph import CommitGraphModel
from commit_graph.ir.history import CommitRecord, mark_current
from commit_graph.layout.resolver import LayoutState, RowResolver
from commit_graph.layout.types import LayoutResult, RowGraphData, get_max_columns

logger = logging.getLogger(__name__)


class GraphLayoutEngine:
    """Lays out an ordered (newest first) commit sequence row by row.

    ``layout`` is a pure function of its arguments: it never mutates the
    records or a checkpoint it is given, and keeps no state between calls.
    """

    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or LayoutConfig()

    def layout(
        self,
        commits: Iterable[CommitRecord],
        head_id: str | None = None,
        checkpoint: LayoutState | None = None,
        uncommitted_head: str | None = None,
    ) -> LayoutResult:
        """Compute a ``LayoutResult`` for ``commits``.

        Args:
            commits: Records in ancestors-after-descendants order.
            head_id: Commit to flag ``is_current``, in addition to any record
                that already carries the flag.
            checkpoint: State returned by a previous call; rows continue below
                that call's last row. Lines leaving that last row towards a
                commit of this window were drawn straight down; the first
                row's incoming lines carry them bent onto their commit.
            uncommitted_head: Seed a working-tree lane awaiting this commit.

        Raises:
            MalformedHistoryError: In strict mode, when a parent is not below
                its child.
        """
        records = mark_current(list(commits), head_id)
        model = CommitGraphModel.from_records(records)

        if self.config.strict and model.violations:
            raise MalformedHistoryError(model.violations)

        if checkpoint is not None:
            state = checkpoint.copy()
        else:
            state = LayoutState.fresh(self.config.palette_size)
        offset = state.next_row

        if uncommitted_head is not None:
            state.seed_uncommitted(uncommitted_head)

        resolver = RowResolver(model, self.config)
        rows: list[RowGraphData] = []
        for vertex in model:
            next_id = model.vertex(vertex.row + 1).id if vertex.row + 1 < len(model) else None
            rows.append(resolver.resolve(state, vertex, next_id))

        unresolved = dict(resolver.unresolved)
        for lane in state.lanes.live():
            unresolved.setdefault(lane.awaited_id, lane.column)

        diagnostics: list[Diagnostic] = [
            replace(v, row=v.row + offset, parent_row=v.parent_row + offset) for v in model.violations
        ]
        diagnostics.extend(replace(d, row=d.row + offset) for d in model.dangling)

        logger.debug("laid out %d rows (%d unresolved parents)", len(rows), len(unresolved))
        return LayoutResult(
            rows=rows,
            commit_ids=[v.id for v in model],
            max_columns=get_max_columns(rows),
            diagnostics=diagnostics,
            unresolved=unresolved,
            checkpoint=state.copy(),
            first_row=offset,
            heads=model.heads(),
        )


def full_layout(
    commits: Iterable[CommitRecord],
    head_id: str | None = None,
    config: LayoutConfig | None = None,
) -> LayoutResult:
    """Run the layout pipeline with a fresh engine."""
    return GraphLayoutEngine(config).layout(commits, head_id=head_id)
