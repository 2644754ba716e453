"""Per-row lane resolution.

``RowResolver.resolve`` turns one commit vertex into one ``RowGraphData``. All
mutable state lives in the ``LayoutState`` passed in, so a pass can be stopped
after any row, its state copied, and resumed later with more rows.

Per row r with vertex v:

1. Lanes awaiting v: the leftmost becomes v's lane, the others converge into
   v and retire. With none, v opens a fresh lane at the lowest free column.
2. Incoming lines: the segments carried from row r-1, plus one for each
   awaiting lane that passed through row r-1 without a segment. A carried
   segment whose lane awaits v but ends off v's column was drawn before v
   was known (the last row of a previous window); it is bent onto v here.
3. Parents: the first parent keeps v's lane; each further parent joins a lane
   already awaiting it or spawns a new one. Parents that cannot be laid out
   (missing from the window, or not below v) get a dangling segment instead.
4. Outgoing lines run to row r+1, landing on the next vertex's column when
   the lane awaits it.
5. Every other live lane is a passing lane.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from commit_graph.config import LayoutConfig
from commit_graph.ir.graph import CommitGraphModel, CommitVertex
from commit_graph.layout.lanes import ColorAllocator, Lane, LaneTable
from commit_graph.layout.types import LineSegment, PassingLane, RowGraphData
from commit_graph.types import EdgeKind, ParentStatus

logger = logging.getLogger(__name__)


@dataclass
class LayoutState:
    """Everything a layout pass carries from one row to the next."""

    lanes: LaneTable = field(default_factory=LaneTable)
    colors: ColorAllocator = field(default_factory=ColorAllocator)
    next_row: int = 0
    # colors of lanes retired on the previous row, reusable from this row on
    pending_release: list[int] = field(default_factory=list)
    # lane slot -> column its segment from the previous row lands on
    arrivals: dict[int, int] = field(default_factory=dict)
    # previous row's outgoing segments that end on next_row
    carried: list[LineSegment] = field(default_factory=list)
    # (lane slot, parent index) feeding each carried segment
    carried_targets: list[tuple[int, int]] = field(default_factory=list)
    has_previous: bool = False

    @classmethod
    def fresh(cls, palette_size: int | None) -> LayoutState:
        return cls(colors=ColorAllocator(palette_size))

    def seed_uncommitted(self, head_id: str) -> Lane:
        """Open an uncommitted working-tree lane that flows into ``head_id`` from above."""
        lane = self.lanes.spawn(head_id, is_committed=False, color=self.colors.allocate())
        self.has_previous = True
        return lane

    def copy(self) -> LayoutState:
        return LayoutState(
            lanes=self.lanes.copy(),
            colors=self.colors.copy(),
            next_row=self.next_row,
            pending_release=list(self.pending_release),
            arrivals=dict(self.arrivals),
            carried=list(self.carried),
            carried_targets=list(self.carried_targets),
            has_previous=self.has_previous,
        )


class RowResolver:
    """Resolves one row at a time against a ``LayoutState``."""

    def __init__(self, model: CommitGraphModel, config: LayoutConfig | None = None) -> None:
        self.model = model
        self.config = config or LayoutConfig()
        self.unresolved: dict[str, int] = {}

    def resolve(self, state: LayoutState, vertex: CommitVertex, next_id: str | None = None) -> RowGraphData:
        lanes = state.lanes
        row = state.next_row

        for color in state.pending_release:
            state.colors.release(color)
        state.pending_release = []

        # ── Vertex lane ──────────────────────────────────────────────────────
        awaiting = lanes.find_lanes_awaiting(vertex.id)
        has_children = bool(awaiting)
        if awaiting:
            home, converging = awaiting[0], awaiting[1:]
        else:
            home = lanes.spawn(vertex.id, vertex.is_committed, state.colors.allocate())
            converging = []
        column, color = home.column, home.color

        incoming = self._settle_carried(state, awaiting, column)
        if state.has_previous:
            for lane in awaiting:
                if state.arrivals.get(lane.slot) == column:
                    continue
                incoming.append(
                    LineSegment(
                        from_column=lane.column,
                        to_column=column,
                        from_row=row - 1,
                        to_row=row,
                        color=lane.color,
                        is_committed=lane.is_committed,
                        kind=EdgeKind.Straight if lane.column == column else EdgeKind.Branch,
                    )
                )

        for lane in converging:
            lanes.retire(lane)
            state.pending_release.append(lane.color)

        # ── Parents ──────────────────────────────────────────────────────────
        touched: set[int] = set()
        # (lane, parent index) for every connector that continues into a lane
        targets: list[tuple[Lane, int]] = []
        dangling: list[LineSegment] = []

        if not vertex.parent_ids:
            lanes.retire(home)
            state.pending_release.append(home.color)

        for index, parent_id in enumerate(vertex.parent_ids):
            if not self._can_follow(vertex, parent_id):
                if index == 0:
                    lanes.retire(home)
                    state.pending_release.append(home.color)
                    dangling_color = home.color
                else:
                    dangling_color = state.colors.allocate()
                    state.pending_release.append(dangling_color)
                dangling.append(self._dangling(vertex, parent_id, row, column, dangling_color))
                continue

            if index == 0:
                lanes.reassign(home, parent_id, is_committed=vertex.is_committed)
                touched.add(home.slot)
                targets.append((home, index))
                continue

            existing = lanes.find_lane_awaiting(parent_id)
            if existing is not None:
                # joins a lane that keeps passing through this row
                targets.append((existing, index))
                continue

            spawned = lanes.spawn(parent_id, vertex.is_committed, state.colors.allocate())
            touched.add(spawned.slot)
            targets.append((spawned, index))

        # ── Outgoing ─────────────────────────────────────────────────────────
        next_lane = lanes.find_lane_awaiting(next_id) if next_id is not None else None
        next_column = next_lane.column if next_lane is not None else None

        outgoing: list[LineSegment] = []
        arrivals: dict[int, int] = {}
        for lane, index in targets:
            to_column = next_column if lane.awaited_id == next_id else lane.column
            if lane.slot in touched:
                arrivals[lane.slot] = to_column
            outgoing.append(
                LineSegment(
                    from_column=column,
                    to_column=to_column,
                    from_row=row,
                    to_row=row + 1,
                    color=lane.color,
                    is_committed=lane.is_committed if lane.slot in touched else vertex.is_committed,
                    kind=_edge_kind(column, to_column, index),
                )
            )

        passing = [
            PassingLane(column=lane.column, color=lane.color, is_committed=lane.is_committed)
            for lane in lanes.live()
            if lane.slot not in touched
        ]

        state.arrivals = arrivals
        state.carried = list(outgoing)
        state.carried_targets = [(lane.slot, index) for lane, index in targets]
        state.has_previous = True
        state.next_row = row + 1

        return RowGraphData(
            column=column,
            color=color,
            is_committed=vertex.is_committed,
            is_current=vertex.is_current,
            is_merge=vertex.is_merge,
            has_children=has_children,
            has_parents=vertex.has_parents,
            passing_lanes=passing,
            incoming_lines=incoming,
            outgoing_lines=outgoing + dangling,
        )

    def _settle_carried(self, state: LayoutState, awaiting: list[Lane], column: int) -> list[LineSegment]:
        awaiting_slots = {lane.slot for lane in awaiting}
        incoming: list[LineSegment] = []
        for seg, (slot, index) in zip(state.carried, state.carried_targets, strict=True):
            if slot in awaiting_slots and seg.to_column != column:
                seg = replace(seg, to_column=column, kind=_edge_kind(seg.from_column, column, index))
                if slot in state.arrivals:
                    state.arrivals[slot] = column
                logger.debug("row %d: carried line from column %d bent onto %d", seg.to_row, seg.from_column, column)
            incoming.append(seg)
        return incoming

    def _can_follow(self, vertex: CommitVertex, parent_id: str) -> bool:
        status = self.model.parent_status(vertex.row, parent_id)
        if status is ParentStatus.Resolved:
            return True
        if status is ParentStatus.Missing and self.config.open_ended:
            return True
        return False

    def _dangling(self, vertex: CommitVertex, parent_id: str, row: int, column: int, color: int) -> LineSegment:
        logger.debug("row %d: %s -> %s leaves the window", row, vertex.id, parent_id)
        self.unresolved.setdefault(parent_id, column)
        return LineSegment(
            from_column=column,
            to_column=column,
            from_row=row,
            to_row=None,
            color=color,
            is_committed=vertex.is_committed,
            kind=EdgeKind.Straight,
        )


def _edge_kind(from_column: int, to_column: int, index: int) -> EdgeKind:
    if from_column == to_column:
        return EdgeKind.Straight
    if index >= 1:
        return EdgeKind.Merge
    return EdgeKind.Branch
