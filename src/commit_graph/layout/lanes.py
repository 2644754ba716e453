"""Lane bookkeeping for the row-by-row layout pass.

A lane is a vertical track reserved for a commit that has been referenced as a
parent but not yet reached. ``LaneTable`` keeps lanes in an arena indexed by
slot and keeps the free columns sorted, so the lowest one is always reused
first.
"""

from __future__ import annotations

import bisect
import logging
from collections import defaultdict
from dataclasses import dataclass, replace

from commit_graph.config import DEFAULT_PALETTE_SIZE

logger = logging.getLogger(__name__)


class ColorAllocator:
    """Hands out lane colors, recycling released ones before minting new ones.

    With a bounded palette, new colors wrap around ``counter % palette_size``.
    Pass ``palette_size=None`` to get distinct integers forever.
    """

    def __init__(self, palette_size: int | None = DEFAULT_PALETTE_SIZE) -> None:
        self.palette_size = palette_size
        self.counter = 0
        self.free: list[int] = []

    def allocate(self) -> int:
        if self.free:
            return self.free.pop()
        color = self.counter
        self.counter += 1
        if self.palette_size is not None:
            color %= self.palette_size
        return color

    def release(self, color: int) -> None:
        if color not in self.free:
            self.free.append(color)

    def copy(self) -> ColorAllocator:
        other = ColorAllocator(self.palette_size)
        other.counter = self.counter
        other.free = list(self.free)
        return other


@dataclass
class Lane:
    slot: int
    column: int
    color: int
    awaited_id: str
    is_committed: bool = True


class LaneTable:
    """Live lanes plus an index from awaited commit id to the lanes awaiting it."""

    def __init__(self) -> None:
        self._lanes: list[Lane | None] = []
        self._free_slots: list[int] = []
        self._free_columns: list[int] = []
        self._width = 0
        self._awaiting: defaultdict[str, list[int]] = defaultdict(list)

    def __len__(self) -> int:
        return sum(1 for lane in self._lanes if lane is not None)

    def __getitem__(self, slot: int) -> Lane:
        lane = self._lanes[slot] if 0 <= slot < len(self._lanes) else None
        if lane is None:
            raise KeyError(f"lane slot {slot} is not live")
        return lane

    def lowest_free_column(self) -> int:
        """Column the next ``spawn`` will take."""
        if self._free_columns:
            return self._free_columns[0]
        return self._width

    def find_lanes_awaiting(self, commit_id: str) -> list[Lane]:
        """Every lane waiting for ``commit_id``, leftmost first."""
        lanes = [self[slot] for slot in self._awaiting.get(commit_id, ())]
        lanes.sort(key=lambda lane: lane.column)
        return lanes

    def find_lane_awaiting(self, commit_id: str) -> Lane | None:
        lanes = self.find_lanes_awaiting(commit_id)
        return lanes[0] if lanes else None

    def spawn(self, awaited_id: str, is_committed: bool, color: int) -> Lane:
        """Open a lane at the lowest free column."""
        column = self.lowest_free_column()
        if column == self._width:
            self._width += 1
        else:
            self._free_columns.pop(0)

        slot = self._free_slots.pop() if self._free_slots else len(self._lanes)
        lane = Lane(slot=slot, column=column, color=color, awaited_id=awaited_id, is_committed=is_committed)
        if slot == len(self._lanes):
            self._lanes.append(lane)
        else:
            self._lanes[slot] = lane
        self._awaiting[awaited_id].append(slot)
        logger.debug("spawn lane %d at column %d for %s (color %d)", slot, column, awaited_id, color)
        return lane

    def retire(self, lane: Lane) -> None:
        """Close a lane and free its column."""
        self._unindex(lane)
        self._lanes[lane.slot] = None
        self._free_slots.append(lane.slot)
        bisect.insort(self._free_columns, lane.column)
        logger.debug("retire lane %d at column %d", lane.slot, lane.column)

    def reassign(self, lane: Lane, awaited_id: str, is_committed: bool | None = None) -> None:
        """Point a live lane at a new commit. Column and color stay."""
        self._unindex(lane)
        lane.awaited_id = awaited_id
        if is_committed is not None:
            lane.is_committed = is_committed
        self._awaiting[awaited_id].append(lane.slot)

    def live(self) -> list[Lane]:
        """Every live lane, ordered by column."""
        lanes = [lane for lane in self._lanes if lane is not None]
        lanes.sort(key=lambda lane: lane.column)
        return lanes

    def copy(self) -> LaneTable:
        other = LaneTable()
        other._lanes = [None if lane is None else replace(lane) for lane in self._lanes]
        other._free_slots = list(self._free_slots)
        other._free_columns = list(self._free_columns)
        other._width = self._width
        other._awaiting = defaultdict(list, {k: list(v) for k, v in self._awaiting.items()})
        return other

    def _unindex(self, lane: Lane) -> None:
        slots = self._awaiting.get(lane.awaited_id)
        if not slots or lane.slot not in slots:
            return
        slots.remove(lane.slot)
        if not slots:
            del self._awaiting[lane.awaited_id]
