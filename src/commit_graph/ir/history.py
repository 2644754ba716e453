"""Input records supplied by a history provider.

These mirror one line of ``git log`` output: a commit id, its ordered parent
ids, and the per-commit flags the layout copies through to its rows.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace

UNCOMMITTED_ID = "*"


@dataclass(frozen=True)
class CommitRecord:
    id: str
    parent_ids: tuple[str, ...] = field(default_factory=tuple)
    is_committed: bool = True
    is_current: bool = False
    subject: str = ""

    @classmethod
    def new(cls, id: str, *parent_ids: str) -> CommitRecord:
        return cls(id=id, parent_ids=tuple(parent_ids))

    @classmethod
    def uncommitted(cls, head_id: str, subject: str = "Uncommitted changes") -> CommitRecord:
        """The synthetic working-tree entry that sits above HEAD."""
        return cls(id=UNCOMMITTED_ID, parent_ids=(head_id,), is_committed=False, subject=subject)


def with_uncommitted_changes(records: Sequence[CommitRecord], head_id: str) -> list[CommitRecord]:
    """Prepend a working-tree row whose only parent is ``head_id``."""
    return [CommitRecord.uncommitted(head_id), *records]


def mark_current(records: Sequence[CommitRecord], head_id: str | None) -> list[CommitRecord]:
    """Return records with ``is_current`` set on the commit ``head_id`` names."""
    if head_id is None:
        return list(records)
    out: list[CommitRecord] = []
    for rec in records:
        if rec.id == head_id and not rec.is_current:
            rec = replace(rec, is_current=True)
        out.append(rec)
    return out
