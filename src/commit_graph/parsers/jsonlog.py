"""Parser for JSON commit lists.

Accepts either a bare list of commit objects or an object of the form
``{"commits": [...], "head": "<id>"}``. Commit objects use the field names of
common git front-ends: ``id``/``oid``/``hash`` for the commit,
``parents``/``parentIds``/``parentOids`` for its parents, optional
``isCommitted``, ``isCurrent`` and ``subject``/``summary``.
"""

from __future__ import annotations

import json
from typing import Any

from commit_graph.ir.history import CommitRecord
from commit_graph.parsers.base import ParsedHistory

_ID_KEYS = ("id", "oid", "hash")
_PARENT_KEYS = ("parents", "parentIds", "parentOids")
_SUBJECT_KEYS = ("subject", "summary")


def _first(obj: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in obj:
            return obj[key]
    return None


class JsonLogParser:
    def parse(self, src: str) -> ParsedHistory:
        try:
            data = json.loads(src)
        except json.JSONDecodeError as e:
            raise ValueError(f"invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}") from e

        head_id = None
        if isinstance(data, dict):
            head_id = data.get("head")
            if head_id is not None and not isinstance(head_id, str):
                raise ValueError("'head' must be a commit id string")
            data = data.get("commits")
        if not isinstance(data, list):
            raise ValueError("expected a list of commits or an object with a 'commits' list")

        records = [self._parse_commit(obj, i) for i, obj in enumerate(data)]
        return ParsedHistory(records=records, head_id=head_id)

    def _parse_commit(self, obj: Any, index: int) -> CommitRecord:
        if not isinstance(obj, dict):
            raise ValueError(f"commit {index}: expected an object, got {type(obj).__name__}")

        commit_id = _first(obj, _ID_KEYS)
        if not isinstance(commit_id, str) or not commit_id:
            raise ValueError(f"commit {index}: missing commit id (one of {', '.join(_ID_KEYS)})")

        parents = _first(obj, _PARENT_KEYS) or []
        if not isinstance(parents, list) or not all(isinstance(p, str) for p in parents):
            raise ValueError(f"commit {index} ({commit_id}): parents must be a list of ids")

        subject = _first(obj, _SUBJECT_KEYS) or ""
        return CommitRecord(
            id=commit_id,
            parent_ids=tuple(parents),
            is_committed=bool(obj.get("isCommitted", True)),
            is_current=bool(obj.get("isCurrent", False)),
            subject=str(subject),
        )
