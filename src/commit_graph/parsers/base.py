"""Base parser protocol."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from commit_graph.ir.history import CommitRecord


@dataclass
class ParsedHistory:
    """Commit records in input order, plus the HEAD id when the input names one."""

    records: list[CommitRecord] = field(default_factory=list)
    head_id: str | None = None

    def __len__(self) -> int:
        return len(self.records)


class Parser(Protocol):
    """Protocol that all history parsers must implement."""

    def parse(self, src: str) -> ParsedHistory:
        """Parse exported history text into commit records."""
        ...
