r"""Parser for plain ``git log`` / ``git rev-list --parents`` output.

Two line shapes are accepted:

    <hash>\t<parent hashes>\t<subject>    git log --format='%H%x09%P%x09%s'
    <hash> <parent> <parent> ...          git rev-list --parents HEAD

Blank lines and lines starting with ``#`` are ignored.
"""

from __future__ import annotations

import re

from commit_graph.ir.history import CommitRecord
from commit_graph.parsers.base import ParsedHistory

_ID_RE = re.compile(r"[^\s]+")


class GitLogParser:
    def parse(self, src: str) -> ParsedHistory:
        records: list[CommitRecord] = []
        for lineno, raw in enumerate(src.splitlines(), start=1):
            line = raw.rstrip("\r")
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            records.append(self._parse_line(line, lineno))
        return ParsedHistory(records=records)

    def _parse_line(self, line: str, lineno: int) -> CommitRecord:
        if "\t" in line:
            fields = line.split("\t", 2)
            commit_id = fields[0].strip()
            parents = fields[1].split() if len(fields) > 1 else []
            subject = fields[2].strip() if len(fields) > 2 else ""
        else:
            commit_id, *parents = line.split()
            subject = ""

        if not _ID_RE.fullmatch(commit_id):
            raise ValueError(f"line {lineno}: expected a commit id, got {line!r}")
        return CommitRecord(id=commit_id, parent_ids=tuple(parents), subject=subject)
