"""Character sets for drawing the commit graph gutter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from commit_graph.layout.types import RowGraphData


class CharSet(Enum):
    Unicode = "unicode"
    Ascii = "ascii"


@dataclass
class GraphChars:
    commit: str
    uncommitted: str
    current: str
    merge_preview: str
    vertical: str
    dashed_vertical: str
    fill: str
    down_right: str
    down_left: str

    @classmethod
    def unicode(cls) -> GraphChars:
        return cls(
            commit="●",
            uncommitted="○",
            current="◉",
            merge_preview="◎",
            vertical="│",
            dashed_vertical="┊",
            fill="_",
            down_right="\\",
            down_left="/",
        )

    @classmethod
    def ascii(cls) -> GraphChars:
        return cls(
            commit="*",
            uncommitted="o",
            current="@",
            merge_preview="M",
            vertical="|",
            dashed_vertical=":",
            fill="_",
            down_right="\\",
            down_left="/",
        )

    @classmethod
    def for_charset(cls, cs: CharSet) -> GraphChars:
        if cs == CharSet.Unicode:
            return cls.unicode()
        return cls.ascii()

    def vertex(self, row: RowGraphData) -> str:
        if row.is_merge_preview:
            return self.merge_preview
        if row.is_current:
            return self.current
        if not row.is_committed:
            return self.uncommitted
        return self.commit

    def line(self, is_committed: bool) -> str:
        return self.vertical if is_committed else self.dashed_vertical
