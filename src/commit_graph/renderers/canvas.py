"""Canvas: 2D character grid for rendering."""

from __future__ import annotations

from commit_graph.renderers.charset import CharSet, GraphChars


class Canvas:
    """A 2D character grid onto which graph rows and connectors are painted."""

    def __init__(self, width: int, height: int, charset: CharSet) -> None:
        self.width = width
        self.height = height
        self.charset = charset
        self.chars = GraphChars.for_charset(charset)
        self.cells: list[list[str]] = [[" "] * width for _ in range(height)]

    def get(self, col: int, row: int) -> str:
        if 0 <= row < self.height and 0 <= col < self.width:
            return self.cells[row][col]
        return " "

    def set(self, col: int, row: int, c: str) -> None:
        if 0 <= row < self.height and 0 <= col < self.width:
            self.cells[row][col] = c

    def set_if_blank(self, col: int, row: int, c: str) -> None:
        if self.get(col, row) == " ":
            self.set(col, row, c)

    def write_str(self, col: int, row: int, s: str) -> None:
        for i, ch in enumerate(s):
            c = col + i
            if c >= self.width or row >= self.height:
                break
            self.cells[row][c] = ch

    def to_string(self) -> str:
        lines = []
        for row in self.cells:
            line = "".join(row).rstrip()
            lines.append(line)
        out = "\n".join(lines)
        trimmed = out.rstrip("\n")
        return trimmed + "\n"
