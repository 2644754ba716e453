"""Parser registry: detect the input format and dispatch to the right parser."""

from __future__ import annotations

from commit_graph.parsers.base import ParsedHistory, Parser
from commit_graph.parsers.gitlog import GitLogParser
from commit_graph.parsers.jsonlog import JsonLogParser


def detect_type(src: str) -> str:
    """Detect the history format from source text. Returns 'json' or 'gitlog'."""
    stripped = src.lstrip()
    if stripped.startswith(("[", "{")):
        return "json"
    return "gitlog"


_PARSERS: dict[str, type[Parser]] = {
    "gitlog": GitLogParser,
    "json": JsonLogParser,
}


def parse(src: str) -> ParsedHistory:
    """Auto-detect the format and parse to commit records."""
    history_type = detect_type(src)
    parser_cls = _PARSERS.get(history_type)
    if parser_cls is None:
        raise ValueError(f"Unsupported history format: {history_type}")
    return parser_cls().parse(src)


__all__ = ["GitLogParser", "JsonLogParser", "ParsedHistory", "Parser", "detect_type", "parse"]
