"""Base renderer protocol."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from commit_graph.layout.types import LayoutResult


class Renderer(Protocol):
    """Protocol that all renderers must implement."""

    def render(self, layout: LayoutResult, subjects: Mapping[str, str] | None = None) -> str:
        """Render a computed layout to an output string."""
        ...
