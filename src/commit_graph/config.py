"""Centralized configuration for commit-graph."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PALETTE_SIZE = 8


@dataclass
class LayoutConfig:
    """Configuration for the layout pass."""

    palette_size: int | None = DEFAULT_PALETTE_SIZE
    strict: bool = False
    open_ended: bool = False

    def __post_init__(self) -> None:
        if self.palette_size is not None and self.palette_size < 1:
            raise ValueError(f"palette_size must be positive, got {self.palette_size}")


@dataclass
class RenderConfig:
    """Configuration for the text renderer."""

    unicode: bool = True
    show_ids: bool = True
    id_length: int = 7
    show_subjects: bool = True
