"""Renderers for computed commit-graph layouts."""

from commit_graph.renderers.base import Renderer
from commit_graph.renderers.canvas import Canvas
from commit_graph.renderers.charset import CharSet, GraphChars
from commit_graph.renderers.text import TextRenderer

__all__ = ["Canvas", "CharSet", "GraphChars", "Renderer", "TextRenderer"]
