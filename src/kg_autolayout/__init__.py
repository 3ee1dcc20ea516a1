"""kg_autolayout — automatic layout for knowledge-graph editors.

Lays out the connected component around a root node (radial rings or BFS
levels), keeps the root anchored, removes node overlap by uniform
compaction and keeps the attempt with the fewest edge crossings.
"""

from __future__ import annotations

from kg_autolayout.apply import AutoLayoutOutcome, apply_positions, auto_layout_from_node
from kg_autolayout.composer import compute_auto_layout_positions
from kg_autolayout.errors import LayoutOptionsError
from kg_autolayout.types import (
    NODE_HALF_HEIGHT,
    NODE_HALF_WIDTH,
    Bounds,
    GraphEdge,
    GraphNode,
    LayoutOptions,
    LayoutResult,
    LayoutStyle,
    Point,
)

__all__ = [
    "NODE_HALF_HEIGHT",
    "NODE_HALF_WIDTH",
    "AutoLayoutOutcome",
    "Bounds",
    "GraphEdge",
    "GraphNode",
    "LayoutOptions",
    "LayoutOptionsError",
    "LayoutResult",
    "LayoutStyle",
    "Point",
    "apply_positions",
    "auto_layout_from_node",
    "compute_auto_layout_positions",
]
