"""Uniform compaction of a relative layout.

Engines produce generous spacing. Compaction scales all centers toward the
origin (the component's center node) by the smallest factor that keeps every
node rectangle clear of every other, using a spatial hash grid so each node
is only compared with nodes in the cells it covers.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from kg_autolayout.geometry import boxes_overlap
from kg_autolayout.types import NODE_HALF_HEIGHT, NODE_HALF_WIDTH, Point

logger = logging.getLogger(__name__)

# Floor the engines ask for, and the extra clearance around each node.
DEFAULT_MIN_SCALE = 0.35
DEFAULT_PADDING = 10.0

_ABSOLUTE_MIN_SCALE = 0.1
_BISECT_ITERATIONS = 10


@dataclass
class CompactionResult:
    centers: dict[str, Point]
    scale: float


def has_any_node_overlap(
    centers: Mapping[str, Point],
    ids: Sequence[str],
    scale: float,
    padding: float = DEFAULT_PADDING,
) -> bool:
    """True if any two padded node boxes intersect once centers are scaled.

    Each node is bucketed into every grid cell its box touches; before
    inserting, it is tested against the nodes already in those cells.
    """
    half_width = NODE_HALF_WIDTH + padding
    half_height = NODE_HALF_HEIGHT + padding
    cell_size = max(half_width * 2, half_height * 2)

    scaled: dict[str, Point] = {}
    grid: dict[tuple[int, int], list[str]] = {}

    for node_id in ids:
        p = centers.get(node_id)
        if p is None:
            continue
        pos = Point(p.x * scale, p.y * scale)
        scaled[node_id] = pos

        min_cell_x = math.floor((pos.x - half_width) / cell_size)
        max_cell_x = math.floor((pos.x + half_width) / cell_size)
        min_cell_y = math.floor((pos.y - half_height) / cell_size)
        max_cell_y = math.floor((pos.y + half_height) / cell_size)
        cells = [
            (cx, cy) for cx in range(min_cell_x, max_cell_x + 1) for cy in range(min_cell_y, max_cell_y + 1)
        ]

        for cell in cells:
            for other_id in grid.get(cell, ()):
                if boxes_overlap(pos, scaled[other_id], half_width, half_height):
                    return True

        for cell in cells:
            grid.setdefault(cell, []).append(node_id)

    return False


def _scaled(centers: Mapping[str, Point], ids: Sequence[str], scale: float) -> dict[str, Point]:
    result: dict[str, Point] = {}
    for node_id in ids:
        p = centers.get(node_id)
        if p is None:
            continue
        result[node_id] = Point(p.x * scale, p.y * scale)
    return result


def compress_centers(
    centers: Mapping[str, Point],
    ids: Sequence[str],
    min_scale: float = DEFAULT_MIN_SCALE,
    padding: float = DEFAULT_PADDING,
) -> CompactionResult:
    """Shrink ``centers`` uniformly as far as possible without overlap.

    The scale is clamped to ``[0.1, 1]``. If the floor is already
    overlap-free it is used directly; otherwise the largest overlap-free
    scale is bisected between the floor and 1. A layout that overlaps even
    at scale 1 is returned unscaled: compaction never expands.
    """
    safe_min_scale = max(_ABSOLUTE_MIN_SCALE, min(1.0, min_scale))

    if not has_any_node_overlap(centers, ids, safe_min_scale, padding):
        return CompactionResult(centers=_scaled(centers, ids, safe_min_scale), scale=safe_min_scale)

    low = safe_min_scale
    high = 1.0
    for _ in range(_BISECT_ITERATIONS):
        mid = (low + high) / 2
        if has_any_node_overlap(centers, ids, mid, padding):
            low = mid
        else:
            high = mid

    logger.debug("compacted %d nodes to scale %.4f", len(ids), high)
    return CompactionResult(centers=_scaled(centers, ids, high), scale=high)
