"""Geometry primitives: orientation tests, segment crossing, bounding boxes."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

from kg_autolayout.types import NODE_HALF_HEIGHT, NODE_HALF_WIDTH, Bounds, Point

# Cross products with magnitude below this are treated as collinear.
EPSILON = 1e-9


def cross(o: Point, a: Point, b: Point) -> float:
    """2D cross product of (a - o) and (b - o)."""
    return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)


def orientation(a: Point, b: Point, c: Point) -> int:
    """Return 1 for a counter-clockwise turn a→b→c, -1 for clockwise, 0 if collinear."""
    v = cross(a, b, c)
    if abs(v) < EPSILON:
        return 0
    return 1 if v > 0 else -1


def segments_properly_cross(p1: Point, q1: Point, p2: Point, q2: Point) -> bool:
    """True iff segment p1-q1 and segment p2-q2 strictly straddle each other.

    Touching endpoints and collinear overlaps do not count as a crossing.
    """
    o1 = orientation(p1, q1, p2)
    o2 = orientation(p1, q1, q2)
    o3 = orientation(p2, q2, p1)
    o4 = orientation(p2, q2, q1)
    return o1 * o2 < 0 and o3 * o4 < 0


def boxes_overlap(a: Point, b: Point, half_width: float, half_height: float) -> bool:
    """True iff two equally sized boxes centered at ``a`` and ``b`` intersect."""
    return abs(a.x - b.x) < half_width * 2 and abs(a.y - b.y) < half_height * 2


def bounding_box(
    centers: Mapping[str, Point],
    ids: Iterable[str],
    padding: float = 0.0,
    half_width: float = NODE_HALF_WIDTH,
    half_height: float = NODE_HALF_HEIGHT,
) -> Bounds:
    """Bounding box of the node rectangles centered at ``centers[id]``.

    Ids without a center are skipped. With nothing to cover the result is an
    all-zero box (padding is not applied to it).
    """
    min_x = min_y = math.inf
    max_x = max_y = -math.inf

    for node_id in ids:
        p = centers.get(node_id)
        if p is None:
            continue
        min_x = min(min_x, p.x - half_width)
        max_x = max(max_x, p.x + half_width)
        min_y = min(min_y, p.y - half_height)
        max_y = max(max_y, p.y + half_height)

    if not math.isfinite(min_x) or not math.isfinite(min_y):
        return Bounds(0.0, 0.0, 0.0, 0.0)

    return Bounds(
        min_x=min_x - padding,
        max_x=max_x + padding,
        min_y=min_y - padding,
        max_y=max_y + padding,
    )
