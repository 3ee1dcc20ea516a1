"""Edge-crossing counts over straight center-to-center segments.

Edges are ``(source, target)`` id pairs; only their endpoint centers matter.
Two edges that share an endpoint never count as crossing, even when they
overlap collinearly.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from kg_autolayout.geometry import segments_properly_cross
from kg_autolayout.types import Point

Edge = tuple[str, str]


def edges_share_endpoint(a: Edge, b: Edge) -> bool:
    return a[0] == b[0] or a[0] == b[1] or a[1] == b[0] or a[1] == b[1]


def _edges_cross(a: Edge, b: Edge, centers: Mapping[str, Point]) -> bool:
    if edges_share_endpoint(a, b):
        return False
    a1 = centers.get(a[0])
    a2 = centers.get(a[1])
    b1 = centers.get(b[0])
    b2 = centers.get(b[1])
    if a1 is None or a2 is None or b1 is None or b2 is None:
        return False
    return segments_properly_cross(a1, a2, b1, b2)


def count_edge_crossings(centers: Mapping[str, Point], edges: Sequence[Edge]) -> int:
    """Count properly crossing pairs among ``edges``.

    O(E²) over the edge list; callers pass the edges of a single component.
    Edges with an endpoint missing from ``centers`` are ignored.
    """
    crossings = 0
    for i in range(len(edges)):
        a = edges[i]
        for j in range(i + 1, len(edges)):
            if _edges_cross(a, edges[j], centers):
                crossings += 1
    return crossings


def build_incident_edge_index(edges: Sequence[Edge]) -> dict[str, list[int]]:
    """Map node id → indices of the edges touching it."""
    incident: dict[str, list[int]] = {}
    for index, (source, target) in enumerate(edges):
        incident.setdefault(source, []).append(index)
        incident.setdefault(target, []).append(index)
    return incident


def count_marked_crossings(
    edges: Sequence[Edge],
    centers: Mapping[str, Point],
    affected: Sequence[int],
    is_affected: bytearray,
) -> int:
    """Count crossings that involve at least one affected edge.

    ``affected`` lists edge indices and ``is_affected[i]`` is 1 exactly for
    those indices. Pairs are counted as affected × unaffected plus
    affected × affected (i < j), which is the part of the full count that can
    change when only the affected edges move. Cost is O(len(affected) · E).
    """
    if not affected:
        return 0

    crossings = 0

    for idx in affected:
        a = edges[idx]
        for j, b in enumerate(edges):
            if is_affected[j]:
                continue
            if _edges_cross(a, b, centers):
                crossings += 1

    for i in range(len(affected)):
        a = edges[affected[i]]
        for j in range(i + 1, len(affected)):
            if _edges_cross(a, edges[affected[j]], centers):
                crossings += 1

    return crossings
