"""Layered layout engine — vertical levels by BFS distance from the center.

Phases:
  1. Level assignment (BFS distance)
  2. Seeded initial order per level
  3. Crossing minimisation (barycenter, forward + backward sweeps)
  4. Coordinate assignment (x per level, y centered within the level)
  5. Local search: greedy adjacent swaps scored by incremental crossings
  6. Uniform compaction
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from kg_autolayout.compaction import compress_centers
from kg_autolayout.crossings import build_incident_edge_index, count_edge_crossings, count_marked_crossings
from kg_autolayout.graph import bfs_tree
from kg_autolayout.layout.base import ComponentContext
from kg_autolayout.types import ComponentLayout, Point

logger = logging.getLogger(__name__)

BARYCENTER_ITERATIONS: int = 8
MAX_SWAP_PASSES: int = 24
MIN_SWAP_PASSES: int = 6
MAX_SWAP_ATTEMPTS: int = 2000
SWAP_ATTEMPTS_PER_NODE: int = 40


# ─── Level Assignment ───────────────────────────────────────────────────────


def assign_levels(context: ComponentContext) -> tuple[dict[str, int], list[list[str]]]:
    """Group the component into levels by BFS distance from the center.

    Returns the distance map and the levels (index = distance), each level
    listed in component order.
    """
    distance = bfs_tree(context.center_id, context.adjacency).distance
    max_distance = max((distance[node_id] for node_id in context.component_ids if node_id in distance), default=0)
    levels: list[list[str]] = [[] for _ in range(max_distance + 1)]
    for node_id in context.component_ids:
        d = distance.get(node_id)
        if d is None:
            continue
        levels[d].append(node_id)
    return distance, levels


def seeded_order(ids: Sequence[str], context: ComponentContext, seed: int) -> list[str]:
    """Initial level order for attempt ``seed``.

    Snapshot order, reversed on odd seeds, then rotated left by
    ``seed % len(ids)``.
    """
    ordered = sorted(ids, key=context.order_of)
    if len(ordered) > 1:
        if seed % 2 == 1:
            ordered.reverse()
        offset = seed % len(ordered)
        if offset:
            ordered = ordered[offset:] + ordered[:offset]
    return ordered


# ─── Crossing Minimization (Barycenter) ─────────────────────────────────────


def _barycenter(
    node_id: str,
    context: ComponentContext,
    distance: dict[str, int],
    neighbor_distance: int,
    neighbor_pos: dict[str, int],
) -> float | None:
    """Average position of a node's neighbours in the reference level.

    Returns None if the node has no neighbours there.
    """
    total = 0
    count = 0
    for neighbor_id in context.adjacency.neighbors(node_id):
        if distance.get(neighbor_id) != neighbor_distance:
            continue
        idx = neighbor_pos.get(neighbor_id)
        if idx is None:
            continue
        total += idx
        count += 1
    if count == 0:
        return None
    return total / count


def _sort_by_barycenter(
    level: list[str],
    reference: list[str],
    reference_distance: int,
    context: ComponentContext,
    distance: dict[str, int],
) -> None:
    ref_pos = {node_id: i for i, node_id in enumerate(reference)}

    def key(node_id: str) -> tuple[int, float, int]:
        bary = _barycenter(node_id, context, distance, reference_distance, ref_pos)
        # Nodes with no neighbours in the reference level go last.
        if bary is None:
            return (1, 0.0, context.order_of(node_id))
        return (0, bary, context.order_of(node_id))

    level.sort(key=key)


def minimise_crossings(levels: list[list[str]], context: ComponentContext, distance: dict[str, int]) -> None:
    """Reorder ``levels`` in place with the two-sweep barycenter heuristic."""
    max_distance = len(levels) - 1
    for _ in range(BARYCENTER_ITERATIONS):
        for d in range(1, max_distance + 1):
            if len(levels[d]) > 1:
                _sort_by_barycenter(levels[d], levels[d - 1], d - 1, context, distance)
        for d in range(max_distance - 1, -1, -1):
            if len(levels[d]) > 1:
                _sort_by_barycenter(levels[d], levels[d + 1], d + 1, context, distance)


# ─── Coordinate Assignment ──────────────────────────────────────────────────


def level_y(index: int, count: int, spacing_y: float) -> float:
    """Y of slot ``index`` in a level of ``count`` nodes, centered on 0."""
    return (index - (count - 1) / 2) * spacing_y


def assign_coordinates(levels: list[list[str]], context: ComponentContext) -> dict[str, Point]:
    options = context.options
    spacing_y = options.node_spacing * options.y_scale
    centers: dict[str, Point] = {}
    for d, ids in enumerate(levels):
        x = options.ring_spacing * d * options.x_scale
        count = len(ids)
        for index, node_id in enumerate(ids):
            centers[node_id] = Point(x, level_y(index, count, spacing_y))
    centers.setdefault(context.center_id, Point(0.0, 0.0))
    return centers


# ─── Local Search ───────────────────────────────────────────────────────────


def swap_budget(node_count: int) -> tuple[int, int]:
    """(max passes, max swap attempts) for a component of ``node_count`` nodes."""
    max_passes = min(MAX_SWAP_PASSES, max(MIN_SWAP_PASSES, math.ceil(node_count / 10)))
    max_swaps = min(MAX_SWAP_ATTEMPTS, node_count * SWAP_ATTEMPTS_PER_NODE)
    return max_passes, max_swaps


def reduce_crossings_by_swaps(
    levels: list[list[str]],
    centers: dict[str, Point],
    context: ComponentContext,
    crossings: int,
) -> int:
    """Greedy adjacent-swap descent; mutates ``levels`` and ``centers``.

    A swap of two neighbours in a level is kept only when the crossings that
    involve their incident edges strictly drop; otherwise it is rolled back.
    Returns the new crossing count, which is never higher than ``crossings``.
    """
    edges = context.edges
    options = context.options
    incident = build_incident_edge_index(edges)
    is_affected = bytearray(len(edges))
    max_passes, max_swaps = swap_budget(len(context.component_ids))
    spacing_y = options.node_spacing * options.y_scale
    swaps = 0

    for pass_index in range(max_passes):
        if crossings <= 0:
            break
        improved = False

        for d, ids in enumerate(levels):
            if crossings <= 0:
                break
            if len(ids) <= 1:
                continue
            count = len(ids)
            x = options.ring_spacing * d * options.x_scale

            for i in range(count - 1):
                if crossings <= 0 or swaps >= max_swaps:
                    break
                a_id = ids[i]
                b_id = ids[i + 1]
                a_incident = incident.get(a_id, [])
                b_incident = incident.get(b_id, [])
                if not a_incident and not b_incident:
                    continue

                affected: list[int] = []
                for idx in (*a_incident, *b_incident):
                    if not is_affected[idx]:
                        is_affected[idx] = 1
                        affected.append(idx)

                before = count_marked_crossings(edges, centers, affected, is_affected)

                y_a = level_y(i, count, spacing_y)
                y_b = level_y(i + 1, count, spacing_y)
                ids[i], ids[i + 1] = b_id, a_id
                centers[a_id] = Point(x, y_b)
                centers[b_id] = Point(x, y_a)

                after = count_marked_crossings(edges, centers, affected, is_affected)
                swaps += 1

                if after < before:
                    crossings += after - before
                    improved = True
                else:
                    ids[i], ids[i + 1] = a_id, b_id
                    centers[a_id] = Point(x, y_a)
                    centers[b_id] = Point(x, y_b)

                for idx in affected:
                    is_affected[idx] = 0

        logger.debug("swap pass %d: crossings=%d swaps=%d", pass_index, crossings, swaps)
        if not improved or swaps >= max_swaps:
            break

    return crossings


# ─── Engine ─────────────────────────────────────────────────────────────────


def compute_layered_centers(context: ComponentContext, seed: int) -> ComponentLayout:
    """Lay out one component in BFS levels for attempt ``seed``."""
    distance, levels = assign_levels(context)
    levels = [seeded_order(ids, context, seed) for ids in levels]
    minimise_crossings(levels, context, distance)
    centers = assign_coordinates(levels, context)

    crossings = 0
    if len(context.edges) > 1:
        crossings = count_edge_crossings(centers, context.edges)
    if crossings > 0:
        crossings = reduce_crossings_by_swaps(levels, centers, context, crossings)

    if len(centers) == 1:
        return ComponentLayout(centers=centers, crossings=crossings)

    ordered_ids = [context.center_id] + [node_id for node_id in context.component_ids if node_id != context.center_id]
    compacted = compress_centers(centers, ordered_ids)
    return ComponentLayout(centers=compacted.centers, crossings=crossings)
