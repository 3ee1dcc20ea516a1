"""Placement composer — the entry point of an auto-layout call.

Pipeline:
  1. Find the root's connected component
  2. Best-of-N layout of that component, anchored at the root's center
  3. Optionally lay out every other component and pack them in columns to
     the right of the root component
  4. Convert centers to top-left positions, dropping fixed nodes

"Nothing to do" (unknown root, empty snapshot) is reported as an empty
result, never as an exception.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import networkx as nx

from kg_autolayout.crossings import Edge
from kg_autolayout.geometry import bounding_box, boxes_overlap
from kg_autolayout.graph import (
    all_components,
    build_order_index,
    build_undirected_adjacency,
    choose_component_center,
    component_from_root,
    layout_edges,
)
from kg_autolayout.layout.base import ComponentContext
from kg_autolayout.layout.engine import compute_best_centers
from kg_autolayout.types import (
    NODE_HALF_HEIGHT,
    NODE_HALF_WIDTH,
    GraphEdge,
    GraphNode,
    LayoutOptions,
    LayoutResult,
    Point,
)

logger = logging.getLogger(__name__)

# Clearance around each component's bounding box when packing.
COMPONENT_BOUNDS_PADDING: float = 80.0


@dataclass
class PlacedComponent:
    """A detached component laid out around its own center node."""

    ids: list[str]
    center_id: str
    centers: dict[str, Point]
    crossings: int


# ─── Packing ────────────────────────────────────────────────────────────────


def pack_components(
    placed: dict[str, Point],
    root_ids: Sequence[str],
    components: Sequence[PlacedComponent],
    options: LayoutOptions,
) -> int:
    """Place ``components`` in columns to the right of the root component.

    Writes world centers into ``placed`` and returns the summed crossings.
    A column is filled top to bottom from the root's top edge; the next
    component opens a new column when it would run past the column height
    limit (never for the first component of a column).
    """
    root_bounds = bounding_box(placed, root_ids, COMPONENT_BOUNDS_PADDING)
    column_max_height = max(options.column_max_height, root_bounds.height)

    cursor_x = root_bounds.max_x + options.component_gap
    cursor_y = root_bounds.min_y
    column_width = 0.0
    crossings = 0

    for component in components:
        rel_bounds = bounding_box(component.centers, component.ids, COMPONENT_BOUNDS_PADDING)

        overflows = cursor_y + rel_bounds.height > root_bounds.min_y + column_max_height
        if overflows and cursor_y != root_bounds.min_y:
            cursor_x += column_width + options.component_gap
            cursor_y = root_bounds.min_y
            column_width = 0.0

        offset_x = cursor_x - rel_bounds.min_x
        offset_y = cursor_y - rel_bounds.min_y
        for node_id in component.ids:
            rel = component.centers.get(node_id)
            if rel is None:
                continue
            placed[node_id] = Point(rel.x + offset_x, rel.y + offset_y)

        cursor_y += rel_bounds.height + options.component_gap
        column_width = max(column_width, rel_bounds.width)
        crossings += component.crossings

    return crossings


def _layout_other_components(
    node_ids: Sequence[str],
    root_id: str,
    adjacency: nx.Graph,
    order_index: dict[str, int],
    edges: list[Edge],
    options: LayoutOptions,
) -> list[PlacedComponent]:
    result: list[PlacedComponent] = []
    for component_ids in all_components(node_ids, adjacency):
        if root_id in component_ids:
            continue
        center_id = choose_component_center(component_ids, adjacency, order_index)
        context = ComponentContext.build(component_ids, center_id, adjacency, order_index, edges, options)
        layout = compute_best_centers(context)
        result.append(
            PlacedComponent(ids=component_ids, center_id=center_id, centers=layout.centers, crossings=layout.crossings)
        )
    return result


def fixed_node_overlaps(
    nodes: Sequence[GraphNode],
    positions: dict[str, Point],
    fixed_ids: frozenset[str],
) -> list[tuple[str, str]]:
    """(moved id, fixed id) pairs whose boxes overlap after the layout.

    Fixed nodes keep their stored position but still take part in the
    layout, so a moved node can land on one of them.
    """
    fixed = [node for node in nodes if node.id in fixed_ids and node.id not in positions]
    clashes: list[tuple[str, str]] = []
    for moved_id, position in positions.items():
        for node in fixed:
            if boxes_overlap(position, node.position, NODE_HALF_WIDTH, NODE_HALF_HEIGHT):
                clashes.append((moved_id, node.id))
    return clashes


# ─── Entry point ────────────────────────────────────────────────────────────


def compute_auto_layout_positions(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    root_id: str,
    options: LayoutOptions | Mapping[str, Any] | None = None,
) -> LayoutResult:
    """Lay out the component of ``root_id`` around the root's current center.

    Args:
        nodes: Snapshot of the store's nodes; their order is the tie-break
            for every ordering decision.
        edges: Snapshot of the store's edges. Dangling, self-referencing and
            duplicate edges are ignored.
        root_id: Node that stays in place.
        options: ``LayoutOptions``, a settings mapping, or None for defaults.

    Returns:
        New top-left positions for the nodes that moved (the root included),
        plus the estimated crossing count. Empty when the root is unknown.
    """
    opts = LayoutOptions.coerce(options)

    root_node = next((node for node in nodes if node.id == root_id), None)
    if root_node is None:
        logger.info("auto layout skipped: root %r not in graph", root_id)
        return LayoutResult.empty()

    node_ids = [node.id for node in nodes]
    order_index = build_order_index(node_ids)
    adjacency = build_undirected_adjacency(node_ids, edges)
    edge_list = layout_edges(node_ids, edges)

    root_component = component_from_root(root_id, adjacency)
    root_ids = [node_id for node_id in node_ids if node_id in root_component]
    if not root_ids:
        return LayoutResult.empty()

    root_center = root_node.center
    root_context = ComponentContext.build(root_ids, root_id, adjacency, order_index, edge_list, opts)
    root_layout = compute_best_centers(root_context)

    placed: dict[str, Point] = {}
    for node_id in root_ids:
        rel = root_layout.centers.get(node_id)
        if rel is None:
            continue
        placed[node_id] = Point(root_center.x + rel.x, root_center.y + rel.y)

    crossings = root_layout.crossings
    if opts.include_other_components:
        others = _layout_other_components(node_ids, root_id, adjacency, order_index, edge_list, opts)
        crossings += pack_components(placed, root_ids, others, opts)

    positions: dict[str, Point] = {}
    for node_id, center in placed.items():
        if node_id != root_id and node_id in opts.fixed_node_ids:
            continue
        positions[node_id] = Point(center.x - NODE_HALF_WIDTH, center.y - NODE_HALF_HEIGHT)
    # The root sits at the origin of every engine; skip the float round trip.
    if root_id in positions:
        positions[root_id] = root_node.position

    if opts.fixed_node_ids:
        clashes = fixed_node_overlaps(nodes, positions, opts.fixed_node_ids)
        if clashes:
            logger.info("auto layout root=%s: moved nodes overlap fixed nodes: %s", root_id, clashes)

    logger.debug(
        "auto layout root=%s style=%s moved=%d crossings=%d",
        root_id,
        opts.layout_style.value,
        len(positions),
        crossings,
    )
    return LayoutResult(positions=positions, crossings=crossings)
