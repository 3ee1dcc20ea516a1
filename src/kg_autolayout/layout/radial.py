"""Radial layout engine — concentric rings around the center node.

Phases:
  1. BFS from the center: ring index = distance, spanning-tree parents
  2. Group nodes by the root child their branch hangs off
  3. Wedge assignment: one angular sector per root child, sized by weight
  4. Angle assignment, depth by depth, pulled toward the parent's angle
  5. Per-wedge ring radii (ring spacing + arc-length bound)
  6. Polar → cartesian, uniform compaction, crossing count

Each phase is a plain function over explicit records (``Wedge``,
``RadialPlan``) so one attempt is a pure function of (context, seed).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from kg_autolayout.compaction import compress_centers
from kg_autolayout.crossings import count_edge_crossings
from kg_autolayout.graph import BfsTree, RootGroups, bfs_tree
from kg_autolayout.layout.base import ComponentContext
from kg_autolayout.types import NODE_HALF_HEIGHT, NODE_HALF_WIDTH, ComponentLayout, Point

logger = logging.getLogger(__name__)

# ─── Geometry constants ─────────────────────────────────────────────────────

TOTAL_GAP: float = min(2 * math.pi * 0.04, 0.35)  # shared between wedges
WEDGE_MARGIN_MAX: float = 0.06  # radians trimmed from each wedge edge
WEDGE_MARGIN_RATIO: float = 0.08
MIN_INNER_SPAN: float = 1e-4
SEED_ANGLE_STEP: float = 0.37
RING_CLEARANCE: float = 28.0  # added to node height for the ring floor
SIBLING_CLEARANCE: float = 24.0  # added to node width for the sibling floor


def start_angle(seed: int) -> float:
    """Rotation of the whole wedge sweep for attempt ``seed``."""
    return -math.pi / 2 + seed * SEED_ANGLE_STEP


def parent_pull(depth: int) -> float:
    """Weight of the parent's angle when placing a node at ``depth``.

    Zero on the first ring, 0.45 on the second, easing by 0.08 per ring down
    to a floor of 0.25 so deep branches keep fanning out.
    """
    if depth <= 1:
        return 0.0
    return max(0.25, 0.45 - (depth - 2) * 0.08)


def _js_round(value: float) -> int:
    return math.floor(value + 0.5)


# ─── Records ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Wedge:
    """Angular sector ``[start, start + span)`` owned by one root child.

    Nodes are spread over the inner range, which leaves a margin on both
    sides so neighbouring wedges do not crowd at the boundary.
    """

    start: float
    span: float
    inner_start: float
    inner_span: float

    def slot_angle(self, index: int, count: int) -> float:
        return self.inner_start + self.inner_span * ((index + 0.5) / count)


@dataclass
class RadialPlan:
    """Intermediate state of one radial attempt."""

    tree: BfsTree
    groups: RootGroups
    root_children: list[str]
    depth_nodes: dict[str, dict[int, list[str]]] = field(default_factory=dict)
    group_size: dict[str, int] = field(default_factory=dict)
    wedges: dict[str, Wedge] = field(default_factory=dict)
    angles: dict[str, float] = field(default_factory=dict)
    radii: dict[str, dict[int, float]] = field(default_factory=dict)


# ─── Phases ─────────────────────────────────────────────────────────────────


def collect_groups(context: ComponentContext, plan: RadialPlan) -> None:
    """Fill ``plan.group_size`` and ``plan.depth_nodes`` per root child."""
    plan.group_size = {group: 0 for group in plan.root_children}
    plan.depth_nodes = {group: {} for group in plan.root_children}

    for node_id in context.component_ids:
        if node_id == context.center_id:
            continue
        depth = plan.tree.distance.get(node_id)
        group = plan.groups.group_of(node_id)
        if group is None or not depth:
            continue
        plan.group_size[group] += 1
        plan.depth_nodes[group].setdefault(depth, []).append(node_id)


def subtree_weight(depth_map: dict[int, list[str]], size: int) -> int:
    """Wedge weight of one subtree.

    Dominated by the widest single ring of the subtree, with a mild bonus
    for total size so a deep but narrow subtree is not squeezed.
    """
    max_layer_count = max((len(ids) for ids in depth_map.values()), default=1)
    max_layer_count = max(1, max_layer_count)
    size = max(1, size)
    return max(1, max_layer_count + _js_round(math.sqrt(size) * 0.35))


def assign_wedges(plan: RadialPlan, seed: int) -> None:
    """Split the circle into one wedge per root child, proportional to weight."""
    children = plan.root_children
    gap = TOTAL_GAP / len(children)
    available = 2 * math.pi - TOTAL_GAP

    weights = {group: subtree_weight(plan.depth_nodes[group], plan.group_size[group]) for group in children}
    total_weight = max(1, sum(weights.values()))

    cursor = start_angle(seed)
    for group in children:
        span = available * (weights[group] / total_weight)
        margin = min(WEDGE_MARGIN_MAX, span * WEDGE_MARGIN_RATIO)
        inner_span = max(MIN_INNER_SPAN, span - 2 * margin)
        plan.wedges[group] = Wedge(start=cursor, span=span, inner_start=cursor + margin, inner_span=inner_span)
        cursor += span + gap


def assign_angles(context: ComponentContext, plan: RadialPlan) -> None:
    """Give every non-center node a direction, ring by ring.

    Within a wedge, the nodes of a ring are ordered by their parent's angle
    (snapshot order breaks ties), spread evenly over the inner span and then
    blended toward the parent's angle by ``parent_pull``.
    """
    angles = plan.angles
    angles[context.center_id] = 0.0
    parent = plan.tree.parent

    def parent_angle(node_id: str) -> float:
        parent_id = parent.get(node_id)
        return angles.get(parent_id, 0.0) if parent_id is not None else 0.0

    for depth in range(1, plan.tree.max_distance + 1):
        alpha = parent_pull(depth)
        for group in plan.root_children:
            ids = plan.depth_nodes[group].get(depth)
            if not ids:
                continue
            ids.sort(key=lambda node_id: (parent_angle(node_id), context.order_of(node_id)))

            wedge = plan.wedges[group]
            count = len(ids)
            for index, node_id in enumerate(ids):
                uniform = wedge.slot_angle(index, count)
                parent_id = parent.get(node_id)
                desired = angles.get(parent_id, uniform) if parent_id is not None else uniform
                angles[node_id] = uniform * (1 - alpha) + desired * alpha


def min_ring_spacing(context: ComponentContext) -> float:
    return max(context.options.ring_spacing, NODE_HALF_HEIGHT * 2 + RING_CLEARANCE)


def min_sibling_spacing(context: ComponentContext) -> float:
    return max(context.options.node_spacing, NODE_HALF_WIDTH * 2 + SIBLING_CLEARANCE)


def assign_radii(context: ComponentContext, plan: RadialPlan) -> None:
    """Compute the radius of each ring independently per wedge.

    A ring sits at least one ring spacing beyond the previous ring of the
    same wedge, and far enough out that its nodes fit along the wedge's arc
    and the wedge itself is at least one sibling spacing wide.
    """
    ring_spacing = min_ring_spacing(context)
    sibling_spacing = min_sibling_spacing(context)

    for group in plan.root_children:
        wedge = plan.wedges[group]
        depth_map = plan.depth_nodes[group]
        radius_by_depth: dict[int, float] = {}
        prev_radius = 0.0
        for depth in range(1, plan.tree.max_distance + 1):
            count = len(depth_map.get(depth, ()))
            if count == 0:
                continue
            base_radius = prev_radius + ring_spacing
            # Arc length r * span must fit at least one sibling gap.
            required_radius = sibling_spacing / wedge.span
            if count > 1:
                # Arc length r * span must fit count - 1 sibling gaps.
                required_radius = max(required_radius, sibling_spacing * (count - 1) / wedge.inner_span)
            radius = max(base_radius, required_radius)
            radius_by_depth[depth] = radius
            prev_radius = radius
        plan.radii[group] = radius_by_depth


def place_centers(context: ComponentContext, plan: RadialPlan) -> dict[str, Point]:
    """Convert (angle, radius) to relative centers."""
    options = context.options
    fallback_spacing = min_ring_spacing(context)
    centers: dict[str, Point] = {context.center_id: Point(0.0, 0.0)}

    for node_id in context.component_ids:
        if node_id == context.center_id:
            continue
        depth = plan.tree.distance.get(node_id)
        if not depth:
            continue
        angle = plan.angles.get(node_id)
        if angle is None:
            continue
        group = plan.groups.group_of(node_id)
        radius = depth * fallback_spacing
        if group is not None:
            radius = plan.radii.get(group, {}).get(depth, radius)
        centers[node_id] = Point(
            math.cos(angle) * radius * options.x_scale,
            math.sin(angle) * radius * options.y_scale,
        )
    return centers


# ─── Engine ─────────────────────────────────────────────────────────────────


def compute_radial_centers(context: ComponentContext, seed: int) -> ComponentLayout:
    """Lay out one component radially for attempt ``seed``."""
    tree = bfs_tree(context.center_id, context.adjacency)
    root_children = [node_id for node_id in context.component_ids if tree.distance.get(node_id) == 1]
    root_children.sort(key=context.order_of)

    if not root_children:
        return ComponentLayout(centers={context.center_id: Point(0.0, 0.0)}, crossings=0)

    plan = RadialPlan(tree=tree, groups=RootGroups(tree), root_children=root_children)
    collect_groups(context, plan)
    assign_wedges(plan, seed)
    assign_angles(context, plan)
    assign_radii(context, plan)
    centers = place_centers(context, plan)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "radial seed=%d: %d wedges, spans=%s",
            seed,
            len(plan.wedges),
            [round(plan.wedges[group].span, 3) for group in root_children],
        )

    ordered_ids = [context.center_id] + [node_id for node_id in context.component_ids if node_id != context.center_id]
    compacted = compress_centers(centers, ordered_ids)

    crossings = 0
    if len(context.edges) > 1:
        crossings = count_edge_crossings(compacted.centers, context.edges)

    return ComponentLayout(centers=compacted.centers, crossings=crossings)
