"""Store-side helpers: run a layout from a node and merge the result back."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from kg_autolayout.composer import compute_auto_layout_positions
from kg_autolayout.types import GraphEdge, GraphNode, LayoutOptions, Point


@dataclass
class AutoLayoutOutcome:
    """What the store needs after an auto-layout request.

    ``ok`` is False when nothing was laid out (for example an unknown node
    id); ``nodes`` is then the input list unchanged.
    """

    ok: bool
    crossings: int
    nodes: list[GraphNode]


def apply_positions(nodes: Sequence[GraphNode], positions: Mapping[str, Point]) -> list[GraphNode]:
    """Return a copy of ``nodes`` with ``positions`` applied.

    Nodes absent from ``positions`` are returned as-is (same objects).
    """
    result: list[GraphNode] = []
    for node in nodes:
        position = positions.get(node.id)
        if position is None:
            result.append(node)
        else:
            result.append(dataclasses.replace(node, position=position))
    return result


def auto_layout_from_node(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    node_id: str,
    options: LayoutOptions | Mapping[str, Any] | None = None,
) -> AutoLayoutOutcome:
    """Lay out the graph around ``node_id``, keeping locked nodes in place."""
    locked_ids = [node.id for node in nodes if node.locked]
    opts = LayoutOptions.coerce(options).with_fixed(locked_ids)

    result = compute_auto_layout_positions(nodes, edges, node_id, opts)
    if result.is_empty:
        return AutoLayoutOutcome(ok=False, crossings=result.crossings, nodes=list(nodes))

    return AutoLayoutOutcome(ok=True, crossings=result.crossings, nodes=apply_positions(nodes, result.positions))
