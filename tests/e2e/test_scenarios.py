"""End-to-end layout scenarios run through the public API."""

from __future__ import annotations

import math
from collections import Counter

import pytest

from kg_autolayout import (
    NODE_HALF_HEIGHT,
    NODE_HALF_WIDTH,
    GraphEdge,
    GraphNode,
    LayoutOptions,
    Point,
    auto_layout_from_node,
    compute_auto_layout_positions,
)
from kg_autolayout.compaction import has_any_node_overlap


def graph(*pairs: tuple[str, str], extra: tuple[str, ...] = ()) -> tuple[list[GraphNode], list[GraphEdge]]:
    """Nodes in first-appearance order (plus ``extra``), all at (100, 50)."""
    ids: list[str] = []
    for pair in pairs:
        for node_id in pair:
            if node_id not in ids:
                ids.append(node_id)
    ids.extend(node_id for node_id in extra if node_id not in ids)
    nodes = [GraphNode(node_id, Point(100.0, 50.0)) for node_id in ids]
    return nodes, [GraphEdge(source=src, target=tgt) for src, tgt in pairs]


def centers_of(positions: dict[str, Point]) -> dict[str, Point]:
    return {node_id: Point(p.x + NODE_HALF_WIDTH, p.y + NODE_HALF_HEIGHT) for node_id, p in positions.items()}


TREE = (
    ("R", "X"),
    ("R", "Y"),
    ("X", "x1"),
    ("X", "x2"),
    ("X", "x3"),
    ("Y", "y1"),
    ("Y", "y2"),
    ("Y", "y3"),
)


@pytest.mark.parametrize("style", ["radial", "layered"])
def test_path_rings(style: str) -> None:
    """A - B - C - D from A: four nodes, no crossings, distance grows with depth."""
    nodes, edges = graph(("A", "B"), ("B", "C"), ("C", "D"))
    result = compute_auto_layout_positions(nodes, edges, "A", LayoutOptions(layout_style=style))

    assert set(result.positions) == {"A", "B", "C", "D"}
    assert result.crossings == 0
    assert result.positions["A"] == Point(100.0, 50.0)

    centers = centers_of(result.positions)
    origin = centers["A"]
    radii = [math.hypot(centers[n].x - origin.x, centers[n].y - origin.y) for n in ("A", "B", "C", "D")]
    assert radii[0] < radii[1] < radii[2] < radii[3]
    assert not has_any_node_overlap(centers, list(centers), 1.0, padding=0)


def test_layered_tree_levels() -> None:
    """Root, two children, six grandchildren: three levels of 1, 2 and 6 nodes."""
    nodes, edges = graph(*TREE)
    result = compute_auto_layout_positions(nodes, edges, "R", {"layoutStyle": "layered"})

    assert result.crossings == 0
    assert len(result.positions) == 9
    level_sizes = sorted(Counter(p.x for p in result.positions.values()).values())
    assert level_sizes == [1, 2, 6]
    assert not has_any_node_overlap(centers_of(result.positions), list(result.positions), 1.0, padding=0)


def test_radial_tree_is_crossing_free() -> None:
    """The same tree laid out radially has no crossings."""
    nodes, edges = graph(*TREE)
    result = compute_auto_layout_positions(nodes, edges, "R")
    assert result.crossings == 0
    assert len(result.positions) == 9


@pytest.mark.parametrize("style", ["radial", "layered"])
def test_disconnected_pair_is_untouched(style: str) -> None:
    """Without include_other_components a separate pair keeps its place."""
    nodes, edges = graph(("R", "A"), ("R", "B"), ("P", "Q"))
    result = compute_auto_layout_positions(nodes, edges, "R", LayoutOptions(layout_style=style))
    assert set(result.positions) == {"R", "A", "B"}
    assert "P" not in result.positions
    assert "Q" not in result.positions


def test_disconnected_pair_is_packed_when_asked() -> None:
    """With include_other_components the pair lands right of the root component."""
    nodes, edges = graph(("R", "A"), ("R", "B"), ("P", "Q"))
    result = compute_auto_layout_positions(nodes, edges, "R", {"includeOtherComponents": True})
    assert set(result.positions) == {"R", "A", "B", "P", "Q"}
    rightmost_root = max(result.positions[n].x for n in ("R", "A", "B"))
    assert min(result.positions["P"].x, result.positions["Q"].x) > rightmost_root


@pytest.mark.parametrize("style", ["radial", "layered"])
def test_isolated_root(style: str) -> None:
    """A root without edges comes back at its original position."""
    nodes, _ = graph(extra=("R", "S"))
    result = compute_auto_layout_positions(nodes, [], "R", {"layoutStyle": style})
    assert result.positions == {"R": Point(100.0, 50.0)}
    assert result.crossings == 0


def test_unknown_root() -> None:
    """A root id that is not in the graph yields an empty result."""
    nodes, edges = graph(("A", "B"))
    result = compute_auto_layout_positions(nodes, edges, "missing")
    assert result.positions == {}
    assert result.crossings == 0


def test_store_round_trip() -> None:
    """auto_layout_from_node moves the unlocked nodes and reports success."""
    nodes, edges = graph(*TREE)
    nodes = [GraphNode(n.id, n.position, locked=(n.id == "x2")) for n in nodes]
    outcome = auto_layout_from_node(nodes, edges, "R", {"layoutStyle": "layered"})
    assert outcome.ok
    assert outcome.crossings == 0
    by_id = {n.id: n for n in outcome.nodes}
    assert by_id["R"].position == Point(100.0, 50.0)
    assert by_id["x2"].position == Point(100.0, 50.0)
    assert by_id["y3"].position != Point(100.0, 50.0)
