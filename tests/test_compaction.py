"""Tests for compaction.py — grid overlap test and scale search."""

from __future__ import annotations

import itertools

import pytest

from kg_autolayout.compaction import DEFAULT_PADDING, compress_centers, has_any_node_overlap
from kg_autolayout.geometry import boxes_overlap
from kg_autolayout.types import NODE_HALF_HEIGHT, NODE_HALF_WIDTH, Point

# ─── Helpers ──────────────────────────────────────────────────────────────────


def brute_force_overlap(centers: dict[str, Point], scale: float, padding: float) -> bool:
    """Reference O(n²) overlap check."""
    hw = NODE_HALF_WIDTH + padding
    hh = NODE_HALF_HEIGHT + padding
    scaled = [Point(c.x * scale, c.y * scale) for c in centers.values()]
    return any(boxes_overlap(a, b, hw, hh) for a, b in itertools.combinations(scaled, 2))


# ─── has_any_node_overlap ─────────────────────────────────────────────────────


class TestHasAnyNodeOverlap:
    def test_far_apart_nodes(self):
        """Nodes 1000px apart never overlap."""
        centers = {"a": Point(0, 0), "b": Point(1000, 0)}
        assert not has_any_node_overlap(centers, ["a", "b"], 1.0)

    def test_stacked_nodes_overlap(self):
        """Two nodes at the same spot overlap."""
        centers = {"a": Point(5, 5), "b": Point(5, 5)}
        assert has_any_node_overlap(centers, ["a", "b"], 1.0)

    def test_scale_brings_nodes_together(self):
        """Scaling down can create an overlap."""
        centers = {"a": Point(0, 0), "b": Point(200, 0)}
        assert not has_any_node_overlap(centers, ["a", "b"], 1.0)
        assert has_any_node_overlap(centers, ["a", "b"], 0.5)

    def test_only_listed_ids_are_checked(self):
        """Nodes not in ``ids`` are ignored."""
        centers = {"a": Point(0, 0), "b": Point(0, 0), "c": Point(500, 0)}
        assert not has_any_node_overlap(centers, ["a", "c"], 1.0)

    def test_negative_coordinates_across_cells(self):
        """Neighbours straddling the origin's grid cells are still compared."""
        centers = {"a": Point(-70, -10), "b": Point(40, 10)}
        assert has_any_node_overlap(centers, ["a", "b"], 1.0, padding=0)

    def test_matches_brute_force_on_grid(self):
        """The grid check agrees with the pairwise check on a lattice."""
        centers = {f"n{i}_{j}": Point(i * 97.0 - 300, j * 53.0 - 120) for i in range(6) for j in range(5)}
        ids = list(centers)
        for scale in (0.35, 0.6, 0.9, 1.0, 1.4):
            for padding in (0.0, DEFAULT_PADDING):
                assert has_any_node_overlap(centers, ids, scale, padding) == brute_force_overlap(
                    centers, scale, padding
                ), f"scale={scale} padding={padding}"


# ─── compress_centers ─────────────────────────────────────────────────────────


class TestCompressCenters:
    def test_uses_floor_when_possible(self):
        """Widely spaced nodes shrink straight to the minimum scale."""
        centers = {"a": Point(0, 0), "b": Point(1000, 0)}
        result = compress_centers(centers, ["a", "b"], min_scale=0.35)
        assert result.scale == 0.35
        assert result.centers["b"].x == pytest.approx(350.0)
        assert result.centers["b"].y == 0.0

    def test_bisects_to_tightest_overlap_free_scale(self):
        """200px apart with 140px padded width: the best scale is about 0.7."""
        centers = {"a": Point(0, 0), "b": Point(200, 0)}
        result = compress_centers(centers, ["a", "b"], min_scale=0.35)
        assert 0.699 <= result.scale <= 0.71
        assert not has_any_node_overlap(result.centers, ["a", "b"], 1.0)

    def test_never_expands(self):
        """A layout overlapping at scale 1 is returned unchanged."""
        centers = {"a": Point(0, 0), "b": Point(10, 0)}
        result = compress_centers(centers, ["a", "b"])
        assert result.scale == 1.0
        assert result.centers == centers

    def test_min_scale_is_clamped(self):
        """Requested floors are clamped into [0.1, 1]."""
        centers = {"a": Point(0, 0), "b": Point(10000, 0)}
        assert compress_centers(centers, ["a", "b"], min_scale=0.01).scale == 0.1
        assert compress_centers(centers, ["a", "b"], min_scale=5).scale == 1.0

    def test_origin_stays_fixed(self):
        """The center node at the origin does not move."""
        centers = {"root": Point(0, 0), "x": Point(600, 300)}
        result = compress_centers(centers, ["root", "x"])
        assert result.centers["root"] == Point(0, 0)
