"""Tests for crossings.py — full and incremental crossing counts."""

from __future__ import annotations

from kg_autolayout.crossings import (
    build_incident_edge_index,
    count_edge_crossings,
    count_marked_crossings,
    edges_share_endpoint,
)
from kg_autolayout.types import Point

# ─── Helpers ──────────────────────────────────────────────────────────────────


def square_centers() -> dict[str, Point]:
    """Corners of a 2x2 square plus a far-away pair e/f."""
    return {
        "a": Point(0, 0),
        "b": Point(2, 2),
        "c": Point(0, 2),
        "d": Point(2, 0),
        "e": Point(10, 0),
        "f": Point(10, 5),
    }


def mark(indices: list[int], edge_count: int) -> bytearray:
    marker = bytearray(edge_count)
    for idx in indices:
        marker[idx] = 1
    return marker


# ─── Full count ───────────────────────────────────────────────────────────────


class TestCountEdgeCrossings:
    def test_diagonals_cross_once(self):
        """a-b and c-d are the square's diagonals — one crossing."""
        assert count_edge_crossings(square_centers(), [("a", "b"), ("c", "d")]) == 1

    def test_shared_endpoint_never_counts(self):
        """Edges meeting at a node are skipped."""
        assert count_edge_crossings(square_centers(), [("a", "b"), ("b", "c"), ("a", "c")]) == 0

    def test_missing_center_is_ignored(self):
        """An edge whose endpoint has no center contributes nothing."""
        assert count_edge_crossings(square_centers(), [("a", "b"), ("c", "ghost")]) == 0

    def test_empty_and_single_edge(self):
        """Fewer than two edges cannot cross."""
        assert count_edge_crossings(square_centers(), []) == 0
        assert count_edge_crossings(square_centers(), [("a", "b")]) == 0

    def test_sides_of_square_do_not_cross(self):
        """The four sides of a square touch only at corners."""
        edges = [("a", "d"), ("d", "b"), ("b", "c"), ("c", "a")]
        assert count_edge_crossings(square_centers(), edges) == 0

    def test_shared_endpoint_helper(self):
        """edges_share_endpoint ignores direction."""
        assert edges_share_endpoint(("a", "b"), ("b", "c"))
        assert edges_share_endpoint(("a", "b"), ("c", "a"))
        assert not edges_share_endpoint(("a", "b"), ("c", "d"))


# ─── Incremental count ────────────────────────────────────────────────────────


class TestIncidentIndex:
    def test_both_endpoints_indexed(self):
        """Each edge index is listed under both of its endpoints."""
        incident = build_incident_edge_index([("a", "b"), ("b", "c")])
        assert incident == {"a": [0], "b": [0, 1], "c": [1]}


class TestCountMarkedCrossings:
    EDGES = [("a", "b"), ("c", "d"), ("e", "f")]

    def test_no_affected_edges(self):
        """Nothing marked means nothing to count."""
        assert count_marked_crossings(self.EDGES, square_centers(), [], bytearray(3)) == 0

    def test_affected_against_unaffected(self):
        """Marking one diagonal finds its crossing with the other."""
        assert count_marked_crossings(self.EDGES, square_centers(), [0], mark([0], 3)) == 1

    def test_affected_against_affected_counted_once(self):
        """Two marked edges that cross are counted once."""
        assert count_marked_crossings(self.EDGES, square_centers(), [0, 1], mark([0, 1], 3)) == 1

    def test_unrelated_edge(self):
        """Marking the far edge finds nothing."""
        assert count_marked_crossings(self.EDGES, square_centers(), [2], mark([2], 3)) == 0

    def test_all_marked_equals_full_count(self):
        """With every edge marked the incremental count is the full count."""
        centers = square_centers()
        edges = [("a", "b"), ("c", "d"), ("a", "e"), ("c", "f"), ("d", "f")]
        everything = list(range(len(edges)))
        assert count_marked_crossings(edges, centers, everything, mark(everything, len(edges))) == (
            count_edge_crossings(centers, edges)
        )

    def test_marked_plus_unmarked_is_full_count(self):
        """Marked pairs plus pairs among unmarked edges add up to the full count."""
        centers = square_centers()
        edges = [("a", "b"), ("c", "d"), ("a", "e"), ("c", "f"), ("d", "f")]
        marked = [0, 3]
        unmarked = [edges[i] for i in range(len(edges)) if i not in marked]
        assert count_marked_crossings(edges, centers, marked, mark(marked, len(edges))) + count_edge_crossings(
            centers, unmarked
        ) == count_edge_crossings(centers, edges)
