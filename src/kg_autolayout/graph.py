"""Adjacency and connected-component discovery.

Layout treats every edge as undirected. The adjacency is a ``networkx.Graph``
whose nodes are inserted in snapshot order, so neighbour iteration follows
edge order and component discovery follows node order. Everything here is
rebuilt on each layout call.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import networkx as nx

from kg_autolayout.types import GraphEdge

# ─── Adjacency ──────────────────────────────────────────────────────────────


def layout_edges(node_ids: Iterable[str], edges: Iterable[GraphEdge]) -> list[tuple[str, str]]:
    """Filter store edges down to the ones layout cares about.

    Drops edges with an endpoint outside ``node_ids``, self-loops and
    duplicates (in either direction; the first occurrence wins). Order of the
    surviving edges follows the input.
    """
    known = set(node_ids)
    seen: set[frozenset[str]] = set()
    result: list[tuple[str, str]] = []
    for edge in edges:
        if edge.source not in known or edge.target not in known:
            continue
        if edge.source == edge.target:
            continue
        key = frozenset((edge.source, edge.target))
        if key in seen:
            continue
        seen.add(key)
        result.append((edge.source, edge.target))
    return result


def build_undirected_adjacency(node_ids: Sequence[str], edges: Iterable[GraphEdge]) -> nx.Graph:
    """Build the undirected adjacency graph for ``node_ids``.

    Every id becomes a node, even when isolated. Malformed edges are dropped
    silently (see ``layout_edges``).
    """
    graph: nx.Graph = nx.Graph()
    graph.add_nodes_from(node_ids)
    graph.add_edges_from(layout_edges(node_ids, edges))
    return graph


def build_order_index(node_ids: Iterable[str]) -> dict[str, int]:
    """Map node id → position in the snapshot (the global tie-break)."""
    return {node_id: index for index, node_id in enumerate(node_ids)}


# ─── BFS ────────────────────────────────────────────────────────────────────


@dataclass
class BfsTree:
    """Shortest-path distances and a BFS spanning tree from ``root``.

    ``parent`` maps the root to ``None``; every other reached node maps to the
    neighbour that discovered it first. ``order`` lists nodes in discovery
    order.
    """

    root: str
    distance: dict[str, int] = field(default_factory=dict)
    parent: dict[str, str | None] = field(default_factory=dict)
    order: list[str] = field(default_factory=list)

    @property
    def max_distance(self) -> int:
        return max(self.distance.values(), default=0)


def bfs_tree(root_id: str, adjacency: nx.Graph) -> BfsTree:
    """Run BFS from ``root_id``. An unknown root yields an empty tree."""
    tree = BfsTree(root=root_id)
    if root_id not in adjacency:
        return tree

    tree.distance[root_id] = 0
    tree.parent[root_id] = None
    tree.order.append(root_id)
    for parent, child in nx.bfs_edges(adjacency, root_id):
        tree.distance[child] = tree.distance[parent] + 1
        tree.parent[child] = parent
        tree.order.append(child)
    return tree


def component_from_root(root_id: str, adjacency: nx.Graph) -> set[str]:
    """Ids reachable from ``root_id``; empty when the root is unknown."""
    if root_id not in adjacency:
        return set()
    return set(nx.node_connected_component(adjacency, root_id))


def all_components(node_ids: Iterable[str], adjacency: nx.Graph) -> list[list[str]]:
    """Partition ``node_ids`` into connected components.

    Components are discovered in input order and each one is listed in BFS
    order from its first node, so the result is deterministic for a
    deterministic snapshot.
    """
    visited: set[str] = set()
    components: list[list[str]] = []
    for start_id in node_ids:
        if start_id in visited or start_id not in adjacency:
            continue
        component = bfs_tree(start_id, adjacency).order
        visited.update(component)
        components.append(component)
    return components


def choose_component_center(
    component_ids: Sequence[str],
    adjacency: nx.Graph,
    order_index: dict[str, int],
) -> str:
    """Pick the node a detached component is laid out around.

    Highest degree wins; ties go to the node that comes first in the
    snapshot.
    """

    def rank(node_id: str) -> tuple[int, float]:
        degree = adjacency.degree(node_id) if node_id in adjacency else 0
        return (-degree, order_index.get(node_id, math.inf))

    return min(component_ids, key=rank)


# ─── Root-child groups ──────────────────────────────────────────────────────


class RootGroups:
    """Assigns each node of a BFS tree to the root child its branch hangs off.

    The parent chain is walked iteratively and every node visited on the way
    is memoised, so deep trees cost O(n) overall and never recurse.
    """

    def __init__(self, tree: BfsTree) -> None:
        self._tree = tree
        self._cache: dict[str, str] = {}

    def group_of(self, node_id: str) -> str | None:
        """Root child owning ``node_id``; ``None`` for the root or unknown ids."""
        root = self._tree.root
        chain: list[str] = []
        group: str | None = None
        current: str | None = node_id

        while current is not None and current != root:
            cached = self._cache.get(current)
            if cached is not None:
                group = cached
                break
            chain.append(current)
            parent = self._tree.parent.get(current)
            if parent == root:
                group = current
                break
            current = parent

        if group is not None:
            for visited in chain:
                self._cache[visited] = group
        return group
