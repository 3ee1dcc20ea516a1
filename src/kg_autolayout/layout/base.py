"""Shared inputs and the protocol every layout engine implements."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

import networkx as nx

from kg_autolayout.crossings import Edge
from kg_autolayout.types import ComponentLayout, LayoutOptions


@dataclass
class ComponentContext:
    """Everything an engine needs to lay out one connected component.

    ``center_id`` is the node the layout is built around (the root for the
    root component). ``edges`` holds only edges with both endpoints inside
    the component; ``order_index`` is the snapshot-wide tie-break.
    """

    component_ids: list[str]
    center_id: str
    adjacency: nx.Graph
    order_index: dict[str, int]
    edges: list[Edge]
    options: LayoutOptions
    component_set: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        self.component_set = frozenset(self.component_ids)

    @classmethod
    def build(
        cls,
        component_ids: Sequence[str],
        center_id: str,
        adjacency: nx.Graph,
        order_index: dict[str, int],
        all_edges: Iterable[Edge],
        options: LayoutOptions,
    ) -> ComponentContext:
        """Build a context, restricting ``all_edges`` to the component."""
        members = set(component_ids)
        edges = [edge for edge in all_edges if edge[0] in members and edge[1] in members]
        return cls(
            component_ids=list(component_ids),
            center_id=center_id,
            adjacency=adjacency,
            order_index=order_index,
            edges=edges,
            options=options,
        )

    def order_of(self, node_id: str) -> int:
        return self.order_index.get(node_id, 0)


class LayoutEngine(Protocol):
    """Protocol that all layout engines must implement."""

    def __call__(self, context: ComponentContext, seed: int) -> ComponentLayout:
        """Lay out one component for one attempt.

        Returns centers relative to ``context.center_id`` (which sits at the
        origin) together with the crossing count of that arrangement.
        """
        ...
