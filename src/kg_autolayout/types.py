"""Layout types shared across the engines, the composer and callers.

The graph store owns nodes and edges; the layout core only reads a snapshot
of them (``GraphNode`` / ``GraphEdge``) and hands back a ``LayoutResult``
holding new top-left positions for the nodes it moved.
"""

from __future__ import annotations

import dataclasses
import enum
import math
import numbers
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from kg_autolayout.errors import LayoutOptionsError

# ─── Node geometry ──────────────────────────────────────────────────────────

# Knowledge nodes render at roughly 120x50; positions are top-left corners.
NODE_HALF_WIDTH: float = 60.0
NODE_HALF_HEIGHT: float = 25.0


@dataclass(frozen=True)
class Point:
    """A 2D point in pixel coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box in pixel coordinates."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


# ─── Graph snapshot ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GraphNode:
    """A node as seen by the layout core.

    ``position`` is the top-left corner used by the store. ``locked`` nodes
    are treated as fixed when going through ``auto_layout_from_node``.
    """

    id: str
    position: Point
    locked: bool = False

    @property
    def center(self) -> Point:
        return Point(self.position.x + NODE_HALF_WIDTH, self.position.y + NODE_HALF_HEIGHT)


@dataclass(frozen=True)
class GraphEdge:
    """A store edge. Directed in the store, undirected for layout."""

    source: str
    target: str


# ─── Options ────────────────────────────────────────────────────────────────


class LayoutStyle(str, enum.Enum):
    RADIAL = "radial"
    LAYERED = "layered"


# camelCase keys of the editor's settings object -> dataclass field names.
_OPTION_ALIASES: dict[str, str] = {
    "layoutStyle": "layout_style",
    "includeOtherComponents": "include_other_components",
    "ringSpacing": "ring_spacing",
    "nodeSpacing": "node_spacing",
    "componentGap": "component_gap",
    "columnMaxHeight": "column_max_height",
    "xScale": "x_scale",
    "yScale": "y_scale",
    "maxAttempts": "max_attempts",
    "fixedNodeIds": "fixed_node_ids",
}

_POSITIVE_FIELDS = ("ring_spacing", "node_spacing", "x_scale", "y_scale")
_FLOAT_FIELDS = _POSITIVE_FIELDS + ("component_gap", "column_max_height")


def _as_number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise LayoutOptionsError(f"{name} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise LayoutOptionsError(f"{name} must be finite, got {value!r}")
    return number


@dataclass(frozen=True)
class LayoutOptions:
    """Per-call layout configuration.

    Attributes:
        layout_style: Which engine lays out each component.
        include_other_components: Also lay out and pack components that are
            not connected to the root.
        ring_spacing: Distance between consecutive BFS rings/levels (px).
        node_spacing: Target distance between siblings in a ring/level (px).
        component_gap: Gap between packed components and columns (px).
        column_max_height: Height at which packing starts a new column (px).
        x_scale: Horizontal stretch applied to computed centers.
        y_scale: Vertical stretch applied to computed centers.
        max_attempts: Number of seeds tried per component.
        fixed_node_ids: Nodes whose positions must not change.
    """

    layout_style: LayoutStyle = LayoutStyle.RADIAL
    include_other_components: bool = False
    ring_spacing: float = 140.0
    node_spacing: float = 140.0
    component_gap: float = 320.0
    column_max_height: float = 1200.0
    x_scale: float = 1.0
    y_scale: float = 1.0
    max_attempts: int = 12
    fixed_node_ids: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        try:
            style = LayoutStyle(self.layout_style)
        except (TypeError, ValueError):
            raise LayoutOptionsError(f"unknown layout style: {self.layout_style!r}") from None
        # Frozen dataclass: normalise through object.__setattr__.
        object.__setattr__(self, "layout_style", style)
        bad_fixed = f"fixed_node_ids must be a collection of ids, got {self.fixed_node_ids!r}"
        if isinstance(self.fixed_node_ids, str):
            raise LayoutOptionsError(bad_fixed)
        try:
            fixed = frozenset(self.fixed_node_ids)
        except TypeError:
            raise LayoutOptionsError(bad_fixed) from None
        object.__setattr__(self, "fixed_node_ids", fixed)

        for name in _FLOAT_FIELDS:
            object.__setattr__(self, name, _as_number(name, getattr(self, name)))
        # Fractional attempt counts behave like `seed < attempts`.
        object.__setattr__(self, "max_attempts", math.ceil(_as_number("max_attempts", self.max_attempts)))

        for name in _POSITIVE_FIELDS:
            value = getattr(self, name)
            if not value > 0:
                raise LayoutOptionsError(f"{name} must be positive, got {value!r}")
        if self.component_gap < 0:
            raise LayoutOptionsError(f"component_gap must not be negative, got {self.component_gap!r}")
        if self.column_max_height < 0:
            raise LayoutOptionsError(f"column_max_height must not be negative, got {self.column_max_height!r}")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> LayoutOptions:
        """Build options from a settings mapping.

        Accepts the editor's camelCase keys as well as field names. ``None``
        values fall back to the defaults, the same as leaving the key out.
        """
        field_names = {f.name for f in dataclasses.fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in mapping.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in field_names:
                raise LayoutOptionsError(f"unrecognized layout option: {key!r}")
            if value is None:
                continue
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, options: LayoutOptions | Mapping[str, Any] | None) -> LayoutOptions:
        if options is None:
            return cls()
        if isinstance(options, LayoutOptions):
            return options
        return cls.from_mapping(options)

    def merged(self, **overrides: Any) -> LayoutOptions:
        """Return a copy with ``overrides`` applied."""
        return dataclasses.replace(self, **overrides)

    def with_fixed(self, node_ids: Iterable[str]) -> LayoutOptions:
        """Return a copy whose fixed set also contains ``node_ids``."""
        return self.merged(fixed_node_ids=self.fixed_node_ids | frozenset(node_ids))


# ─── Results ────────────────────────────────────────────────────────────────


@dataclass
class ComponentLayout:
    """Relative centers for one component, as produced by one engine attempt.

    Centers are relative to the component's center node, which sits at
    (0, 0).
    """

    centers: dict[str, Point] = field(default_factory=dict)
    crossings: int = 0


@dataclass
class LayoutResult:
    """Output of a layout call.

    ``positions`` maps node id to its new top-left corner and only contains
    nodes the engine repositioned. ``crossings`` estimates how many pairs of
    straight edges properly cross in the new layout.
    """

    positions: dict[str, Point] = field(default_factory=dict)
    crossings: int = 0

    @classmethod
    def empty(cls) -> LayoutResult:
        return cls(positions={}, crossings=0)

    @property
    def is_empty(self) -> bool:
        return not self.positions
