"""Layout engine registry and public API."""

from __future__ import annotations

from kg_autolayout.layout.base import ComponentContext, LayoutEngine
from kg_autolayout.layout.engine import ENGINES, compute_best_centers, get_engine
from kg_autolayout.layout.layered import compute_layered_centers
from kg_autolayout.layout.radial import Wedge, compute_radial_centers

__all__ = [
    "ENGINES",
    "ComponentContext",
    "LayoutEngine",
    "Wedge",
    "compute_best_centers",
    "compute_layered_centers",
    "compute_radial_centers",
    "get_engine",
]
