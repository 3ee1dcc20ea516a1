"""Engine registry and the multi-attempt search."""

from __future__ import annotations

import logging

from kg_autolayout.errors import LayoutOptionsError
from kg_autolayout.layout.base import ComponentContext, LayoutEngine
from kg_autolayout.layout.layered import compute_layered_centers
from kg_autolayout.layout.radial import compute_radial_centers
from kg_autolayout.types import ComponentLayout, LayoutStyle

logger = logging.getLogger(__name__)

ENGINES: dict[LayoutStyle, LayoutEngine] = {
    LayoutStyle.RADIAL: compute_radial_centers,
    LayoutStyle.LAYERED: compute_layered_centers,
}


def get_engine(style: LayoutStyle | str) -> LayoutEngine:
    """Look up the engine for ``style``."""
    try:
        return ENGINES[LayoutStyle(style)]
    except (KeyError, ValueError):
        raise LayoutOptionsError(f"no layout engine for style {style!r}") from None


def compute_best_centers(context: ComponentContext) -> ComponentLayout:
    """Run the configured engine once per seed and keep the best attempt.

    Seeds are ``0 .. max_attempts - 1`` (at least one attempt). The first
    crossing-free attempt wins immediately; otherwise the attempt with the
    strictly lowest count is kept, so earlier seeds win ties.
    """
    engine = get_engine(context.options.layout_style)
    attempts = max(1, context.options.max_attempts)

    best: ComponentLayout | None = None
    for seed in range(attempts):
        attempt = engine(context, seed)
        logger.debug(
            "%s attempt seed=%d center=%s crossings=%d",
            context.options.layout_style.value,
            seed,
            context.center_id,
            attempt.crossings,
        )
        if attempt.crossings == 0:
            return attempt
        if best is None or attempt.crossings < best.crossings:
            best = attempt

    return best if best is not None else ComponentLayout()
