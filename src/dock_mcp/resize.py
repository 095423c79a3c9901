"""
Divider resizing for Dock-MCP.

Dragging a divider redistributes the grow of its two neighbours.  The pair
keeps its combined grow; only the split between them moves, following the
pointer in proportion to the pixel spans on either side.
"""

from __future__ import annotations

import logging

from .errors import NodeNotFoundError
from .models import Divider, LayoutTree, Viewport
from .operations import update_growth_values

logger = logging.getLogger(__name__)

# Smallest span, in pixels, a divider drag leaves on either side.
DIVIDER_MIN_PX = 100.0


def clamp(value: float, lower: float, upper: float) -> float:
    return min(max(value, lower), upper)


def divider_grow_values(
    divider: Divider,
    before_grow: float,
    after_grow: float,
    position: float,
    viewport: Viewport,
    min_px: float = DIVIDER_MIN_PX,
) -> tuple[float, float]:
    """Split ``before_grow + after_grow`` at the pointer ``position``.

    ``position`` is measured in pixels from the layout's left edge for a
    vertical divider, from its top edge for a horizontal one.  It is
    clamped so neither side drops below ``min_px``; when the pair is
    narrower than ``2 * min_px`` the divider sits in the middle.

    Returns:
        (new_before_grow, new_after_grow)
    """
    size = viewport.width if divider.orientation == "vertical" else viewport.height
    lower = divider.lower / 100 * size
    upper = divider.upper / 100 * size

    if upper - lower <= 2 * min_px:
        middle = (lower + upper) / 2
    else:
        middle = clamp(position, lower + min_px, upper - min_px)

    before_span = middle - lower
    after_span = upper - middle
    total_span = before_span + after_span
    total_grow = before_grow + after_grow

    if total_span <= 0:
        return before_grow, after_grow

    return (
        before_span / total_span * total_grow,
        after_span / total_span * total_grow,
    )


def resize_divider(
    tree: LayoutTree,
    divider: Divider,
    position: float,
    viewport: Viewport,
    min_px: float = DIVIDER_MIN_PX,
) -> LayoutTree:
    """Return a tree with ``divider`` moved to ``position`` (pixels).

    Raises:
        NodeNotFoundError: The divider's neighbours are no longer in the tree.
    """
    before = tree.get_node(divider.before)
    after = tree.get_node(divider.after)
    if before is None:
        raise NodeNotFoundError(divider.before)
    if after is None:
        raise NodeNotFoundError(divider.after)

    new_before, new_after = divider_grow_values(
        divider, before.grow, after.grow, position, viewport, min_px=min_px,
    )
    logger.debug(
        f"Resized {divider.id}: {before.grow:.3f}/{after.grow:.3f} -> {new_before:.3f}/{new_after:.3f}"
    )
    return update_growth_values(tree, {divider.before: new_before, divider.after: new_after})
