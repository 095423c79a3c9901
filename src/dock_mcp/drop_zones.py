"""
Drop-zone geometry for Dock-MCP.

While a tile is dragged, every node near the top of the tree offers thin
edge strips ("drop zones") that trigger a directional insert when the tile
is released on them.  The pass runs on a copy of the tree with the dragged
tile removed, so zones never point at the tile itself.

Geometry, per visited node (root is depth 0, recursion stops past
``max_depth``):

  - The node's pixel rectangle comes from its measured inset scaled by the
    viewport, clipped to the rectangle still available from its ancestors.
  - Left/right strips are ``margin`` pixels wide along the node's vertical
    edges, top/bottom strips along its horizontal edges.  Strips stop
    ``margin`` short of the corners.
  - Inside a ``row`` parent the left/right pair is not offered, inside a
    ``column`` parent the top/bottom pair; the parent's own strips and the
    neighbouring siblings already cover that axis.
  - Offered strips are carved off the available rectangle before the
    children are visited, so nested zones never overlap their ancestors'.

Every zone also carries a ``visible`` rectangle — the half of the node on
the zone's side — which presentation layers use for the hover highlight.
"""

from __future__ import annotations

from typing import Optional

from .models import (
    ContainerNode,
    DockNode,
    DropRect,
    InsertAction,
    Inset,
    LayoutTree,
    Rect,
    Viewport,
)
from .measure import measure
from .operations import delete_tile

# Width of an edge strip in pixels.
DROP_MARGIN = 20.0

# Deepest level (root = 0) that still offers zones.
DROP_DEPTH = 2


def compute_drop_zones(
    tree: LayoutTree,
    viewport_width: float,
    viewport_height: float,
    insets: dict[str, Inset],
    parent: Optional[ContainerNode],
    node: DockNode,
    depth: int = 0,
    bounding: Optional[Rect] = None,
    margin: float = DROP_MARGIN,
    max_depth: int = DROP_DEPTH,
) -> list[DropRect]:
    """Compute the drop zones of ``node`` and its descendants.

    Args:
        tree:            The tree ``node`` belongs to (dragged tile removed).
        viewport_width:  Layout width in pixels.
        viewport_height: Layout height in pixels.
        insets:          Measurement output covering every visited node.
        parent:          ``node``'s container, ``None`` at the root.
        node:            Node to start from.
        depth:           Depth of ``node``; zones stop past ``max_depth``.
        bounding:        Pixel rectangle still available, ``None`` at the
                         start (the node's own rectangle is used).
        margin:          Strip width in pixels.
        max_depth:       Deepest level that produces zones.

    Returns:
        Zones in visiting order: the node's own (left, right, top, bottom
        as offered) followed by its children's, depth first.
    """
    if depth > max_depth:
        return []

    inset = insets[node.id]
    node_rect = Rect(
        left=viewport_width * (inset.left / 100),
        right=viewport_width * ((100 - inset.right) / 100),
        top=viewport_height * (inset.top / 100),
        bottom=viewport_height * ((100 - inset.bottom) / 100),
    )

    if bounding is None:
        available = node_rect.model_copy()
    else:
        available = Rect(
            left=max(bounding.left, node_rect.left),
            right=min(bounding.right, node_rect.right),
            top=max(bounding.top, node_rect.top),
            bottom=min(bounding.bottom, node_rect.bottom),
        )

    left, right, top, bottom = available.left, available.right, available.top, available.bottom
    mid_x = (left + right) / 2
    mid_y = (top + bottom) / 2

    zones: list[DropRect] = []

    if not (parent is not None and parent.direction == "row"):
        zones.append(DropRect(
            left=left,
            top=top + margin,
            right=left + margin,
            bottom=bottom - margin,
            visible=Rect(left=left, top=top, right=mid_x, bottom=bottom),
            action=InsertAction(side="left", node_id=node.id),
        ))
        zones.append(DropRect(
            left=right - margin,
            top=top + margin,
            right=right,
            bottom=bottom - margin,
            visible=Rect(left=mid_x, top=top, right=right, bottom=bottom),
            action=InsertAction(side="right", node_id=node.id),
        ))
        available.left = left + margin
        available.right = right - margin

    if not (parent is not None and parent.direction == "column"):
        zones.append(DropRect(
            left=left + margin,
            top=top,
            right=right - margin,
            bottom=top + margin,
            visible=Rect(left=node_rect.left, top=node_rect.top, right=node_rect.right, bottom=mid_y),
            action=InsertAction(side="top", node_id=node.id),
        ))
        zones.append(DropRect(
            left=left + margin,
            top=bottom - margin,
            right=right - margin,
            bottom=bottom,
            visible=Rect(left=node_rect.left, top=mid_y, right=node_rect.right, bottom=node_rect.bottom),
            action=InsertAction(side="bottom", node_id=node.id),
        ))
        available.top = top + margin
        available.bottom = bottom - margin

    if isinstance(node, ContainerNode):
        for child_id in node.children:
            zones.extend(compute_drop_zones(
                tree,
                viewport_width,
                viewport_height,
                insets,
                node,
                tree.nodes[child_id],
                depth + 1,
                available,
                margin=margin,
                max_depth=max_depth,
            ))

    return zones


def drop_zones(
    tree: LayoutTree,
    viewport: Viewport,
    excluded_id: str,
    margin: float = DROP_MARGIN,
    max_depth: int = DROP_DEPTH,
) -> list[DropRect]:
    """Drop zones for dragging ``excluded_id`` across ``tree``.

    The dragged node is removed from a working copy, the copy is measured
    and zones are computed from its root.  Dragging the only tile leaves
    nothing to drop on and returns an empty list.
    """
    remaining = delete_tile(tree, excluded_id)
    if remaining.root is None:
        return []

    measurement = measure(remaining)
    return compute_drop_zones(
        remaining,
        viewport.width,
        viewport.height,
        measurement.insets,
        None,
        remaining.nodes[remaining.root],
        margin=margin,
        max_depth=max_depth,
    )


def hit_test(zones: list[DropRect], x: float, y: float) -> Optional[DropRect]:
    """Return the zone under the pointer at ``(x, y)``, if any.

    Deeper zones are emitted after (and drawn above) their ancestors, so
    the last match wins.
    """
    hovered = None
    for zone in zones:
        if zone.contains(x, y):
            hovered = zone
    return hovered
