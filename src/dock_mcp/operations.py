"""
Mutation operations for Dock-MCP.

Four tree transforms make up the whole editing surface:

  - ``add_best_fitting``     — place a new tile beside the largest one
  - ``apply_insert``         — move a node to a side of a target (drag & drop)
  - ``delete_tile``          — remove a node and collapse its slot
  - ``update_growth_values`` — reassign grow weights

Each one takes a ``LayoutTree``, edits a clone (see ``store.clone_tree``)
and returns the clone.  The input tree is never modified, so callers may
keep earlier values around while the next one is computed.  Structural
edits finish with ``repair`` which also leaves ``ids`` sorted.
"""

from __future__ import annotations

import logging
import math
from typing import Mapping, Optional, TypeVar

from .errors import DockLayoutError, InvalidGrowError, InvalidMoveError, NodeNotFoundError
from .measure import measure
from .models import (
    ContainerNode,
    ContentNode,
    Direction,
    DockNode,
    LayoutTree,
    Measurement,
    Side,
    Viewport,
)
from .repair import repair
from .store import (
    clone_tree,
    container_of,
    create_container,
    create_content,
    create_empty,
    iter_nodes,
    replace_child,
    sort_ids,
    subtree_ids,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SIDES: tuple[str, ...] = ("left", "right", "top", "bottom")


def side_direction(side: Side) -> Direction:
    """The container direction that places something at ``side``."""
    return "row" if side in ("left", "right") else "column"


# ---------------------------------------------------------------------------
# Slot helpers
# ---------------------------------------------------------------------------

def _take_slot(tree: LayoutTree, old: DockNode, replacement: DockNode) -> None:
    """Put ``replacement`` where ``old`` sits: its parent's slot or the root."""
    parent = container_of(tree, old)
    if parent is None:
        tree.root = replacement.id
        replacement.parent = None
    else:
        replace_child(parent, old.id, replacement.id)
        replacement.parent = parent.id


def _detach(tree: LayoutTree, node: DockNode) -> None:
    """Unlink ``node`` from the tree, keeping it (and its subtree) in ``nodes``.

    A two-child parent is dissolved: the surviving sibling takes the
    parent's slot with a grow of 1.  Detaching the root leaves the tree
    rootless.
    """
    parent = container_of(tree, node)
    if parent is None:
        tree.root = None
        return

    if len(parent.children) == 2:
        other_id = parent.children[1] if parent.children[0] == node.id else parent.children[0]
        other = tree.nodes[other_id]
        other.grow = 1.0
        _take_slot(tree, parent, other)
        del tree.nodes[parent.id]
        logger.debug(f"Dissolved {parent.id}; {other_id} takes its slot")
    else:
        parent.children.remove(node.id)

    node.parent = None


# ---------------------------------------------------------------------------
# Best-fit insert
# ---------------------------------------------------------------------------

def find_largest_tile(
    tree: LayoutTree,
    measurement: Measurement,
    viewport: Viewport,
) -> Optional[tuple[ContentNode, Direction]]:
    """Find the tile with the largest pixel area and the axis to split it on.

    Tiles are visited in pre-order; on equal areas the first one wins.  The
    split direction is ``row`` when the tile is wider than tall, otherwise
    ``column``.  Returns ``None`` for an empty tree, or when a negative
    viewport leaves every tile with a negative area.
    """
    best: Optional[ContentNode] = None
    best_area = -1.0
    direction: Direction = "column"

    for _, node in iter_nodes(tree):
        if not isinstance(node, ContentNode):
            continue
        inset = measurement.insets[node.id]
        width = inset.width / 100 * viewport.width
        height = inset.height / 100 * viewport.height
        area = width * height
        if area > best_area:
            best = node
            best_area = area
            direction = "row" if width > height else "column"

    if best is None:
        return None
    return best, direction


def add_best_fitting(
    tree: LayoutTree,
    payload: T,
    viewport: Optional[Viewport] = None,
) -> LayoutTree:
    """Insert a tile holding ``payload`` where it visually fits best.

    An empty tree gets the tile as its root.  Otherwise the largest tile is
    split along its longer screen dimension: if its container already runs
    in that direction the new tile is appended to the container, else the
    largest tile and the new one are wrapped in a fresh two-child container
    that inherits the largest tile's grow.

    Args:
        tree:     The current layout.
        payload:  Opaque data for the new tile.
        viewport: Pixel size of the layout (default 1000×1000).

    Raises:
        DockLayoutError: No tile has room in ``viewport``.
    """
    viewport = viewport or Viewport()
    draft = clone_tree(tree)

    if draft.root is None:
        node = create_content(payload, draft)
        draft.root = node.id
        sort_ids(draft)
        logger.debug(f"Added {node.id} as root")
        return draft

    found = find_largest_tile(draft, measure(draft), viewport)
    if found is None:
        raise DockLayoutError(f"No tile fits in a {viewport.width:g}x{viewport.height:g} viewport")
    largest, direction = found
    new_node = create_content(payload, draft)
    parent = container_of(draft, largest)

    if parent is not None and parent.direction == direction:
        parent.children.append(new_node.id)
        new_node.parent = parent.id
        logger.debug(f"Added {new_node.id} to {direction} container {parent.id}")
    else:
        wrapper = create_container(
            direction,
            [largest.id, new_node.id],
            draft,
            grow=largest.grow,
        )
        _take_slot(draft, largest, wrapper)
        largest.parent = wrapper.id
        new_node.parent = wrapper.id
        logger.debug(f"Split {largest.id} with new {direction} container {wrapper.id}")

    repair(draft)
    return draft


# ---------------------------------------------------------------------------
# Directional insert
# ---------------------------------------------------------------------------

def apply_insert(
    tree: LayoutTree,
    moving_id: str,
    target_id: str,
    side: Side,
) -> LayoutTree:
    """Move ``moving_id`` next to ``target_id`` on ``side``.

    The moving node is first detached exactly as ``delete_tile`` would
    remove it, so its old slot is simplified.  Then:

      - a container target running along ``side``'s axis takes the node
        at its front (left/top) or back (right/bottom);
      - any other target is wrapped in a new two-child container in
        ``side``'s direction that takes over the target's slot and grow.

    Raises:
        NodeNotFoundError: Either id is unknown, or the target was folded
            away while detaching the moving node.
        InvalidMoveError:  ``side`` is not a side, or the target is the
            moving node or lies inside its subtree.
    """
    if side not in SIDES:
        raise InvalidMoveError(moving_id, target_id, f"Unknown side: {side!r}")
    if moving_id not in tree.nodes:
        raise NodeNotFoundError(moving_id)
    if target_id not in tree.nodes:
        raise NodeNotFoundError(target_id)
    if target_id in subtree_ids(tree, moving_id):
        raise InvalidMoveError(moving_id, target_id)

    draft = clone_tree(tree)
    moving = draft.nodes[moving_id]
    _detach(draft, moving)
    repair(draft)

    target = draft.nodes.get(target_id)
    if target is None:
        raise NodeNotFoundError(target_id)

    direction = side_direction(side)
    leading = side in ("left", "top")

    if isinstance(target, ContainerNode) and target.direction == direction:
        if leading:
            target.children.insert(0, moving_id)
        else:
            target.children.append(moving_id)
        moving.parent = target.id
        logger.debug(f"Inserted {moving_id} into {target_id} at the {side}")
    else:
        children = [moving_id, target_id] if leading else [target_id, moving_id]
        wrapper = create_container(direction, children, draft, grow=target.grow)
        _take_slot(draft, target, wrapper)
        moving.parent = wrapper.id
        target.parent = wrapper.id
        logger.debug(f"Wrapped {target_id} with {moving_id} ({side}) in {wrapper.id}")

    repair(draft)
    return draft


# ---------------------------------------------------------------------------
# Deletion
# ---------------------------------------------------------------------------

def delete_tile(tree: LayoutTree, node_id: str) -> LayoutTree:
    """Remove ``node_id`` and collapse the slot it leaves behind.

    Deleting the root yields the empty tree.  Deleting a container removes
    its whole subtree.  An unknown id is a no-op and the input tree is
    returned as is.
    """
    if node_id not in tree.nodes:
        logger.debug(f"Delete ignored, unknown node {node_id}")
        return tree

    if tree.nodes[node_id].parent is None:
        logger.debug(f"Deleted root {node_id}; layout is now empty")
        return create_empty()

    draft = clone_tree(tree)
    removed = subtree_ids(draft, node_id)
    _detach(draft, draft.nodes[node_id])
    for removed_id in removed:
        del draft.nodes[removed_id]

    repair(draft)
    logger.debug(f"Deleted {node_id} ({len(removed)} node(s))")
    return draft


# ---------------------------------------------------------------------------
# Growth update
# ---------------------------------------------------------------------------

def update_growth_values(tree: LayoutTree, values: Mapping[str, float]) -> LayoutTree:
    """Assign new grow weights.  No structural change.

    All ids are checked before anything is written, so a bad entry leaves
    no partial update behind.

    Raises:
        NodeNotFoundError: An id is not in the tree.
        InvalidGrowError:  A value is not a finite positive number.
    """
    for node_id, value in values.items():
        if node_id not in tree.nodes:
            raise NodeNotFoundError(node_id)
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float))
            or not math.isfinite(value)
            or value <= 0
        ):
            raise InvalidGrowError(node_id, value)

    draft = clone_tree(tree)
    for node_id, value in values.items():
        draft.nodes[node_id].grow = float(value)
    return draft
