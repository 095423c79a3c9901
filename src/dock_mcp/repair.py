"""
Invariant repair for Dock-MCP.

Two shapes are illegal in a settled tree:

  1. A container with exactly one child (degenerate) — it is replaced by
     that child.
  2. A container holding a child container with the same direction — the
     child's children are spliced into the parent in its place.

``repair`` walks the tree bottom-up, so by the time a container is
examined its children are already in canonical shape; one pass therefore
resolves whole chains of degenerate containers and nested same-direction
runs.  ``verify_tree`` checks every structural invariant and is used by
tests and by ``DockLayout`` when ``verify_invariants`` is switched on.
"""

from __future__ import annotations

import logging
from typing import Optional

from .errors import TreeCorruptionError
from .models import ContainerNode, LayoutTree
from .store import replace_child, reset_ids

logger = logging.getLogger(__name__)


def repair(tree: LayoutTree) -> None:
    """Remove degenerate and same-direction containers from ``tree`` in place.

    Finishes by rebuilding ``ids`` from the keys of ``nodes``.
    """
    if tree.root is not None:
        _repair_node(tree, tree.root)
    reset_ids(tree)


def _repair_node(tree: LayoutTree, node_id: str) -> str:
    """Repair the subtree at ``node_id``; return the id now in its slot."""
    node = tree.nodes[node_id]
    if not isinstance(node, ContainerNode):
        return node_id

    for child_id in list(node.children):
        _repair_node(tree, child_id)

    # Flatten same-direction children.  They are already repaired, so their
    # own children never share this direction.
    merged: list[str] = []
    for child_id in node.children:
        child = tree.nodes[child_id]
        if isinstance(child, ContainerNode) and child.direction == node.direction:
            logger.debug(f"Flattening {child_id} into {node_id} ({node.direction})")
            for grandchild_id in child.children:
                tree.nodes[grandchild_id].parent = node_id
            merged.extend(child.children)
            del tree.nodes[child_id]
        else:
            merged.append(child_id)
    node.children = merged

    if not node.children:
        raise TreeCorruptionError(f"container {node_id} has no children")

    if len(node.children) == 1:
        return _promote_only_child(tree, node)

    return node_id


def _promote_only_child(tree: LayoutTree, node: ContainerNode) -> str:
    """Replace a single-child container with its child."""
    child = tree.nodes[node.children[0]]
    logger.debug(f"Collapsing degenerate container {node.id} into {child.id}")

    parent_id: Optional[str] = node.parent
    if parent_id is not None:
        parent = tree.nodes[parent_id]
        if not isinstance(parent, ContainerNode):
            raise TreeCorruptionError(f"parent of {node.id} is not a container")
        replace_child(parent, node.id, child.id)
    else:
        tree.root = child.id

    child.parent = parent_id
    # The child takes over the container's share of the grandparent.
    child.grow = node.grow
    del tree.nodes[node.id]
    return child.id


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------

def find_problems(tree: LayoutTree) -> list[str]:
    """Return a description of every invariant the tree breaks.

    An empty list means the tree is valid.
    """
    problems: list[str] = []

    if tree.ids != sorted(tree.nodes):
        problems.append("ids is not the sorted key set of nodes")

    if tree.root is None:
        if tree.nodes:
            problems.append("tree has nodes but no root")
        return problems

    root = tree.nodes.get(tree.root)
    if root is None:
        problems.append(f"root {tree.root} is not in nodes")
        return problems
    if root.parent is not None:
        problems.append(f"root {tree.root} has parent {root.parent}")

    for node_id, node in tree.nodes.items():
        if node.id != node_id:
            problems.append(f"node stored under {node_id} has id {node.id}")
        if node.grow <= 0:
            problems.append(f"node {node_id} has non-positive grow {node.grow}")

    reached: set[str] = set()
    stack = [tree.root]
    while stack:
        node_id = stack.pop()
        if node_id in reached:
            problems.append(f"node {node_id} is reachable twice")
            continue
        reached.add(node_id)
        node = tree.nodes[node_id]
        if not isinstance(node, ContainerNode):
            continue

        if len(node.children) < 2:
            problems.append(f"container {node_id} has {len(node.children)} child(ren)")
        for child_id in node.children:
            child = tree.nodes.get(child_id)
            if child is None:
                problems.append(f"container {node_id} references missing {child_id}")
                continue
            if child.parent != node_id:
                problems.append(f"{child_id} is listed under {node_id} but has parent {child.parent}")
            if isinstance(child, ContainerNode) and child.direction == node.direction:
                problems.append(f"{child_id} shares direction {node.direction} with parent {node_id}")
            stack.append(child_id)

    orphans = sorted(set(tree.nodes) - reached)
    if orphans:
        problems.append("unreachable nodes: " + ", ".join(orphans))

    return problems


def verify_tree(tree: LayoutTree) -> None:
    """Raise ``TreeCorruptionError`` if the tree breaks any invariant."""
    problems = find_problems(tree)
    if problems:
        raise TreeCorruptionError(problems)
