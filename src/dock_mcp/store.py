"""
Tree store for Dock-MCP — node creation and structural bookkeeping.

Everything here is plumbing shared by the mutation operations:

  - fresh node ids and the two node constructors
  - the copy-on-write clone every operation edits instead of its input
  - ``ids`` normalization (sorted key set of ``nodes``)
  - pre-order traversal, which fixes the visiting order used for
    best-fit tie breaking
"""

from __future__ import annotations

import uuid
from typing import Callable, Iterator, Optional, TypeVar

from .errors import TreeCorruptionError
from .models import ContainerNode, ContentNode, Direction, DockNode, LayoutTree


T = TypeVar("T")


def new_node_id() -> str:
    """Return a fresh node id.

    Ids only need to be unique within a tree's lifetime, so a random
    token is enough.
    """
    return "id" + uuid.uuid4().hex[:16]


def create_empty() -> LayoutTree:
    """Return the canonical empty tree."""
    return LayoutTree()


def create_content(
    payload: T,
    tree: Optional[LayoutTree] = None,
    grow: float = 1.0,
    min_size: Optional[float] = None,
) -> ContentNode[T]:
    """Create a tile holding ``payload``.

    When ``tree`` is given the node is registered in ``nodes`` and appended
    to ``ids`` straight away.  Sorting is left to the owning operation.
    """
    node = ContentNode(id=new_node_id(), grow=grow, min_size=min_size, payload=payload)
    if tree is not None:
        _register(tree, node)
    return node


def create_container(
    direction: Direction,
    children: list[str],
    tree: Optional[LayoutTree] = None,
    grow: float = 1.0,
) -> ContainerNode:
    """Create a split container listing ``children``.

    Children are not reparented here; callers link them once the container
    sits in its final slot.
    """
    node = ContainerNode(
        id=new_node_id(),
        grow=grow,
        direction=direction,
        children=list(children),
    )
    if tree is not None:
        _register(tree, node)
    return node


def _register(tree: LayoutTree, node: DockNode) -> None:
    tree.nodes[node.id] = node
    tree.ids.append(node.id)


def clone_tree(tree: LayoutTree) -> LayoutTree:
    """Copy a tree so it can be edited without touching the original.

    Nodes are copied one level deep and ``children`` lists are duplicated.
    Payloads are shared; the engine never modifies them.
    """
    nodes: dict[str, DockNode] = {}
    for node_id, node in tree.nodes.items():
        if isinstance(node, ContainerNode):
            nodes[node_id] = node.model_copy(update={"children": list(node.children)})
        else:
            nodes[node_id] = node.model_copy()
    return LayoutTree.model_construct(ids=list(tree.ids), nodes=nodes, root=tree.root)


def deep_copy(tree: LayoutTree) -> LayoutTree:
    """Fully independent copy, payloads included."""
    return tree.model_copy(deep=True)


def sort_ids(tree: LayoutTree) -> None:
    tree.ids.sort()


def reset_ids(tree: LayoutTree) -> None:
    """Rebuild ``ids`` from the keys of ``nodes``, sorted."""
    tree.ids = sorted(tree.nodes)


def container_of(tree: LayoutTree, node: DockNode) -> Optional[ContainerNode]:
    """Return the container holding ``node``, or ``None`` for the root."""
    if node.parent is None:
        return None
    parent = tree.nodes[node.parent]
    if not isinstance(parent, ContainerNode):
        raise TreeCorruptionError(f"parent of {node.id} is not a container")
    return parent


def replace_child(parent: ContainerNode, old_id: str, new_id: str) -> None:
    """Put ``new_id`` into the slot ``old_id`` occupied in ``parent``."""
    index = parent.children.index(old_id)
    parent.children[index] = new_id


def iter_nodes(tree: LayoutTree) -> Iterator[tuple[Optional[ContainerNode], DockNode]]:
    """Yield ``(parent, node)`` pairs in pre-order, starting at the root.

    Children are visited in their ``children`` order.
    """
    if tree.root is None:
        return
    stack: list[tuple[Optional[ContainerNode], str]] = [(None, tree.root)]
    while stack:
        parent, node_id = stack.pop()
        node = tree.nodes[node_id]
        yield parent, node
        if isinstance(node, ContainerNode):
            for child_id in reversed(node.children):
                stack.append((node, child_id))


def visit(
    tree: LayoutTree,
    visitor: Callable[[Optional[ContainerNode], DockNode], None],
) -> None:
    """Call ``visitor(parent, node)`` for every reachable node, pre-order."""
    for parent, node in iter_nodes(tree):
        visitor(parent, node)


def subtree_ids(tree: LayoutTree, node_id: str) -> list[str]:
    """Ids of ``node_id`` and everything below it, pre-order."""
    result = []
    stack = [node_id]
    while stack:
        current = stack.pop()
        result.append(current)
        node = tree.nodes[current]
        if isinstance(node, ContainerNode):
            stack.extend(reversed(node.children))
    return result
