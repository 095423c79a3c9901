"""Shared pytest fixtures for Dock-MCP tests.

Trees in tests are spelled out with readable ids:

    "A"                                   tile A, grow 1
    ("A", 2.0)                            tile A, grow 2
    ("R", "row", ["A", "B"])              row container R
    ("R", "row", ["A", "B"], 3.0)         ... with grow 3

Tile payloads are the lower-cased id.
"""

import pytest

from dock_mcp.models import ContainerNode, ContentNode, LayoutTree
from dock_mcp.repair import find_problems


def _add(nodes: dict, layout, parent_id=None) -> str:
    if isinstance(layout, str):
        layout = (layout, 1.0)

    if len(layout) == 2:
        node_id, grow = layout
        nodes[node_id] = ContentNode(id=node_id, grow=grow, parent=parent_id, payload=node_id.lower())
        return node_id

    node_id, direction, children = layout[:3]
    grow = layout[3] if len(layout) > 3 else 1.0
    child_ids = [_add(nodes, child, node_id) for child in children]
    nodes[node_id] = ContainerNode(
        id=node_id,
        grow=grow,
        parent=parent_id,
        direction=direction,
        children=child_ids,
    )
    return node_id


def build_tree(layout) -> LayoutTree:
    """Build a LayoutTree from the nested layout described above."""
    if layout is None:
        return LayoutTree()
    nodes: dict = {}
    root = _add(nodes, layout)
    return LayoutTree(ids=sorted(nodes), nodes=nodes, root=root)


def shape(tree: LayoutTree, node_id=None):
    """Inverse of build_tree (ignoring grow): nested ids for easy asserts."""
    node_id = node_id or tree.root
    if node_id is None:
        return None
    node = tree.nodes[node_id]
    if isinstance(node, ContentNode):
        return node_id
    return (node.direction, [shape(tree, child) for child in node.children])


@pytest.fixture
def make_tree():
    return build_tree


@pytest.fixture
def tree_shape():
    return shape


@pytest.fixture
def assert_valid():
    def check(tree: LayoutTree):
        problems = find_problems(tree)
        assert problems == [], problems
    return check
