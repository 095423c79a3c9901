"""Tests for the tree store: node creation, cloning and traversal."""

import pytest

from dock_mcp.errors import TreeCorruptionError
from dock_mcp.models import ContainerNode, ContentNode, LayoutTree
from dock_mcp.store import (
    clone_tree,
    container_of,
    create_container,
    create_content,
    create_empty,
    deep_copy,
    iter_nodes,
    new_node_id,
    reset_ids,
    subtree_ids,
    visit,
)


def test_create_empty_is_canonical():
    tree = create_empty()
    assert tree.root is None
    assert tree.nodes == {}
    assert tree.ids == []
    assert tree.is_empty()


def test_new_node_ids_are_unique():
    ids = {new_node_id() for _ in range(2000)}
    assert len(ids) == 2000


def test_create_content_defaults():
    node = create_content({"title": "editor"})
    assert isinstance(node, ContentNode)
    assert node.kind == "content"
    assert node.grow == 1.0
    assert node.parent is None
    assert node.payload == {"title": "editor"}


def test_create_content_registers_without_sorting():
    tree = create_empty()
    first = create_content("a", tree)
    second = create_content("b", tree)
    assert tree.ids == [first.id, second.id]
    assert tree.nodes[first.id] is first
    assert tree.nodes[second.id] is second


def test_create_container_does_not_reparent_children(make_tree):
    tree = make_tree(("R", "row", ["A", "B"]))
    container = create_container("column", ["A"], tree, grow=2.0)
    assert isinstance(container, ContainerNode)
    assert container.children == ["A"]
    assert container.grow == 2.0
    assert tree.nodes["A"].parent == "R"
    assert tree.ids[-1] == container.id


def test_clone_tree_is_independent(make_tree):
    tree = make_tree(("R", "row", ["A", "B"]))
    copy = clone_tree(tree)

    copy.nodes["R"].children.append("C")
    copy.nodes["A"].grow = 5.0
    copy.ids.append("C")

    assert tree.nodes["R"].children == ["A", "B"]
    assert tree.nodes["A"].grow == 1.0
    assert tree.ids == ["A", "B", "R"]


def test_clone_tree_shares_payloads():
    tree = create_empty()
    payload = ["opaque"]
    node = create_content(payload, tree)
    tree.root = node.id

    assert clone_tree(tree).nodes[node.id].payload is payload
    assert deep_copy(tree).nodes[node.id].payload is not payload


def test_iter_nodes_is_pre_order(make_tree):
    tree = make_tree(("R", "row", ["A", ("C", "column", ["B", "D"]), "E"]))
    order = [node.id for _, node in iter_nodes(tree)]
    assert order == ["R", "A", "C", "B", "D", "E"]

    parents = {node.id: parent.id if parent else None for parent, node in iter_nodes(tree)}
    assert parents == {"R": None, "A": "R", "C": "R", "B": "C", "D": "C", "E": "R"}


def test_visit_calls_visitor_for_every_node(make_tree):
    tree = make_tree(("R", "column", ["A", "B"]))
    seen = []
    visit(tree, lambda parent, node: seen.append(node.id))
    assert seen == ["R", "A", "B"]


def test_iter_nodes_on_empty_tree():
    assert list(iter_nodes(LayoutTree())) == []


def test_subtree_ids(make_tree):
    tree = make_tree(("R", "row", ["A", ("C", "column", ["B", "D"])]))
    assert subtree_ids(tree, "C") == ["C", "B", "D"]
    assert subtree_ids(tree, "A") == ["A"]


def test_reset_ids_and_content_ids(make_tree):
    tree = make_tree(("R", "row", ["B", ("C", "column", ["A", "D"])]))
    tree.ids = ["R", "D", "A"]
    reset_ids(tree)
    assert tree.ids == ["A", "B", "C", "D", "R"]
    assert tree.content_ids() == ["A", "B", "D"]


def test_container_of(make_tree):
    tree = make_tree(("R", "row", ["A", "B"]))
    assert container_of(tree, tree.nodes["A"]) is tree.nodes["R"]
    assert container_of(tree, tree.nodes["R"]) is None

    tree.nodes["A"].parent = "B"
    with pytest.raises(TreeCorruptionError, match="not a container"):
        container_of(tree, tree.nodes["A"])
