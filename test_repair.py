"""Tests for invariant repair and tree verification."""

import pytest

from dock_mcp.errors import TreeCorruptionError
from dock_mcp.models import ContainerNode, LayoutTree
from dock_mcp.repair import find_problems, repair, verify_tree


def test_nested_same_direction_containers_are_merged(make_tree, tree_shape, assert_valid):
    tree = make_tree(("R", "row", ["A", ("S", "row", ["B", "C"]), "D"]))
    repair(tree)

    assert tree_shape(tree) == ("row", ["A", "B", "C", "D"])
    assert "S" not in tree.nodes
    assert tree.nodes["B"].parent == "R"
    assert tree.nodes["C"].parent == "R"
    assert_valid(tree)


def test_deep_same_direction_run_collapses_in_one_pass(make_tree, tree_shape, assert_valid):
    tree = make_tree(("R", "row", [("S", "row", [("T", "row", ["A", "B"]), "C"]), "D"]))
    repair(tree)

    assert tree_shape(tree) == ("row", ["A", "B", "C", "D"])
    assert set(tree.nodes) == {"R", "A", "B", "C", "D"}
    assert_valid(tree)


def test_chain_of_degenerate_containers_resolves_to_child(make_tree, assert_valid):
    tree = make_tree(("X", "column", [("Y", "column", [("Z", "row", ["A", "B"])])]))
    repair(tree)

    assert tree.root == "Z"
    assert tree.nodes["Z"].parent is None
    assert "X" not in tree.nodes
    assert "Y" not in tree.nodes
    assert_valid(tree)


def test_promoted_child_merges_with_same_direction_grandparent(make_tree, tree_shape, assert_valid):
    tree = make_tree(("R", "row", ["A", ("C", "column", [("S", "row", ["B", "D"])])]))
    repair(tree)

    assert tree_shape(tree) == ("row", ["A", "B", "D"])
    assert tree.nodes["B"].parent == "R"
    assert_valid(tree)


def test_promoted_child_takes_container_grow(make_tree):
    tree = make_tree(("R", "row", ["A", ("C", "column", [("B", 5.0)], 3.0)]))
    repair(tree)

    assert tree.nodes["R"].children == ["A", "B"]
    assert tree.nodes["B"].grow == 3.0


def test_degenerate_root_over_tile(make_tree):
    tree = make_tree(("R", "row", ["A"]))
    repair(tree)

    assert tree.root == "A"
    assert tree.ids == ["A"]
    assert tree.nodes["A"].parent is None


def test_repair_keeps_valid_tree_unchanged(make_tree):
    tree = make_tree(("R", "row", ["A", ("C", "column", ["B", "D"])]))
    before = tree.model_dump()
    repair(tree)
    assert tree.model_dump() == before


def test_repair_on_empty_tree():
    tree = LayoutTree()
    repair(tree)
    assert tree.root is None
    assert tree.ids == []


def test_repair_rejects_childless_container():
    tree = LayoutTree(
        ids=["R"],
        nodes={"R": ContainerNode(id="R", direction="row", children=[])},
        root="R",
    )
    with pytest.raises(TreeCorruptionError):
        repair(tree)


def test_find_problems_on_valid_tree(make_tree):
    tree = make_tree(("R", "row", ["A", ("C", "column", ["B", "D"])]))
    assert find_problems(tree) == []
    verify_tree(tree)


def test_find_problems_reports_each_invariant(make_tree):
    tree = make_tree(("R", "row", ["A", ("S", "row", ["B", "C"])]))
    problems = " ".join(find_problems(tree))
    assert "shares direction" in problems

    tree = make_tree(("R", "row", ["A", "B"]))
    tree.ids = ["R", "A", "B"]
    assert any("sorted" in p for p in find_problems(tree))

    tree = make_tree(("R", "row", ["A", "B"]))
    tree.nodes["R"].children.remove("B")
    problems = " ".join(find_problems(tree))
    assert "1 child" in problems
    assert "unreachable nodes: B" in problems

    tree = make_tree(("R", "row", ["A", "B"]))
    tree.nodes["A"].parent = "B"
    assert any("has parent B" in p for p in find_problems(tree))

    tree = make_tree(("R", "row", ["A", "B"]))
    tree.nodes["R"].parent = "A"
    assert any("root R has parent" in p for p in find_problems(tree))


def test_empty_tree_must_not_hold_nodes(make_tree):
    tree = make_tree("A")
    tree.root = None
    with pytest.raises(TreeCorruptionError, match="no root"):
        verify_tree(tree)


def test_promotion_into_non_container_parent_is_rejected(make_tree):
    tree = make_tree(("R", "row", ["A", ("C", "column", ["B"])]))
    tree.nodes["C"].parent = "A"
    with pytest.raises(TreeCorruptionError, match="not a container"):
        repair(tree)
