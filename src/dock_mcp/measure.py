"""
Measurement pass for Dock-MCP.

Converts relative ``grow`` weights into absolute percentage insets, top
down.  The root occupies the whole layout (inset 0 on every side); each
container slices its span along its direction in proportion to the
children's grow values and hands every child the container's insets on
the cross axis.  A divider is emitted between each pair of neighbours.

There is no cache — the pass is linear in the tree size and callers simply
rerun it after every edit and on every drag move.
"""

from __future__ import annotations

from .errors import InvalidGrowError
from .models import ContainerNode, Divider, Inset, LayoutTree, Measurement


def measure(tree: LayoutTree) -> Measurement:
    """Compute insets for every reachable node and the list of dividers.

    Containers record the inset they were given.  Within one container
    dividers run left-to-right / top-to-bottom; the divider in front of a
    child container comes after that container's own dividers.

    Raises:
        InvalidGrowError: If a container's children sum to zero grow.
    """
    result = Measurement()
    if tree.root is None:
        return result

    _measure_node(tree, tree.root, Inset(), result)
    return result


def _measure_node(tree: LayoutTree, node_id: str, inset: Inset, result: Measurement) -> None:
    node = tree.nodes[node_id]
    result.insets[node_id] = inset

    if not isinstance(node, ContainerNode):
        return

    total_grow = sum(tree.nodes[child_id].grow for child_id in node.children)
    if total_grow <= 0:
        raise InvalidGrowError(node_id, total_grow, f"Container {node_id} has zero total grow")

    if node.direction == "row":
        span = 100 - (inset.left + inset.right)
    else:
        span = 100 - (inset.top + inset.bottom)

    grow_sum = 0.0
    previous_id = None
    previous_lower = None

    for child_id in node.children:
        fraction = tree.nodes[child_id].grow / total_grow

        if node.direction == "row":
            x1 = inset.left + grow_sum * span
            x2 = x1 + fraction * span
            child_inset = Inset(left=x1, right=100 - x2, top=inset.top, bottom=inset.bottom)
            lower, upper = x1, x2
        else:
            y1 = inset.top + grow_sum * span
            y2 = y1 + fraction * span
            child_inset = Inset(left=inset.left, right=inset.right, top=y1, bottom=100 - y2)
            lower, upper = y1, y2

        _measure_node(tree, child_id, child_inset, result)

        # A pair's divider follows the dividers inside its second child.
        if previous_id is not None:
            result.dividers.append(_divider(node, previous_id, child_id, inset, previous_lower, lower, upper))

        grow_sum += fraction
        previous_id = child_id
        previous_lower = lower


def _divider(
    node: ContainerNode,
    before: str,
    after: str,
    inset: Inset,
    lower: float,
    boundary: float,
    upper: float,
) -> Divider:
    """Describe the boundary at ``boundary`` between ``before`` and ``after``.

    ``lower`` is where ``before`` starts and ``upper`` where ``after`` ends.
    """
    if node.direction == "row":
        return Divider(
            id=f"{before}:{after}",
            before=before,
            after=after,
            orientation="vertical",
            left=boundary,
            right=100 - boundary,
            top=inset.top,
            bottom=inset.bottom,
            lower=lower,
            upper=upper,
        )
    return Divider(
        id=f"{before}:{after}",
        before=before,
        after=after,
        orientation="horizontal",
        left=inset.left,
        right=inset.right,
        top=boundary,
        bottom=100 - boundary,
        lower=lower,
        upper=upper,
    )
