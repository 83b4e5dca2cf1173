"""Removal of nodes from a red-black tree and a consistency checker."""

from __future__ import annotations

from typing import Optional, Tuple

from lockpick.rb_tree import Color, RBNode, rotate_left, rotate_right


def _color(node: Optional[RBNode]) -> Color:
    return node.color if node is not None else Color.BLACK


def _leftmost(node: RBNode) -> RBNode:
    while node.left is not None:
        node = node.left
    return node


def _rebind_child(parent: RBNode, old: RBNode, new: Optional[RBNode]) -> None:
    if parent.left is old:
        parent.left = new
    elif parent.right is old:
        parent.right = new
    else:
        raise ValueError("node's parent must reference that node")


def _relatives(
    node: RBNode,
) -> Tuple[Optional[RBNode], Optional[RBNode], Optional[RBNode], Optional[RBNode]]:
    """Return (parent, sibling, close nephew, distant nephew) of ``node``."""
    parent = node.parent
    if parent is None:
        return None, None, None, None
    if parent.left is node:
        sibling = parent.right
        if sibling is None:
            return parent, None, None, None
        return parent, sibling, sibling.left, sibling.right
    sibling = parent.left
    if sibling is None:
        return parent, None, None, None
    return parent, sibling, sibling.right, sibling.left


def _rotate_towards(node: RBNode, parent: RBNode) -> None:
    """Rotate around ``parent`` so that ``node`` moves down its own side."""
    if node.is_left():
        rotate_left(parent)
    else:
        rotate_right(parent)


def _rebalance_black_leaf(root: RBNode, node: RBNode) -> RBNode:
    """Fix the black height before the black leaf ``node`` is unlinked."""
    while True:
        parent, sibling, close, dist = _relatives(node)
        if parent is None:
            return root
        if sibling is None:
            raise ValueError("tree is not a valid red-black tree")

        if (
            parent.color is Color.BLACK
            and sibling.color is Color.BLACK
            and _color(close) is Color.BLACK
            and _color(dist) is Color.BLACK
        ):
            sibling.color = Color.RED
            node = parent
            continue

        if sibling.color is Color.RED:
            if root is parent:
                root = sibling
            parent.color = Color.RED
            sibling.color = Color.BLACK
            _rotate_towards(node, parent)
            parent, sibling, close, dist = _relatives(node)

        if (
            parent.color is Color.RED
            and _color(close) is Color.BLACK
            and _color(dist) is Color.BLACK
        ):
            sibling.color = Color.RED
            parent.color = Color.BLACK
            return root

        if (
            sibling.color is Color.BLACK
            and _color(close) is Color.RED
            and _color(dist) is Color.BLACK
        ):
            sibling.color = Color.RED
            close.color = Color.BLACK
            if node.is_left():
                rotate_right(sibling)
                dist, sibling = sibling, close
                close = sibling.left
            else:
                rotate_left(sibling)
                dist, sibling = sibling, close
                close = sibling.right

        if root is parent:
            root = sibling

        sibling.color = parent.color
        parent.color = Color.BLACK
        dist.color = Color.BLACK
        _rotate_towards(node, parent)
        return root


def _detach(node: RBNode) -> None:
    node.parent = None
    node.left = None
    node.right = None


def _remove_leaf(root: RBNode, node: RBNode) -> Optional[RBNode]:
    parent = node.parent
    if parent is None:
        _detach(node)
        return None
    if node.color is Color.BLACK:
        root = _rebalance_black_leaf(root, node)
    _rebind_child(parent, node, None)
    _detach(node)
    return root


def _remove_with_one_child(root: RBNode, node: RBNode, child: RBNode) -> RBNode:
    parent = node.parent
    child.parent = parent
    child.color = Color.BLACK
    _detach(node)
    if parent is not None:
        _rebind_child(parent, node, child)
        return root
    return child


def _swap_with_successor(root: RBNode, node: RBNode) -> RBNode:
    """Move ``node`` into its in-order successor's place, and vice versa."""
    successor = _leftmost(node.right)
    sc_parent = successor.parent
    sc_left = successor.left
    sc_right = successor.right
    node_parent = node.parent

    if node_parent is None:
        root = successor

    successor.color, node.color = node.color, successor.color

    successor.parent = node_parent
    if node_parent is not None:
        _rebind_child(node_parent, node, successor)

    if node.left is not None:
        node.left.parent = successor
    successor.left = node.left

    if successor is node.right:
        successor.right = node
        node.parent = successor
    else:
        node.right.parent = successor
        successor.right = node.right
        node.parent = sc_parent
        sc_parent.left = node

    if sc_right is not None:
        sc_right.parent = node
    node.right = sc_right
    node.left = sc_left
    return root


def remove(root: RBNode, node: RBNode) -> Optional[RBNode]:
    """Unlink ``node`` from the tree rooted at ``root`` and rebalance.

    Returns the root of the resulting tree, or None if it became empty.
    """
    if root is None:
        raise ValueError("root must not be None")
    if node is None:
        raise ValueError("node must not be None")

    if node.left is not None and node.right is not None:
        root = _swap_with_successor(root, node)

    child = node.left if node.left is not None else node.right
    if child is not None:
        return _remove_with_one_child(root, node, child)
    return _remove_leaf(root, node)


def _check_subtree(node: Optional[RBNode], blacks_required: int) -> bool:
    if node is None:
        return True
    parent = node.parent
    if parent is not None and parent.left is not node and parent.right is not node:
        return False
    if node.color is Color.BLACK:
        blacks_required -= 1
    elif _color(node.left) is Color.RED or _color(node.right) is Color.RED:
        return False
    if blacks_required < 0:
        return False
    return _check_subtree(node.left, blacks_required) and _check_subtree(
        node.right, blacks_required
    )


def check_consistency(root: Optional[RBNode]) -> bool:
    """Check parent links, red-red violations and black counts along paths."""
    blacks = 0
    node = root
    while node is not None:
        if node.color is Color.BLACK:
            blacks += 1
        node = node.left
    return _check_subtree(root, blacks)