"""Red-black tree nodes, rotations and insertion rebalancing.

Nodes are intrusive: callers place a node in the tree as an ordinary
binary-search-tree leaf and then call :func:`insert_rebalance`, which restores
the red-black properties and returns the (possibly new) root.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional


class Color(enum.Enum):
    """Colour of a red-black tree node."""

    RED = 0
    BLACK = 1


@dataclass(eq=False)
class RBNode:
    """A red-black tree node linked to its parent and children."""

    left: Optional["RBNode"] = field(default=None, repr=False)
    right: Optional["RBNode"] = field(default=None, repr=False)
    parent: Optional["RBNode"] = field(default=None, repr=False)
    color: Color = Color.RED

    def grandparent(self) -> Optional["RBNode"]:
        """Return the parent of this node's parent, or None."""
        return self.parent.parent if self.parent is not None else None

    def uncle(self) -> Optional["RBNode"]:
        """Return the sibling of this node's parent, or None."""
        parent = self.parent
        if parent is None or parent.parent is None:
            return None
        grandparent = parent.parent
        return grandparent.right if parent is grandparent.left else grandparent.left

    def sibling(self) -> Optional["RBNode"]:
        """Return the other child of this node's parent, or None."""
        parent = self.parent
        if parent is None:
            return None
        return parent.right if parent.left is self else parent.left

    def is_left(self) -> bool:
        """True if this node is the left child of its parent."""
        return self.parent is not None and self.parent.left is self

    def is_right(self) -> bool:
        """True if this node is the right child of its parent."""
        return self.parent is not None and self.parent.right is self


def _color(node: Optional[RBNode]) -> Color:
    return node.color if node is not None else Color.BLACK


def _replace_in_parent(parent: Optional[RBNode], old: RBNode, new: Optional[RBNode]) -> None:
    if parent is None:
        return
    if parent.left is old:
        parent.left = new
    else:
        parent.right = new


def rotate_left(node: RBNode) -> None:
    """Rotate the subtree rooted at ``node`` to the left."""
    pivot = node.right
    if pivot is None:
        raise ValueError("cannot rotate left: node has no right child")
    outer = node.parent
    pivot.parent = outer
    _replace_in_parent(outer, node, pivot)

    node.right = pivot.left
    if pivot.left is not None:
        pivot.left.parent = node

    pivot.left = node
    node.parent = pivot


def rotate_right(node: RBNode) -> None:
    """Rotate the subtree rooted at ``node`` to the right."""
    pivot = node.left
    if pivot is None:
        raise ValueError("cannot rotate right: node has no left child")
    outer = node.parent
    pivot.parent = outer
    _replace_in_parent(outer, node, pivot)

    node.left = pivot.right
    if pivot.right is not None:
        pivot.right.parent = node

    pivot.right = node
    node.parent = pivot


def _rebalance_black_uncle(
    root: Optional[RBNode], node: RBNode, parent: RBNode, grandparent: RBNode
) -> Optional[RBNode]:
    node_is_right = node.is_right()
    parent_is_left = parent.is_left()
    node.color = Color.RED

    # Inner grandchild: rotate it to the outside first.
    if node_is_right and parent_is_left:
        rotate_left(parent)
        node = node.left
    elif not node_is_right and not parent_is_left:
        rotate_right(parent)
        node = node.right

    parent = node.parent
    parent.color = Color.BLACK
    grandparent.color = Color.RED
    if parent_is_left:
        rotate_right(grandparent)
    else:
        rotate_left(grandparent)

    return parent if root is grandparent else root


def insert_rebalance(root: Optional[RBNode], node: RBNode) -> RBNode:
    """Restore red-black properties after ``node`` was linked in as a leaf.

    ``node`` must already be a child of its parent (or the lone root) with
    its ``parent`` field set. Returns the root of the resulting tree.
    """
    if node is None:
        raise ValueError("node must not be None")

    while True:
        parent = node.parent
        if parent is None:
            node.color = Color.BLACK
            return node

        if parent.color is Color.BLACK:
            node.color = Color.RED
            return root

        grandparent = parent.parent
        uncle = node.uncle()
        if _color(uncle) is Color.BLACK:
            return _rebalance_black_uncle(root, node, parent, grandparent)

        parent.color = Color.BLACK
        uncle.color = Color.BLACK
        grandparent.color = Color.RED
        node.color = Color.RED
        node = grandparent