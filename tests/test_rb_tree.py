import random

import pytest

from lockpick.rb_tree import Color, RBNode, insert_rebalance, rotate_left, rotate_right


class KeyNode(RBNode):
    def __init__(self, key):
        super().__init__()
        self.key = key


def _link_leaf(root, node):
    """Place ``node`` as a plain BST leaf under ``root``."""
    if root is None:
        return
    current = root
    while True:
        if node.key < current.key:
            if current.left is None:
                current.left = node
                break
            current = current.left
        else:
            if current.right is None:
                current.right = node
                break
            current = current.right
    node.parent = current


def _insert_all(keys):
    root = None
    nodes = []
    for key in keys:
        node = KeyNode(key)
        _link_leaf(root, node)
        root = insert_rebalance(root, node)
        nodes.append(node)
    return root, nodes


def _in_order(node):
    if node is None:
        return []
    return _in_order(node.left) + [node.key] + _in_order(node.right)


def _black_height(node):
    """Return black height of subtree, asserting red-black invariants."""
    if node is None:
        return 1
    for child in (node.left, node.right):
        if child is not None:
            assert child.parent is node
            if node.color is Color.RED:
                assert child.color is Color.BLACK
    left = _black_height(node.left)
    right = _black_height(node.right)
    assert left == right
    return left + (1 if node.color is Color.BLACK else 0)


def test_insert_into_empty_tree_makes_black_root():
    node = KeyNode(1)
    root = insert_rebalance(None, node)
    assert root is node
    assert root.color is Color.BLACK
    assert root.parent is None


def test_insert_none_raises():
    with pytest.raises(ValueError):
        insert_rebalance(None, None)


@pytest.mark.parametrize("keys", [list(range(50)), list(range(50, 0, -1)), [5, 3, 8, 1, 4, 7, 9, 2, 6]])
def test_inserts_keep_invariants(keys):
    root, _ = _insert_all(keys)
    assert root.parent is None
    assert root.color is Color.BLACK
    assert _in_order(root) == sorted(keys)
    _black_height(root)


def test_random_inserts_keep_invariants():
    rng = random.Random(7)
    keys = rng.sample(range(10000), 500)
    root, _ = _insert_all(keys)
    assert _in_order(root) == sorted(keys)
    assert root.color is Color.BLACK
    _black_height(root)


def test_ascending_inserts_rotate_root():
    root, nodes = _insert_all([1, 2, 3])
    assert root is nodes[1]
    assert root.left is nodes[0]
    assert root.right is nodes[2]
    assert nodes[0].color is Color.RED
    assert nodes[2].color is Color.RED


def test_inner_grandchild_double_rotation():
    root, nodes = _insert_all([3, 1, 2])
    assert root is nodes[2]
    assert root.left is nodes[1]
    assert root.right is nodes[0]


def test_relatives():
    root, nodes = _insert_all([2, 1, 3, 4])
    n2, n1, n3, n4 = nodes
    assert root is n2
    assert n4.parent is n3
    assert n4.grandparent() is n2
    assert n4.uncle() is n1
    assert n3.sibling() is n1
    assert n1.sibling() is n3
    assert n1.is_left() and not n1.is_right()
    assert n3.is_right() and not n3.is_left()
    assert root.sibling() is None
    assert root.grandparent() is None
    assert n1.uncle() is None
    assert not root.is_left() and not root.is_right()


def test_recolor_case_makes_parent_and_uncle_black():
    root, nodes = _insert_all([2, 1, 3, 4])
    n2, n1, n3, n4 = nodes
    assert n1.color is Color.BLACK
    assert n3.color is Color.BLACK
    assert n4.color is Color.RED
    assert n2.color is Color.BLACK


def test_rotate_left_structure():
    a, b, c, d = KeyNode("a"), KeyNode("b"), KeyNode("c"), KeyNode("d")
    a.right = b
    b.parent = a
    b.left = c
    c.parent = b
    b.right = d
    d.parent = b
    rotate_left(a)
    assert b.parent is None
    assert b.left is a and a.parent is b
    assert a.right is c and c.parent is a
    assert b.right is d


def test_rotate_right_structure_under_parent():
    top, a, b, c = KeyNode("top"), KeyNode("a"), KeyNode("b"), KeyNode("c")
    top.left = a
    a.parent = top
    a.left = b
    b.parent = a
    b.right = c
    c.parent = b
    rotate_right(a)
    assert top.left is b and b.parent is top
    assert b.right is a and a.parent is b
    assert a.left is c and c.parent is a


def test_rotate_round_trip():
    root, nodes = _insert_all([5, 3, 8, 1, 4])
    before = _in_order(root)
    rotate_right(root)
    new_root = root.parent
    rotate_left(new_root)
    assert root.parent is None
    assert _in_order(root) == before


def test_rotate_without_child_raises():
    node = KeyNode(0)
    with pytest.raises(ValueError):
        rotate_left(node)
    with pytest.raises(ValueError):
        rotate_right(node)