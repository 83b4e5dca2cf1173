"""An ordered set backed by a red-black tree with a user-supplied ordering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Tuple

from lockpick.rb_remove import remove as _rb_remove
from lockpick.rb_tree import RBNode, insert_rebalance


@dataclass(eq=False)
class SetEntry(RBNode):
    """A tree node holding one element of an :class:`OrderedSet`."""

    data: Any = None

    def next(self) -> Optional["SetEntry"]:
        """Return the entry following this one in set order, or None."""
        node = self.right
        if node is not None:
            while node.left is not None:
                node = node.left
            return node
        node = self
        parent = node.parent
        while parent is not None and parent.right is node:
            node = parent
            parent = node.parent
        return parent

    def prev(self) -> Optional["SetEntry"]:
        """Return the entry preceding this one in set order, or None."""
        node = self.left
        if node is not None:
            while node.right is not None:
                node = node.right
            return node
        node = self
        parent = node.parent
        while parent is not None and parent.left is node:
            node = parent
            parent = node.parent
        return parent


class OrderedSet:
    """A set ordered by ``less(a, b)``, which is true when ``a`` precedes ``b``.

    Two elements are equal when neither is less than the other.
    """

    def __init__(self, less: Callable[[Any, Any], bool]) -> None:
        if less is None:
            raise ValueError("comparison function must not be None")
        self._less = less
        self._root: Optional[SetEntry] = None
        self._size = 0

    def _locate(self, item: Any) -> Tuple[Optional[SetEntry], Optional[SetEntry], bool]:
        """Return (matching entry, last visited node, went_right)."""
        node = self._root
        parent: Optional[SetEntry] = None
        went_right = False
        while node is not None:
            parent = node
            if self._less(node.data, item):
                node = node.right
                went_right = True
            elif self._less(item, node.data):
                node = node.left
                went_right = False
            else:
                return node, parent, went_right
        return None, parent, went_right

    def add(self, item: Any) -> Tuple[SetEntry, bool]:
        """Insert ``item`` unless an equal element is present.

        Returns the entry holding the element equal to ``item`` and whether
        the insertion took place.
        """
        found, parent, went_right = self._locate(item)
        if found is not None:
            return found, False
        entry = SetEntry(data=item)
        entry.parent = parent
        if parent is not None:
            if went_right:
                parent.right = entry
            else:
                parent.left = entry
        self._root = insert_rebalance(self._root, entry)
        self._size += 1
        return entry, True

    def get(self, item: Any, default: Any = None) -> Any:
        """Return the stored element equal to ``item``, or ``default``."""
        found, _, _ = self._locate(item)
        return found.data if found is not None else default

    def find_entry(self, item: Any) -> Optional[SetEntry]:
        """Return the entry holding an element equal to ``item``, or None."""
        found, _, _ = self._locate(item)
        return found

    def remove(self, item: Any) -> bool:
        """Remove the element equal to ``item``; False if there is none.

        Raises KeyError when the set is empty.
        """
        if self._size == 0:
            raise KeyError("set is empty")
        found, _, _ = self._locate(item)
        if found is None:
            return False
        self._root = _rb_remove(self._root, found)
        self._size -= 1
        return True

    def first(self) -> Optional[SetEntry]:
        """Return the smallest entry, or None if the set is empty."""
        node = self._root
        if node is None:
            return None
        while node.left is not None:
            node = node.left
        return node

    def last(self) -> Optional[SetEntry]:
        """Return the largest entry, or None if the set is empty."""
        node = self._root
        if node is None:
            return None
        while node.right is not None:
            node = node.right
        return node

    def __contains__(self, item: Any) -> bool:
        return self._locate(item)[0] is not None

    def __iter__(self) -> Iterator[Any]:
        entry = self.first()
        while entry is not None:
            yield entry.data
            entry = entry.next()

    def __reversed__(self) -> Iterator[Any]:
        entry = self.last()
        while entry is not None:
            yield entry.data
            entry = entry.prev()

    def __len__(self) -> int:
        return self._size