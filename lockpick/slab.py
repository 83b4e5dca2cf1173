"""A fixed-capacity slab allocator handing out entry indices.

Free space is tracked as a sorted list of disjoint, non-adjacent blocks of
free entries. Allocation always takes the lowest free entry, and freeing an
entry merges it with neighbouring free blocks.
"""

from __future__ import annotations

from bisect import bisect_right
from typing import Any, Iterator, List, Tuple


class SlabFullError(MemoryError):
    """Raised when a slab has no free entry left."""


class Slab:
    """``total_entries`` slots that can be allocated and freed by index.

    Each allocated slot holds one value, reachable with ``slab[index]``.
    """

    def __init__(self, total_entries: int) -> None:
        if total_entries < 0:
            raise ValueError("number of entries must not be negative")
        self.total_entries = total_entries
        self._values: List[Any] = [None] * total_entries
        # Each block is [base, size]; blocks are sorted by base.
        self._blocks: List[List[int]] = [[0, total_entries]] if total_entries else []
        self.total_free = total_entries

    def _block_index_of(self, index: int) -> int:
        """Return the position of the last block whose base is <= ``index``."""
        return bisect_right(self._blocks, index, key=lambda block: block[0]) - 1

    def _is_free(self, index: int) -> bool:
        pos = self._block_index_of(index)
        if pos < 0:
            return False
        base, size = self._blocks[pos]
        return index < base + size

    def _check_range(self, index: int) -> None:
        if not 0 <= index < self.total_entries:
            raise IndexError(
                f"entry index {index} does not belong to the slab "
                f"(size: {self.total_entries})"
            )

    def _check_allocated(self, index: int) -> None:
        self._check_range(index)
        if self._is_free(index):
            raise ValueError(f"entry {index} is not allocated")

    def alloc(self) -> int:
        """Allocate the lowest free entry and return its index."""
        if not self._blocks:
            raise SlabFullError("no free entries left in the slab")
        head = self._blocks[0]
        index = head[0]
        if head[1] > 1:
            head[0] += 1
            head[1] -= 1
        else:
            del self._blocks[0]
        self.total_free -= 1
        self._values[index] = None
        return index

    def free(self, index: int) -> None:
        """Return the entry at ``index`` to the slab."""
        self._check_allocated(index)
        self._values[index] = None
        self.total_free += 1

        pos = self._block_index_of(index) + 1
        prev = self._blocks[pos - 1] if pos > 0 else None
        nxt = self._blocks[pos] if pos < len(self._blocks) else None
        joins_prev = prev is not None and prev[0] + prev[1] == index
        joins_next = nxt is not None and nxt[0] == index + 1

        if joins_prev and joins_next:
            prev[1] += nxt[1] + 1
            del self._blocks[pos]
        elif joins_next:
            nxt[0] -= 1
            nxt[1] += 1
        elif joins_prev:
            prev[1] += 1
        else:
            self._blocks.insert(pos, [index, 1])

    def free_blocks(self) -> List[Tuple[int, int]]:
        """Return the free blocks as sorted ``(base, size)`` pairs."""
        return [(base, size) for base, size in self._blocks]

    def __getitem__(self, index: int) -> Any:
        self._check_allocated(index)
        return self._values[index]

    def __setitem__(self, index: int, value: Any) -> None:
        self._check_allocated(index)
        self._values[index] = value

    def __iter__(self) -> Iterator[int]:
        """Yield the indices of allocated entries in ascending order."""
        current = 0
        for base, size in list(self._blocks):
            yield from range(current, base)
            current = base + size
        yield from range(current, self.total_entries)

    def __len__(self) -> int:
        """Number of allocated entries."""
        return self.total_entries - self.total_free