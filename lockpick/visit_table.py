"""A fixed-capacity, thread-safe, insert-only hash table of visited entries."""

from __future__ import annotations

import threading
from typing import Any, Callable, List

from lockpick.spinlock_bitset import SpinlockBitset

_MISSING = object()


class VisitTableFullError(RuntimeError):
    """Raised when an insertion finds no free bucket."""


def _is_pow_2(value: int) -> bool:
    return value > 0 and value & (value - 1) == 0


class VisitTable:
    """Open-addressing hash set with linear probing and per-bucket locks.

    ``capacity`` must be a power of two. ``hsh`` hashes an entry and
    ``eq`` tells whether two entries are equal.
    """

    def __init__(
        self,
        capacity: int,
        hsh: Callable[[Any], int],
        eq: Callable[[Any, Any], bool],
    ) -> None:
        if hsh is None:
            raise ValueError("entry hash function must not be None")
        if eq is None:
            raise ValueError("entry equality function must not be None")
        if not _is_pow_2(capacity):
            raise ValueError("capacity must be a power of 2")
        self.capacity = capacity
        self._mask = capacity - 1
        self._hsh = hsh
        self._eq = eq
        self._buckets: List[Any] = [None] * capacity
        self._occupied: List[bool] = [False] * capacity
        self._spins = SpinlockBitset(capacity)
        self._count_lock = threading.Lock()
        self._count = 0

    @classmethod
    def from_max_elements(
        cls,
        max_elements: int,
        hsh: Callable[[Any], int],
        eq: Callable[[Any, Any], bool],
    ) -> "VisitTable":
        """Create a table sized to at least twice ``max_elements``."""
        if max_elements <= 0:
            raise ValueError("max elements number must be greater than 0")
        ceil_log2 = (max_elements - 1).bit_length()
        return cls(1 << (ceil_log2 + 1), hsh, eq)

    def __len__(self) -> int:
        return self._count

    def insert(self, entry: Any) -> bool:
        """Insert ``entry``; return False if an equal entry is present."""
        bucket = self._hsh(entry) & self._mask
        native = bucket
        while True:
            self._spins.lock(bucket)
            try:
                occupied = self._occupied[bucket]
                if occupied:
                    duplicate = self._eq(entry, self._buckets[bucket])
                else:
                    self._occupied[bucket] = True
                    self._buckets[bucket] = entry
                    duplicate = False
            finally:
                self._spins.unlock(bucket)

            if duplicate:
                return False
            if not occupied:
                with self._count_lock:
                    self._count += 1
                return True

            bucket = (bucket + 1) & self._mask
            if bucket == native:
                raise VisitTableFullError(
                    f"visit table capacity {self.capacity} exceeded"
                )

    def get(self, entry: Any, default: Any = None) -> Any:
        """Return the stored entry equal to ``entry``, or ``default``."""
        bucket = self._hsh(entry) & self._mask
        native = bucket
        while True:
            self._spins.lock(bucket)
            try:
                occupied = self._occupied[bucket]
                found = occupied and self._eq(entry, self._buckets[bucket])
                stored = self._buckets[bucket] if found else None
            finally:
                self._spins.unlock(bucket)

            if not occupied:
                return default
            if found:
                return stored

            bucket = (bucket + 1) & self._mask
            if bucket == native:
                return default

    def __contains__(self, entry: Any) -> bool:
        return self.get(entry, _MISSING) is not _MISSING