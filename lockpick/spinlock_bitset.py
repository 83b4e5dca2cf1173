"""A fixed-size array of binary locks packed into one bitmask."""

from __future__ import annotations

import threading


class SpinlockBitset:
    """``locks_num`` independent non-reentrant locks addressed by index."""

    def __init__(self, locks_num: int) -> None:
        if locks_num < 0:
            raise ValueError("number of locks must not be negative")
        self._locks_num = locks_num
        self._bits = 0
        self._cond = threading.Condition()

    def __len__(self) -> int:
        return self._locks_num

    def _mask(self, index: int) -> int:
        if not 0 <= index < self._locks_num:
            raise IndexError(
                f"spinlock index {index} is out of range (max: {self._locks_num - 1})"
            )
        return 1 << index

    def _test_and_set(self, mask: int) -> bool:
        was_set = bool(self._bits & mask)
        self._bits |= mask
        return was_set

    def lock(self, index: int) -> None:
        """Acquire lock ``index``, waiting until it is free."""
        mask = self._mask(index)
        with self._cond:
            while self._test_and_set(mask):
                self._cond.wait()

    def unlock(self, index: int) -> None:
        """Release lock ``index``; raises RuntimeError if it is not held."""
        mask = self._mask(index)
        with self._cond:
            if not self._bits & mask:
                raise RuntimeError(f"spinlock {index} is not locked")
            self._bits &= ~mask
            self._cond.notify_all()

    def trylock(self, index: int) -> bool:
        """Acquire lock ``index`` if free; return False if it is busy."""
        mask = self._mask(index)
        with self._cond:
            return not self._test_and_set(mask)

    def is_locked(self, index: int) -> bool:
        """True if lock ``index`` is currently held."""
        mask = self._mask(index)
        with self._cond:
            return bool(self._bits & mask)