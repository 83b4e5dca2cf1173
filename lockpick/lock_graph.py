"""Locking of blocks that exclude a declared set of other blocks."""

from __future__ import annotations

import threading
from typing import List


class LockGraphError(RuntimeError):
    """Raised when a lock graph is used in a state that forbids the call."""


class LockGraph:
    """A graph of blocks in which locking a block holds off its lockees.

    Dependencies are declared with :meth:`add_dep` and :meth:`add_dep_mutual`
    and frozen by :meth:`commit`. Locking a block waits until no other locked
    block holds it off, then holds off every lockee of that block.
    """

    def __init__(self, blocks_num: int) -> None:
        if blocks_num < 0:
            raise ValueError("number of blocks must not be negative")
        self.blocks_num = blocks_num
        self.committed = False
        self._lockees: List[List[int]] = [[] for _ in range(blocks_num)]
        self._counters: List[int] = [0] * blocks_num
        self._cond = threading.Condition()

    def _check_index(self, index: int, what: str) -> None:
        if not 0 <= index < self.blocks_num:
            raise IndexError(
                f"{what} index {index} is out of range (max: {self.blocks_num - 1})"
            )

    def _require_open(self) -> None:
        if self.committed:
            raise LockGraphError("graph is committed")

    def _require_committed(self) -> None:
        if not self.committed:
            raise LockGraphError("graph must be committed")

    def _add(self, locker: int, lockee: int) -> None:
        lockees = self._lockees[locker]
        if lockee in lockees:
            raise LockGraphError(
                f"lockee {lockee} is already locked by block {locker}"
            )
        lockees.append(lockee)

    def add_dep(self, locker: int, lockee: int) -> None:
        """Declare that locking ``locker`` holds off ``lockee``."""
        self._check_index(locker, "locker")
        self._check_index(lockee, "lockee")
        self._require_open()
        self._add(locker, lockee)

    def add_dep_mutual(self, a: int, b: int) -> None:
        """Declare that ``a`` and ``b`` hold each other off."""
        self._check_index(a, "block")
        self._check_index(b, "block")
        self._require_open()
        self._add(a, b)
        if a != b:
            self._add(b, a)

    def commit(self) -> None:
        """Freeze the dependencies; locking is allowed only afterwards."""
        self._require_open()
        self.committed = True

    def lock(self, block: int) -> None:
        """Wait until ``block`` is not held off, then hold off its lockees."""
        self._check_index(block, "block")
        self._require_committed()
        with self._cond:
            while self._counters[block] != 0:
                self._cond.wait()
            for lockee in self._lockees[block]:
                self._counters[lockee] += 1

    def unlock(self, block: int) -> None:
        """Release the lockees held off by ``block``."""
        self._check_index(block, "block")
        self._require_committed()
        with self._cond:
            for lockee in self._lockees[block]:
                self._counters[lockee] -= 1
            self._cond.notify_all()

    def locked(self, block: int) -> bool:
        """True if some locked block currently holds ``block`` off."""
        self._check_index(block, "block")
        with self._cond:
            return self._counters[block] != 0