"""Reference-counted storage cell.

A Cell is the shared-ownership primitive underneath CowContainer: one heap slot
holding a value plus a strong count. Count changes happen under a lock so that
handles may be cloned and dropped from any thread.
"""

from __future__ import annotations

import threading
from typing import Any


class Cell[T]:
    """Heap slot holding one value and the number of handles that reference it.

    A new cell starts with a strong count of 1 (its creator). The cell drops
    its value once the count reaches zero.
    """

    __slots__ = ("value", "_count", "_lock")

    def __init__(self, value: T) -> None:
        self.value: T = value
        self._count = 1
        self._lock = threading.Lock()

    @property
    def strong_count(self) -> int:
        """Number of live handles referencing this cell."""
        with self._lock:
            return self._count

    def is_unique(self) -> bool:
        """Return True if exactly one handle references this cell."""
        with self._lock:
            return self._count == 1

    def acquire(self) -> Cell[T]:
        """Register one more handle and return this cell.

        Raises:
            RuntimeError: If the cell was already released by its last holder.
        """
        with self._lock:
            if self._count == 0:
                raise RuntimeError("Cannot acquire a cell that has already been released")
            self._count += 1
        return self

    def release(self) -> int:
        """Drop one handle's reference.

        Returns:
            Remaining strong count. At zero the value reference is dropped.

        Raises:
            RuntimeError: If released more times than acquired.
        """
        with self._lock:
            if self._count == 0:
                raise RuntimeError("Cell released more times than it was acquired")
            self._count -= 1
            remaining = self._count
            if remaining == 0:
                del self.value
        return remaining

    def replace_if_unique(self, value: T) -> bool:
        """Store `value` if this cell has a single holder.

        The count check and the write happen under one lock acquisition.

        Returns:
            True if the value was replaced in place, False if the cell is shared.
        """
        with self._lock:
            if self._count != 1:
                return False
            self.value = value
            return True

    @property
    def released(self) -> bool:
        """Whether the last holder has released this cell."""
        with self._lock:
            return self._count == 0

    def __repr__(self) -> str:
        with self._lock:
            count = self._count
            value: Any = self.value if count else "<released>"
        return f"Cell({value!r}, strong_count={count})"
