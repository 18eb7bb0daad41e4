"""Copy-on-write container.

CowContainer shares one Cell across all of its clones. Reads never copy. A
mutation through a handle whose cell is shared first copies the value into a
fresh cell (detach); a mutation through the sole owner happens in place.

Usage:
    template = CowContainer([1, 2, 3])
    derived = template.clone()                  # same storage, no copy
    derived.update_val(lambda v: v.append(4))   # detaches, then mutates the copy

    assert template.deref() == [1, 2, 3]
    assert derived.deref() == [1, 2, 3, 4]
    assert not ptr_eq(template, derived)
"""

from __future__ import annotations

import warnings
import weakref
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from cowarc.cell import Cell
from cowarc.cloning import Copier, clone_value
from cowarc.config import get_settings
from cowarc.stats import CowStats, get_stats
from cowarc.types import Copy


class BorrowError(Exception):
    """Raised when a handle is used while a mutable borrow of it is active."""

    pass


def _tracked_stats() -> CowStats | None:
    """Return the stats sink if tracking is enabled."""
    if get_settings().track_stats:
        return get_stats()
    return None


class MutableRef[T]:
    """Exclusive view of a container's value, valid only inside `borrow_mut()`.

    Reading `.value` gives the exclusively owned value for in-place mutation;
    assigning `.value` replaces it.
    """

    __slots__ = ("_cell", "_active")

    def __init__(self, cell: Cell[T]) -> None:
        self._cell = cell
        self._active = True

    @property
    def value(self) -> T:
        self._check_active()
        return self._cell.value

    @value.setter
    def value(self, new_value: T) -> None:
        self._check_active()
        self._cell.value = new_value

    @property
    def active(self) -> bool:
        return self._active

    def _check_active(self) -> None:
        if not self._active:
            raise BorrowError("MutableRef used after its borrow_mut() block ended")

    def _expire(self) -> None:
        self._active = False


class CowContainer[T]:
    """Value holder that shares storage across clones and copies on write.

    Args:
        value: Initial value. The container takes ownership; do not keep mutating it.
        copier: Optional function used to copy the value on detach.
            Defaults to `clone_value` resolution (Cloneable, Pydantic, deepcopy).
    """

    __slots__ = ("_cell", "_release", "_copier", "_borrowed", "__weakref__")

    def __init__(self, value: T, *, copier: Copier[T] | None = None) -> None:
        self._copier = copier
        self._borrowed = False
        self._bind(Cell(value))
        stats = _tracked_stats()
        if stats is not None:
            stats.record_allocation()

    def _bind(self, cell: Cell[T]) -> None:
        """Point this handle at `cell`, then release the previously bound cell.

        The release is also registered as a finalizer so that a garbage collected
        handle gives up its reference.
        """
        previous: weakref.finalize | None = getattr(self, "_release", None)
        self._cell = cell
        self._release = weakref.finalize(self, cell.release)
        if previous is not None:
            previous()

    def _check_not_borrowed(self, operation: str) -> None:
        if self._borrowed:
            raise BorrowError(
                f"Cannot {operation}() while a mutable borrow of this container is active"
            )

    def _detached_copy(self) -> Copy[T]:
        return clone_value(self._cell.value, self._copier)

    # Read access

    def deref(self) -> T:
        """Return the current value without copying.

        The returned object is shared with every clone that has not been mutated
        since; treat it as read-only.

        Raises:
            BorrowError: If called from inside a mutator or borrow_mut() block.
        """
        self._check_not_borrowed("deref")
        return self._cell.value

    @property
    def strong_count(self) -> int:
        """Number of containers currently sharing this storage."""
        return self._cell.strong_count

    @property
    def is_unique(self) -> bool:
        """Whether this container is the sole owner of its storage."""
        return self._cell.is_unique()

    @property
    def storage_id(self) -> int:
        """Identity of the backing cell. Equal for containers sharing storage."""
        return id(self._cell)

    def ptr_eq(self, other: CowContainer[Any]) -> bool:
        """Return True if both containers share the same storage."""
        return self._cell is other._cell

    # Cloning

    def clone(self) -> CowContainer[T]:
        """Return a new handle to the same storage. Never copies the value."""
        self._check_not_borrowed("clone")
        cls = type(self)
        twin = cls.__new__(cls)
        twin._copier = self._copier
        twin._borrowed = False
        twin._bind(self._cell.acquire())
        stats = _tracked_stats()
        if stats is not None:
            stats.record_clone()
        return twin

    def __copy__(self) -> CowContainer[T]:
        return self.clone()

    def __deepcopy__(self, memo: dict[int, Any]) -> CowContainer[T]:
        # Shared storage is immutable until detached, so sharing is a valid deep copy
        return self.clone()

    # Mutation

    def set_val(self, value: T) -> None:
        """Replace the whole value.

        Sole owner: the cell's contents are replaced, storage identity is kept.
        Shared: this handle moves to a new cell holding `value`; other holders
        keep observing the old value.
        """
        self._check_not_borrowed("set_val")
        stats = _tracked_stats()
        if self._cell.replace_if_unique(value):
            if stats is not None:
                stats.record_in_place_write()
            return
        self._bind(Cell(value))
        if stats is not None:
            stats.record_detach()

    def update_val(self, mutator: Callable[[T], Any]) -> None:
        """Mutate the value through `mutator`, copying first if storage is shared.

        Sole owner: `mutator` is applied to the value in the existing cell.
        Shared: the value is copied, `mutator` is applied once to the private copy,
        and this handle moves to a new cell holding it. The shared original is
        never passed to `mutator`.

        Args:
            mutator: Called with the exclusively owned value. Must not keep a
                reference to it after returning. Its return value is ignored.

        Raises:
            TypeError: If mutator is not callable.
            BorrowError: If called re-entrantly on the same container.
            Exception: Anything raised by `mutator` propagates unchanged. On the
                shared path the container then still holds the original value.
        """
        if not callable(mutator):
            raise TypeError(f"update_val() expects a callable, got {type(mutator).__name__}")
        self._check_not_borrowed("update_val")

        stats = _tracked_stats()
        self._borrowed = True
        try:
            if self._cell.is_unique():
                result = mutator(self._cell.value)
                if stats is not None:
                    stats.record_in_place_write()
            else:
                private = self._detached_copy()
                result = mutator(private)
                self._bind(Cell(private))
                if stats is not None:
                    stats.record_detach()
        finally:
            self._borrowed = False

        if result is not None and get_settings().warn_on_ignored_return:
            warnings.warn(
                f"update_val() mutator returned {type(result).__name__}; the return value "
                f"is ignored. Mutate the argument in place or use set_val()/borrow_mut().",
                stacklevel=2,
            )

    @contextmanager
    def borrow_mut(self) -> Iterator[MutableRef[T]]:
        """Borrow the value exclusively for the duration of a `with` block.

        Same detach decision as update_val(). On the shared path the private
        copy is only bound to this container if the block exits normally.

        Usage:
            with container.borrow_mut() as ref:
                ref.value.append(4)
                ref.value = [0]  # whole replacement also allowed

        Raises:
            BorrowError: If the container is already borrowed.
        """
        self._check_not_borrowed("borrow_mut")
        stats = _tracked_stats()
        self._borrowed = True
        try:
            detached = not self._cell.is_unique()
            cell = Cell(self._detached_copy()) if detached else self._cell
            ref = MutableRef(cell)
            try:
                yield ref
            finally:
                ref._expire()
            if detached:
                self._bind(cell)
                if stats is not None:
                    stats.record_detach()
            elif stats is not None:
                stats.record_in_place_write()
        finally:
            self._borrowed = False

    # Value semantics

    def __eq__(self, other: object) -> Any:
        """Compare wrapped values; returns whatever the value's `==` returns.

        Raises:
            BorrowError: If either container is mutably borrowed.
        """
        self._check_not_borrowed("compare")
        if isinstance(other, CowContainer):
            other._check_not_borrowed("compare")
            return self._cell.value == other._cell.value
        return self._cell.value == other

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        # A borrowed value may be half-mutated; don't read it
        if self._borrowed:
            return f"{type(self).__name__}(<borrowed>)"
        return f"{type(self).__name__}({self._cell.value!r})"


def ptr_eq(a: CowContainer[Any], b: CowContainer[Any]) -> bool:
    """Return True if two containers currently share the same storage."""
    return a.ptr_eq(b)
