"""Value copying used when a container detaches from shared storage.

A detached copy must share no mutable state with the original, otherwise a
mutator could reach the shared value through a nested object.

Copy resolution order:
    1. An explicit copier passed to the container.
    2. The value's own `__cow_clone__` (Cloneable protocol).
    3. `model_copy(deep=True)` for Pydantic models.
    4. `copy.deepcopy`.

Usage:
    @dataclass
    class Template:
        headers: dict[str, str]

        def __cow_clone__(self) -> "Template":
            return Template(headers=dict(self.headers))
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Protocol, Self, TypeVar, cast, runtime_checkable

from pydantic import BaseModel

T = TypeVar("T")

type Copier[T] = Callable[[T], T]
"""Signature: (shared_value) -> private copy"""


@runtime_checkable
class Cloneable(Protocol):
    """Value knows how to produce an independent copy of itself."""

    def __cow_clone__(self) -> Self: ...


def _is_cloneable(value: object) -> bool:
    """Check the Cloneable hook on instances only.

    A class defining `__cow_clone__` is itself a plain value: calling the hook on
    it would be an unbound method call.
    """
    return not isinstance(value, type) and isinstance(value, Cloneable)


def clone_with_protocol(value: T) -> T:
    """Copy a value using the Cloneable protocol.

    Raises:
        TypeError: If value doesn't implement Cloneable.
    """
    if not _is_cloneable(value):
        raise TypeError(f"{type(value).__name__} does not implement Cloneable protocol")
    return cast(T, type(value).__cow_clone__(value))  # type: ignore[attr-defined]


def clone_pydantic(value: T) -> T:
    """Deep copy a Pydantic model via `model_copy`."""
    if not isinstance(value, BaseModel):
        raise TypeError(f"{type(value).__name__} is not a Pydantic model")
    return cast(T, value.model_copy(deep=True))


def clone_value(value: T, copier: Copier[T] | None = None) -> T:
    """Produce a private copy of `value` for a detaching mutation.

    Args:
        value: The shared value to copy. Never modified.
        copier: Optional explicit copy function; wins over everything else.
            A copier that shares nested state gives up isolation for that container.

    Returns:
        A copy that shares no mutable state with `value`.
    """
    if copier is not None:
        return copier(value)
    if _is_cloneable(value):
        return clone_with_protocol(value)
    if isinstance(value, BaseModel):
        return clone_pydantic(value)
    return copy.deepcopy(value)
