"""Process-wide counters for copy-on-write activity.

Counters are only updated while `CowSettings.track_stats` is enabled.

Usage:
    from cowarc import get_stats
    from cowarc.config import CowSettings, set_settings

    set_settings(CowSettings(track_stats=True))
    ...
    print(get_stats().snapshot())
    # {"allocations": 3, "clones": 10, "in_place_writes": 4, "detaches": 2}
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, fields


@dataclass(slots=True)
class CowStats:
    """Thread-safe counters describing how containers used their storage.

    Attributes:
        allocations: Cells allocated (construction plus detaches).
        clones: Handles created by clone().
        in_place_writes: Mutations applied to a uniquely owned cell.
        detaches: Mutations that had to copy out of a shared cell.
    """

    allocations: int = 0
    clones: int = 0
    in_place_writes: int = 0
    detaches: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_allocation(self) -> None:
        with self._lock:
            self.allocations += 1

    def record_clone(self) -> None:
        with self._lock:
            self.clones += 1

    def record_in_place_write(self) -> None:
        with self._lock:
            self.in_place_writes += 1

    def record_detach(self) -> None:
        """A detach allocates a new cell, so it also counts as an allocation."""
        with self._lock:
            self.detaches += 1
            self.allocations += 1

    def snapshot(self) -> dict[str, int]:
        """Return a consistent copy of all counters."""
        with self._lock:
            return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "_lock"}

    def reset(self) -> None:
        """Zero all counters."""
        with self._lock:
            self.allocations = 0
            self.clones = 0
            self.in_place_writes = 0
            self.detaches = 0


# Module-level stats instance
_stats = CowStats()


def get_stats() -> CowStats:
    """Access the process-wide counters.

    Returns:
        The CowStats instance shared by all containers.
    """
    return _stats
