"""cowarc: copy-on-write value containers with shared, reference-counted storage.

Usage:
    from cowarc import CowContainer, ptr_eq

    @dataclass
    class RequestBuilder:
        url: str
        headers: dict[str, str]

    template = CowContainer(RequestBuilder("https://example.org", {"Accept": "*/*"}))

    # Cheap: every clone shares the template's storage
    builders = [template.clone() for _ in range(1000)]

    # Only the builder that changes pays for a copy
    builders[0].update_val(lambda b: b.headers.update({"X-Trace": "1"}))
    assert not ptr_eq(builders[0], template)
    assert ptr_eq(builders[1], template)
"""

__version__ = "0.1.0"

# Storage primitive
from cowarc.cell import Cell

# Copying
from cowarc.cloning import Cloneable, clone_value

# Configuration
from cowarc.config import CowSettings, get_settings, set_settings

# Container
from cowarc.container import BorrowError, CowContainer, MutableRef, ptr_eq

# Diagnostics
from cowarc.stats import CowStats, get_stats
from cowarc.types import Copy

__all__ = [
    # Version
    "__version__",
    # Container
    "CowContainer",
    "MutableRef",
    "BorrowError",
    "ptr_eq",
    # Storage
    "Cell",
    # Copying
    "Cloneable",
    "clone_value",
    "Copy",
    # Configuration
    "CowSettings",
    "get_settings",
    "set_settings",
    # Diagnostics
    "CowStats",
    "get_stats",
]
