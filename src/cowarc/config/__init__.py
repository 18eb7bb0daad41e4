"""Configuration module using Pydantic Settings.

Usage:
    from cowarc.config import CowSettings, get_settings

    settings = get_settings()
    if settings.track_stats:
        ...
"""

from cowarc.config.settings import CowSettings, get_settings, set_settings

__all__ = [
    "CowSettings",
    "get_settings",
    "set_settings",
]
