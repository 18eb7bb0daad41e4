"""Configuration settings using Pydantic Settings.

Provides typed, environment-overridable defaults for container behavior.

Usage:
    from cowarc.config import CowSettings, set_settings

    # Load from environment variables (COWARC_*)
    settings = CowSettings()

    # Or override with explicit values
    set_settings(CowSettings(track_stats=True))
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class CowSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for copy-on-write containers.

    Attributes:
        track_stats: Record allocation/clone/detach counters in `get_stats()`.
        warn_on_ignored_return: Warn when an `update_val` mutator returns a value.

    Environment Variables:
        COWARC_TRACK_STATS
        COWARC_WARN_ON_IGNORED_RETURN
    """

    model_config = SettingsConfigDict(
        env_prefix="COWARC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    track_stats: bool = False
    warn_on_ignored_return: bool = True


# Module-level settings instance, built on first use
_settings: CowSettings | None = None


def get_settings() -> CowSettings:
    """Access the process-wide settings, loading them from the environment once.

    Returns:
        The active CowSettings instance.
    """
    global _settings
    if _settings is None:
        _settings = CowSettings()
    return _settings


def set_settings(settings: CowSettings | None) -> None:
    """Replace the process-wide settings.

    Args:
        settings: New settings, or None to reload from the environment on next access.
    """
    global _settings
    _settings = settings
