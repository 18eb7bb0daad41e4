"""Tests for configuration loading."""

from cowarc import CowSettings, get_settings, set_settings


def test_defaults():
    settings = CowSettings()

    assert settings.track_stats is False
    assert settings.warn_on_ignored_return is True


def test_environment_overrides(monkeypatch):
    """Settings load from COWARC_* variables.

    Why: Deployments toggle stats without code changes.
    """
    monkeypatch.setenv("COWARC_TRACK_STATS", "true")
    monkeypatch.setenv("COWARC_WARN_ON_IGNORED_RETURN", "false")

    settings = CowSettings()

    assert settings.track_stats is True
    assert settings.warn_on_ignored_return is False


def test_copy_strategy_not_configurable_from_environment(monkeypatch):
    """Process-wide config cannot weaken detach isolation.

    Why: A global shallow copy would let every container leak nested writes.
    """
    monkeypatch.setenv("COWARC_COPY_MODE", "shallow")

    settings = CowSettings()

    assert not hasattr(settings, "copy_mode")


def test_set_settings_replaces_process_wide_instance():
    custom = CowSettings(track_stats=True)
    set_settings(custom)

    assert get_settings() is custom


def test_reset_reloads_from_environment(monkeypatch):
    set_settings(None)
    monkeypatch.setenv("COWARC_WARN_ON_IGNORED_RETURN", "false")

    settings = get_settings()

    assert settings.warn_on_ignored_return is False
    assert get_settings() is settings
