"""
Tests for settings loading.
"""

import pytest

from shutdown_hook.config import DEFAULT_TIMEOUT_MS, ShutdownSettings, load_settings
from shutdown_hook.errors import ConfigurationError


def test_defaults():
    settings = load_settings()
    assert settings.lifo is False
    assert settings.timeout_ms == DEFAULT_TIMEOUT_MS == 10000
    assert settings.offload_sync is False


def test_environment_variables(monkeypatch):
    monkeypatch.setenv("SHUTDOWN_HOOK_LIFO", "1")
    monkeypatch.setenv("SHUTDOWN_HOOK_TIMEOUT_MS", "250")
    monkeypatch.setenv("SHUTDOWN_HOOK_OFFLOAD_SYNC", "true")

    settings = load_settings()

    assert settings.lifo is True
    assert settings.timeout_ms == 250
    assert settings.offload_sync is True


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("SHUTDOWN_HOOK_TIMEOUT_MS=4200\n", encoding="utf-8")
    assert load_settings().timeout_ms == 4200


def test_none_overrides_are_ignored(monkeypatch):
    monkeypatch.setenv("SHUTDOWN_HOOK_TIMEOUT_MS", "250")
    assert load_settings(timeout_ms=None, lifo=None).timeout_ms == 250


def test_invalid_environment_value(monkeypatch):
    monkeypatch.setenv("SHUTDOWN_HOOK_TIMEOUT_MS", "-5")
    with pytest.raises(ConfigurationError, match="Invalid shutdown hook configuration"):
        load_settings()


def test_settings_are_frozen():
    settings = ShutdownSettings()
    with pytest.raises(Exception):
        settings.timeout_ms = 1
