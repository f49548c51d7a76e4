"""
Tests for the shutdown-hook CLI.
"""

import json
import sys
import types

import pytest

from shutdown_hook.cli.main import app
from shutdown_hook.shutdown import ShutdownHook


@pytest.fixture
def hook_module(monkeypatch):
    """Registers an importable module exposing a hook and a factory."""
    module = types.ModuleType("fake_service")

    hook = ShutdownHook(lifo=True, timeout_ms=3000)
    hook.add(lambda: None, name="http", order=0)
    hook.add(lambda: None, name="db", order=10)
    hook.add(lambda: None, name="cache", order=0)

    module.hook = hook
    module.make_hook = lambda: ShutdownHook()
    module.not_a_hook = 42
    monkeypatch.setitem(sys.modules, "fake_service", module)
    return module


class TestConfigCLI:
    def test_config_show(self, cli_runner, monkeypatch):
        monkeypatch.setenv("SHUTDOWN_HOOK_TIMEOUT_MS", "2500")

        result = cli_runner.invoke(app, ['config', 'show'])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["timeout_ms"] == 2500
        assert data["lifo"] is False

    def test_config_show_invalid(self, cli_runner, monkeypatch):
        monkeypatch.setenv("SHUTDOWN_HOOK_TIMEOUT_MS", "0")

        result = cli_runner.invoke(app, ['config', 'show'])

        assert result.exit_code == 1
        assert "Error" in result.output


class TestPlanCLI:
    def test_plan_shows_execution_order(self, cli_runner, hook_module):
        result = cli_runner.invoke(app, ['plan', 'fake_service:hook'])

        assert result.exit_code == 0
        assert "lifo=True" in result.output
        assert "timeout=3000ms" in result.output
        lines = [line for line in result.output.splitlines() if any(n in line for n in ("http", "db", "cache"))]
        assert ["cache" in lines[0], "http" in lines[1], "db" in lines[2]] == [True, True, True]

    def test_plan_does_not_freeze_hook(self, cli_runner, hook_module):
        cli_runner.invoke(app, ['plan', 'fake_service:hook'])
        assert hook_module.hook.registry.frozen is False

    def test_plan_with_factory(self, cli_runner, hook_module):
        result = cli_runner.invoke(app, ['plan', 'fake_service:make_hook'])

        assert result.exit_code == 0
        assert "No shutdown tasks registered" in result.output

    @pytest.mark.parametrize("target", [
        "fake_service",
        "fake_service:missing",
        "fake_service:not_a_hook",
        "no_such_module_xyz:hook",
    ])
    def test_plan_bad_target(self, cli_runner, hook_module, target):
        result = cli_runner.invoke(app, ['plan', target])

        assert result.exit_code == 2
        assert "Invalid value" in result.output
