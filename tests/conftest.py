import asyncio
import os
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner

from shutdown_hook.shutdown import (
    EVENT_COMPONENT_SHUTDOWN,
    EVENT_SHUTDOWN_ENDED,
    EVENT_SHUTDOWN_STARTED,
    ShutdownHook,
)

# Skip integration tests unless explicitly enabled
def pytest_addoption(parser):
    parser.addoption("--integration", action="store_true", default=False, help="Run integration tests")

def pytest_collection_modifyitems(config, items):
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep SHUTDOWN_HOOK_* variables and stray .env files out of tests."""
    for key in list(os.environ):
        if key.startswith("SHUTDOWN_HOOK_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_hook():
    """Factory for hooks whose exit action is a MagicMock."""
    def factory(**kwargs) -> ShutdownHook:
        hook = ShutdownHook(**kwargs)
        hook.exit = MagicMock()
        return hook
    return factory


@pytest.fixture
def hook(make_hook):
    return make_hook()


class EventRecorder:
    """Collects every lifecycle event in publish order."""

    def __init__(self, hook: ShutdownHook):
        self.events = []
        for topic in (EVENT_SHUTDOWN_STARTED, EVENT_COMPONENT_SHUTDOWN, EVENT_SHUTDOWN_ENDED):
            hook.on(topic, lambda data, topic=topic: self.events.append((topic, data)))

    def of(self, topic):
        return [data for name, data in self.events if name == topic]

    @property
    def topics(self):
        return [name for name, _ in self.events]


@pytest.fixture
def recorder(hook):
    return EventRecorder(hook)


@pytest.fixture
def slow_fn():
    """Returns a factory for coroutine functions that sleep for N ms."""
    def factory(ms: int = 200, calls: list = None, label: str = None):
        async def run():
            await asyncio.sleep(ms / 1000)
            if calls is not None:
                calls.append(label)
        return run
    return factory


@pytest.fixture
def cli_runner():
    return CliRunner()
