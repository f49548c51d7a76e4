"""
Tests for the console logging setup.
"""

import logging

from pythonjsonlogger.json import JsonFormatter

from shutdown_hook.utils.logging import setup_logging


def test_setup_text_logging(monkeypatch):
    monkeypatch.setenv("SHUTDOWN_HOOK_LOG_LEVEL", "debug")
    logger = logging.getLogger("shutdown_hook.test.text")

    setup_logging(logger=logger)

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert not isinstance(logger.handlers[0].formatter, JsonFormatter)


def test_setup_json_logging(monkeypatch):
    monkeypatch.setenv("SHUTDOWN_HOOK_LOG_FORMAT", "json")
    logger = logging.getLogger("shutdown_hook.test.json")

    setup_logging(logger=logger)

    assert isinstance(logger.handlers[0].formatter, JsonFormatter)


def test_existing_handlers_kept_unless_forced():
    logger = logging.getLogger("shutdown_hook.test.force")
    existing = logging.NullHandler()
    logger.addHandler(existing)

    setup_logging(logger=logger)
    assert logger.handlers == [existing]

    setup_logging(force=True, logger=logger, level=logging.WARNING)
    assert existing not in logger.handlers
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
