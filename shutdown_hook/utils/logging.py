"""
Logging setup for applications using shutdown-hook.

The library itself only creates module loggers; call setup_logging() from an
application entry point to get console output.
Controlled via environment variables:
- SHUTDOWN_HOOK_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
- SHUTDOWN_HOOK_LOG_FORMAT: text|json (default: text)
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from pythonjsonlogger.json import JsonFormatter


def _get_level() -> int:
    level = os.getenv("SHUTDOWN_HOOK_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level, logging.INFO)


def setup_logging(force: bool = False, *, logger: Optional[logging.Logger] = None, level: Optional[int] = None) -> None:
    """Configure logging for console output.

    If a handler is already present and force is False, this is a no-op.
    SHUTDOWN_HOOK_LOG_FORMAT=json switches to JSON lines.
    """
    target_logger = logger or logging.getLogger()
    if target_logger.handlers and not force:
        return

    # Clear existing handlers when forcing
    if force:
        for h in list(target_logger.handlers):
            target_logger.removeHandler(h)

    target_logger.setLevel(level if level is not None else _get_level())

    handler = logging.StreamHandler()

    fmt = os.getenv("SHUTDOWN_HOOK_LOG_FORMAT", "text").lower()
    if fmt == "json":
        formatter = JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "name": "logger"},
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    handler.setFormatter(formatter)
    target_logger.addHandler(handler)
