"""
shutdown-hook: graceful process shutdown for asyncio applications.
"""

from shutdown_hook.config import ShutdownSettings, load_settings
from shutdown_hook.errors import (
    ConfigurationError,
    OrchestrationError,
    ShutdownHookError,
    ShutdownTimeoutError,
    TaskError,
)
from shutdown_hook.registry import ShutdownTask, TaskRegistry
from shutdown_hook.shutdown import (
    ComponentShutdownEvent,
    ShutdownEndedEvent,
    ShutdownHook,
    ShutdownOutcome,
    ShutdownState,
    TriggerAdapter,
)

__version__ = "0.1.0"

__all__ = [
    "ComponentShutdownEvent",
    "ConfigurationError",
    "OrchestrationError",
    "ShutdownEndedEvent",
    "ShutdownHook",
    "ShutdownHookError",
    "ShutdownOutcome",
    "ShutdownSettings",
    "ShutdownState",
    "ShutdownTask",
    "ShutdownTimeoutError",
    "TaskError",
    "TaskRegistry",
    "TriggerAdapter",
    "load_settings",
]
