"""
Shutdown orchestration module for shutdown-hook.

Provides ordered, deadline-bounded execution of registered cleanup tasks,
lifecycle events, and the signal/message triggers that start a pass.
"""

from shutdown_hook.shutdown.events import (
    EVENT_COMPONENT_SHUTDOWN,
    EVENT_SHUTDOWN_ENDED,
    EVENT_SHUTDOWN_STARTED,
    ComponentShutdownEvent,
    ShutdownEndedEvent,
)
from shutdown_hook.shutdown.orchestrator import (
    ShutdownHook,
    ShutdownOutcome,
    ShutdownState,
    order_tasks,
)
from shutdown_hook.shutdown.triggers import SHUTDOWN_MESSAGE, TriggerAdapter

__all__ = [
    "EVENT_COMPONENT_SHUTDOWN",
    "EVENT_SHUTDOWN_ENDED",
    "EVENT_SHUTDOWN_STARTED",
    "SHUTDOWN_MESSAGE",
    "ComponentShutdownEvent",
    "ShutdownEndedEvent",
    "ShutdownHook",
    "ShutdownOutcome",
    "ShutdownState",
    "TriggerAdapter",
    "order_tasks",
]
