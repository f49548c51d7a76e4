"""
Lifecycle events published during a shutdown pass.

Per pass the order is always: ShutdownStarted, one ComponentShutdown per task
that is started, then exactly one ShutdownEnded (unless the orchestration
logic itself fails, in which case ShutdownEnded is not published).
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

EVENT_SHUTDOWN_STARTED = "ShutdownStarted"
EVENT_COMPONENT_SHUTDOWN = "ComponentShutdown"
EVENT_SHUTDOWN_ENDED = "ShutdownEnded"

ALL_EVENTS = (EVENT_SHUTDOWN_STARTED, EVENT_COMPONENT_SHUTDOWN, EVENT_SHUTDOWN_ENDED)


@dataclass(frozen=True)
class ComponentShutdownEvent:
    """Published immediately before a task is invoked."""

    name: str
    order: Union[int, float]
    index: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "order": self.order, "index": self.index}


@dataclass(frozen=True)
class ShutdownEndedEvent:
    """Published once when the pass has an outcome."""

    code: int
    error: Optional[BaseException] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "error": str(self.error) if self.error is not None else None,
        }
