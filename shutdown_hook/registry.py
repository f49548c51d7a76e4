"""
Registry of shutdown tasks.

Holds the cleanup operations components have registered, in insertion order.
The registry is pure data plus validation; ordering and execution belong to
the orchestrator, which reads the registry once per shutdown pass.
"""

import logging
import numbers
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Tuple, Union

from shutdown_hook.errors import ConfigurationError

logger = logging.getLogger(__name__)

# A zero-argument cleanup action. It may return an awaitable.
ShutdownOperation = Callable[[], Any]

Order = Union[int, float]


@dataclass(frozen=True)
class ShutdownTask:
    """A registered cleanup operation."""

    name: str
    order: Order
    operation: ShutdownOperation
    sequence: int

    def to_dict(self) -> dict:
        """Convert to dictionary for display."""
        return {
            "name": self.name,
            "order": self.order,
            "sequence": self.sequence,
            "operation": getattr(self.operation, "__qualname__", repr(self.operation)),
        }


def _is_numeric(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


class TaskRegistry:
    """
    Insertion-ordered collection of shutdown tasks.

    Once a shutdown pass takes its snapshot the registry is frozen and further
    registrations are rejected.
    """

    def __init__(self):
        self._tasks: List[ShutdownTask] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add(
        self,
        operation: ShutdownOperation,
        *,
        name: Optional[str] = None,
        order: Optional[Order] = None,
    ) -> ShutdownTask:
        """
        Register a cleanup operation.

        Args:
            operation: Zero-argument callable; may be sync or return an awaitable.
            name: Label reported in events. Defaults to ``anonymous#<k>``.
            order: Ranking key, lower runs earlier. Defaults to 0.

        Returns:
            The registered task.

        Raises:
            ConfigurationError: On invalid input or when a pass already started.
        """
        if self._frozen:
            raise ConfigurationError(
                "Cannot register shutdown tasks once a shutdown pass has started"
            )

        sequence = len(self._tasks) + 1
        if name is None:
            name = f"anonymous#{sequence}"
        elif not isinstance(name, str):
            raise ConfigurationError(f"Shutdown task name must be a string, got {name!r}")

        if not callable(operation):
            raise ConfigurationError(f"Shutdown operation for {name} must be callable")

        if order is None:
            order = 0
        elif not _is_numeric(order):
            raise ConfigurationError(f"Order for {name} must be a number, got {order!r}")

        task = ShutdownTask(name=name, order=order, operation=operation, sequence=sequence)
        self._tasks.append(task)
        logger.debug(f"Registered shutdown task '{name}' (order={order})")
        return task

    def snapshot(self) -> Tuple[ShutdownTask, ...]:
        """Freeze the registry and return its tasks in insertion order."""
        self._frozen = True
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[ShutdownTask]:
        return iter(tuple(self._tasks))
