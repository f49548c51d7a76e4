"""
Shutdown orchestration.

Runs the registered cleanup tasks one after another under a single aggregate
deadline, publishes lifecycle events, and turns the outcome into a process
exit code.
"""

import asyncio
import inspect
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Sequence, Set, Tuple

import anyio

from shutdown_hook.config import ShutdownSettings, load_settings
from shutdown_hook.core.bus import EventBus, EventCallback
from shutdown_hook.errors import (
    OrchestrationError,
    ShutdownHookError,
    ShutdownTimeoutError,
    TaskError,
)
from shutdown_hook.registry import Order, ShutdownOperation, ShutdownTask, TaskRegistry
from shutdown_hook.shutdown.events import (
    EVENT_COMPONENT_SHUTDOWN,
    EVENT_SHUTDOWN_ENDED,
    EVENT_SHUTDOWN_STARTED,
    ComponentShutdownEvent,
    ShutdownEndedEvent,
)

logger = logging.getLogger(__name__)


class ShutdownState(Enum):
    """Orchestrator lifecycle state."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass
class ShutdownOutcome:
    """Result of a shutdown pass."""

    code: int
    error: Optional[BaseException] = None
    completed_tasks: List[str] = field(default_factory=list)
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc)

    @property
    def success(self) -> bool:
        """Whether every task settled successfully before the deadline."""
        return self.code == 0

    @property
    def timed_out(self) -> bool:
        return isinstance(self.error, ShutdownTimeoutError)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return {
            "code": self.code,
            "success": self.success,
            "timed_out": self.timed_out,
            "error": str(self.error) if self.error is not None else None,
            "error_type": type(self.error).__name__ if self.error is not None else None,
            "completed_tasks": list(self.completed_tasks),
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


class _PassState:
    """Mutable bookkeeping shared between one pass and its deadline."""

    def __init__(self):
        self.abandoned = False
        self.current: Optional[str] = None
        self.order: Order = 0
        self.completed: List[str] = []


def order_tasks(tasks: Sequence[ShutdownTask], lifo: bool = False) -> Tuple[ShutdownTask, ...]:
    """
    Compute execution order.

    Insertion order is the base sequence, reversed when ``lifo`` is set, then
    stable-sorted by ascending ``order``. ``lifo`` therefore only decides
    between tasks that share the same order value.
    """
    base = list(reversed(tasks)) if lifo else list(tasks)
    return tuple(sorted(base, key=lambda task: task.order))


def _is_async_callable(operation: Callable[..., Any]) -> bool:
    if inspect.iscoroutinefunction(operation):
        return True
    call = getattr(operation, "__call__", None)
    return call is not None and inspect.iscoroutinefunction(call)


class ShutdownHook:
    """
    Coordinates graceful process shutdown.

    Create one instance at process start and hand it to every component that
    needs to register cleanup work.

    Example:
        hook = ShutdownHook(timeout_ms=5000)
        hook.add(db.close, name="database", order=10)

        @hook.task(name="http", order=0)
        async def stop_http():
            await server.stop()

        hook.register()
    """

    def __init__(
        self,
        lifo: Optional[bool] = None,
        timeout_ms: Optional[int] = None,
        *,
        offload_sync: Optional[bool] = None,
        settings: Optional[ShutdownSettings] = None,
        registry: Optional[TaskRegistry] = None,
        events: Optional[EventBus] = None,
    ):
        self.settings = settings or load_settings(
            lifo=lifo, timeout_ms=timeout_ms, offload_sync=offload_sync
        )
        self.registry = registry or TaskRegistry()
        self.events = events or EventBus()
        self._state = ShutdownState.IDLE
        self._outcome: Optional[ShutdownOutcome] = None
        self._abandoned: Set[asyncio.Future] = set()

    @property
    def lifo(self) -> bool:
        return self.settings.lifo

    @property
    def timeout_ms(self) -> int:
        return self.settings.timeout_ms

    @property
    def state(self) -> ShutdownState:
        return self._state

    @property
    def outcome(self) -> Optional[ShutdownOutcome]:
        return self._outcome

    # Registration

    def add(
        self,
        operation: ShutdownOperation,
        *,
        name: Optional[str] = None,
        order: Optional[Order] = None,
    ) -> ShutdownTask:
        """Register a cleanup operation. See TaskRegistry.add."""
        return self.registry.add(operation, name=name, order=order)

    def task(self, name: Optional[str] = None, order: Optional[Order] = None):
        """Decorator form of add(); returns the function unchanged."""
        def decorator(func: ShutdownOperation) -> ShutdownOperation:
            self.add(func, name=name, order=order)
            return func
        return decorator

    def on(self, event: str, callback: Optional[EventCallback] = None):
        """
        Subscribe to a lifecycle event.

        Can be called directly or used as a decorator.
        """
        if callback is None:
            def decorator(func: EventCallback) -> EventCallback:
                self.events.subscribe(event, func)
                return func
            return decorator
        self.events.subscribe(event, callback)
        return callback

    def off(self, event: str, callback: EventCallback) -> bool:
        return self.events.unsubscribe(event, callback)

    def register(self, loop: Optional[asyncio.AbstractEventLoop] = None, connection: Any = None, signals: Optional[Iterable] = None):
        """
        Subscribe this hook to SIGTERM, SIGINT and "shutdown" control messages.

        Returns:
            The registered TriggerAdapter; call unregister() on it to detach.
        """
        from shutdown_hook.shutdown.triggers import TriggerAdapter

        adapter = TriggerAdapter(self, loop=loop, connection=connection, signals=signals)
        adapter.register()
        return adapter

    def exit(self, code: int) -> None:
        """Terminal exit action. Replace it to observe the exit code instead."""
        sys.exit(code)

    def execution_plan(self) -> Tuple[ShutdownTask, ...]:
        """Order the currently registered tasks without running them."""
        return order_tasks(list(self.registry), self.lifo)

    # Execution

    async def shutdown(self) -> Optional[ShutdownOutcome]:
        """
        Run the shutdown pass once.

        Subsequent calls are no-ops and return the existing outcome, or None
        while the first pass is still running. Never raises to the caller;
        every failure ends in exit(1).
        """
        if self._state is not ShutdownState.IDLE:
            logger.debug(f"Shutdown already {self._state.value}, ignoring trigger")
            return self._outcome
        self._state = ShutdownState.RUNNING

        try:
            plan = order_tasks(self.registry.snapshot(), self.lifo)
            await self.events.publish(EVENT_SHUTDOWN_STARTED)
            logger.info(f"Running {len(plan)} shutdown tasks (timeout {self.timeout_ms}ms)")
            outcome = await self._run_with_deadline(plan)
            self._complete(outcome)
            await self.events.publish(
                EVENT_SHUTDOWN_ENDED, ShutdownEndedEvent(code=outcome.code, error=outcome.error)
            )
        except Exception as e:
            logger.error(f"Unexpected error during shutdown sequence: {e}", exc_info=True)
            error = OrchestrationError(f"Shutdown orchestration failed: {e}")
            error.__cause__ = e
            outcome = ShutdownOutcome(code=1, error=error)
            self._complete(outcome)

        self.exit(outcome.code)
        return outcome

    def _complete(self, outcome: ShutdownOutcome) -> None:
        self._outcome = outcome
        self._state = ShutdownState.COMPLETED
        if outcome.success:
            logger.info("Graceful shutdown complete")
        else:
            logger.warning(f"Shutdown finished with code {outcome.code}: {outcome.error}")

    async def _run_with_deadline(self, plan: Sequence[ShutdownTask]) -> ShutdownOutcome:
        pass_state = _PassState()
        runner = asyncio.ensure_future(self._run_sequence(plan, pass_state))

        done, _ = await asyncio.wait({runner}, timeout=self.timeout_ms / 1000)
        if runner in done:
            if runner.cancelled():
                error = TaskError(pass_state.current or "<unknown>", pass_state.order, asyncio.CancelledError())
                logger.error(f"Shutdown pass was cancelled while running '{pass_state.current}'")
                return ShutdownOutcome(code=1, error=error, completed_tasks=list(pass_state.completed))
            error = runner.result()
            code = 0 if error is None else 1
            return ShutdownOutcome(code=code, error=error, completed_tasks=list(pass_state.completed))

        # The in-flight task keeps running; only its result is discarded.
        pass_state.abandoned = True
        self._abandoned.add(runner)
        runner.add_done_callback(self._discard_abandoned)

        error = ShutdownTimeoutError(self.timeout_ms, task_name=pass_state.current)
        logger.error(f"{error} while running '{pass_state.current}'")
        return ShutdownOutcome(code=1, error=error, completed_tasks=list(pass_state.completed))

    def _discard_abandoned(self, runner: asyncio.Future) -> None:
        self._abandoned.discard(runner)
        if runner.cancelled():
            return
        exc = runner.exception()
        if exc is not None:
            logger.debug(f"Discarded late failure from abandoned shutdown pass: {exc}")

    async def _run_sequence(self, plan: Sequence[ShutdownTask], pass_state: _PassState) -> Optional[ShutdownHookError]:
        for index, task in enumerate(plan):
            if pass_state.abandoned:
                return None

            pass_state.current = task.name
            pass_state.order = task.order
            await self.events.publish(
                EVENT_COMPONENT_SHUTDOWN,
                ComponentShutdownEvent(name=task.name, order=task.order, index=index),
            )
            if pass_state.abandoned:
                return None

            logger.debug(f"Shutting down '{task.name}' (order={task.order}, index={index})")
            try:
                await self._invoke(task)
            except (Exception, asyncio.CancelledError) as e:
                if pass_state.abandoned:
                    logger.debug(f"Ignoring failure of '{task.name}' after deadline: {e}")
                    return None
                logger.error(f"Shutdown task '{task.name}' failed: {e}")
                return TaskError(task.name, task.order, e)

            if pass_state.abandoned:
                logger.debug(f"'{task.name}' settled after deadline, result discarded")
                return None
            pass_state.completed.append(task.name)

        return None

    async def _invoke(self, task: ShutdownTask) -> None:
        operation = task.operation
        if self.settings.offload_sync and not _is_async_callable(operation):
            result = await anyio.to_thread.run_sync(operation)
        else:
            result = operation()
        if inspect.isawaitable(result):
            await result
