"""
Exception hierarchy for shutdown-hook.

Registration and configuration problems are raised synchronously to the
caller. Everything that goes wrong during a shutdown pass is captured by the
orchestrator and reported through the ShutdownEnded event and the exit code.
"""

from typing import Optional, Union


class ShutdownHookError(Exception):
    """Base class for all shutdown-hook errors."""


class ConfigurationError(ShutdownHookError, ValueError):
    """Invalid registration input or hook configuration."""


class TaskError(ShutdownHookError):
    """
    A shutdown task failed while it was being executed.

    The message is the original failure's message so observers can match on
    it directly; the original exception stays available as ``original`` and
    as ``__cause__``.
    """

    def __init__(self, task_name: str, order: Union[int, float], original: BaseException):
        self.task_name = task_name
        self.order = order
        self.original = original
        super().__init__(str(original))
        self.__cause__ = original

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return {
            "task_name": self.task_name,
            "order": self.order,
            "error_type": type(self.original).__name__,
            "message": str(self),
        }


class ShutdownTimeoutError(ShutdownHookError, TimeoutError):
    """The aggregate shutdown deadline expired before all tasks settled."""

    def __init__(self, timeout_ms: int, task_name: Optional[str] = None):
        self.timeout_ms = timeout_ms
        self.task_name = task_name
        super().__init__(f"Shutdown operation timed out after {timeout_ms}ms")


class OrchestrationError(ShutdownHookError):
    """Failure inside the orchestration logic itself (never inside a task)."""
