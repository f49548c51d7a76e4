"""
Triggers that start a shutdown pass.

The TriggerAdapter owns its subscriptions: OS termination signals installed
on an event loop, and an optional inter-process connection carrying control
messages. Each stimulus schedules ShutdownHook.shutdown(); duplicates are
absorbed by the hook's own state guard.
"""

import asyncio
import logging
import signal
from typing import Any, Iterable, List, Optional, Set

from shutdown_hook.errors import ConfigurationError

logger = logging.getLogger(__name__)

SHUTDOWN_MESSAGE = "shutdown"

DEFAULT_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class TriggerAdapter:
    """
    Translates signals and control messages into hook.shutdown() calls.

    Args:
        hook: The ShutdownHook to trigger.
        loop: Event loop to install handlers on. Defaults to the running loop.
        connection: Optional object with fileno()/recv() (for example one end
            of multiprocessing.Pipe) delivering control messages.
        signals: Signals to subscribe to. Defaults to SIGTERM and SIGINT.
    """

    def __init__(
        self,
        hook,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        connection: Any = None,
        signals: Optional[Iterable] = None,
    ):
        self.hook = hook
        self.connection = connection
        self.signals = tuple(signals) if signals is not None else DEFAULT_SIGNALS
        self._loop = loop
        self._installed_signals: List[signal.Signals] = []
        self._reader_fd: Optional[int] = None
        self._pending: Set[asyncio.Task] = set()
        self._registered = False

    @property
    def registered(self) -> bool:
        return self._registered

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def register(self) -> None:
        """Subscribe to the configured signals and the control connection."""
        if self._registered:
            raise ConfigurationError("Trigger adapter is already registered")

        loop = self.loop
        for sig in self.signals:
            loop.add_signal_handler(sig, self._on_signal, sig)
            self._installed_signals.append(sig)

        if self.connection is not None:
            self._reader_fd = self.connection.fileno()
            loop.add_reader(self._reader_fd, self._on_readable)

        self._registered = True
        names = ", ".join(signal.Signals(sig).name for sig in self._installed_signals)
        logger.info(f"Shutdown triggers installed ({names or 'no signals'}"
                    f"{', control messages' if self._reader_fd is not None else ''})")

    def unregister(self) -> None:
        """Remove every subscription made by register()."""
        if not self._registered:
            return

        loop = self.loop
        for sig in self._installed_signals:
            loop.remove_signal_handler(sig)
        self._installed_signals.clear()
        self._remove_reader()
        self._registered = False
        logger.debug("Shutdown triggers removed")

    def handle_message(self, message: Any) -> bool:
        """
        Handle one control message.

        Returns:
            True if the message triggered a shutdown.
        """
        if message != SHUTDOWN_MESSAGE:
            logger.debug(f"Ignoring control message: {message!r}")
            return False
        self._trigger("message")
        return True

    def _on_signal(self, sig) -> None:
        self._trigger(signal.Signals(sig).name)

    def _on_readable(self) -> None:
        try:
            message = self.connection.recv()
        except (EOFError, OSError) as e:
            logger.debug(f"Control connection closed: {e}")
            self._remove_reader()
            return
        self.handle_message(message)

    def _remove_reader(self) -> None:
        if self._reader_fd is not None:
            self.loop.remove_reader(self._reader_fd)
            self._reader_fd = None

    def _trigger(self, reason: str) -> None:
        logger.info(f"Received {reason}, initiating graceful shutdown...")
        task = self.loop.create_task(self.hook.shutdown())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
