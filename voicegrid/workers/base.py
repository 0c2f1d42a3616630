#!/usr/bin/env python3
"""Base worker class for background threads."""

import threading
from abc import ABC, abstractmethod

from voicegrid.core.event_bus import EventBus, get_event_bus
from voicegrid.core.logging_utils import setup_logger


class BaseWorker(ABC):
    """Abstract base class for background workers.

    Provides common functionality:
    - Thread management (start/stop/join)
    - Event bus access
    - Logger setup
    - Consistent error handling

    Only one worker thread exists at a time. A thread that is still blocked
    in I/O after stop() keeps the worker busy, and start() refuses until it
    has exited.
    """

    def __init__(
        self,
        config: dict | None = None,
        event_bus: EventBus | None = None,
        logger_name: str | None = None,
    ):
        """Initialize base worker.

        Args:
            config: Configuration dictionary
            event_bus: Optional event bus instance (defaults to global)
            logger_name: Optional logger name (defaults to class name)
        """
        self.config = config or {}
        self.event_bus = event_bus or get_event_bus()
        self.logger = setup_logger(logger_name or self.__class__.__name__)

        self._running = False
        self._thread: threading.Thread | None = None

    def start(self) -> bool:
        """Start the worker thread.

        Returns:
            True if a new thread was started
        """
        if self._running:
            self.logger.warning(f"{self.__class__.__name__} already running")
            return False
        if self.is_busy():
            self.logger.warning(f"{self.__class__.__name__} still stopping, not restarted")
            return False

        self._running = True
        self._thread = threading.Thread(
            target=self._safe_worker_loop, daemon=True, name=self.__class__.__name__
        )
        self._thread.start()
        self.logger.info(f"{self.__class__.__name__} started")
        return True

    def stop(self, timeout: float = 2.0):
        """Stop the worker thread.

        Safe to call at any time, including before start() or after the loop
        has already finished.

        Args:
            timeout: Maximum time to wait for thread to stop (seconds)
        """
        was_running = self._running
        self._running = False

        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                self.logger.warning(
                    f"{self.__class__.__name__} thread did not stop within {timeout}s"
                )

        if was_running:
            self._cleanup()
            self.logger.info(f"{self.__class__.__name__} stopped")

    def join(self, timeout: float | None = None):
        """Wait for the worker loop to finish on its own."""
        if self._thread:
            self._thread.join(timeout=timeout)

    def is_running(self) -> bool:
        """Check if worker is currently running.

        Returns:
            True between start() and stop() or the end of the loop
        """
        return self._running

    def is_busy(self) -> bool:
        """True while a worker thread is alive, even one that was told to stop."""
        return self._thread is not None and self._thread.is_alive()

    def _safe_worker_loop(self):
        """Wrapper around worker loop with error handling."""
        try:
            self._worker_loop()
        except Exception as e:
            if self._running:
                self.logger.error(f"Fatal error in {self.__class__.__name__}: {e}")
                self._on_fatal_error(e)
            else:
                # Resources were released under a loop that was already stopping
                self.logger.debug(f"{self.__class__.__name__} ended after stop: {e}")
        finally:
            self._running = False
            self._on_loop_exit()

    @abstractmethod
    def _worker_loop(self):
        """Main worker loop - runs in background thread.

        Subclasses must implement this method.
        Should check self._running and exit when False.
        """

    def _on_fatal_error(self, error: Exception):
        """Hook called when the worker loop raised."""

    def _on_loop_exit(self):
        """Hook called on the worker thread once the loop has ended."""

    def _cleanup(self):
        """Optional cleanup hook called during stop().

        Subclasses can override to release resources.
        """
