#!/usr/bin/env python3
"""
Event Bus - queue-based event dispatcher.

Speech workers emit from their own threads; the host loop drains the queue
with process_events(), so handlers always run serially on the host thread.

Utterances and the session's reactions to them are never dropped. Workers
emit with ``block=True`` and wait while the queue is at its size limit; the
host thread emits without blocking, and a delivered event type is queued past
the limit rather than lost.
"""

import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from voicegrid.core.events import EventType
from voicegrid.core.logging_utils import setup_logger

__all__ = ["EventBus", "EventType", "Event", "get_event_bus"]

logger = setup_logger(__name__)

# High-frequency events where only the latest value matters
COALESCED_EVENTS = {
    EventType.VOICE_PARTIAL_TRANSCRIPT,
}

# Events that must reach subscribers even when the queue is over its limit
DELIVERED_EVENTS = {
    EventType.VOICE_LISTENING_START,
    EventType.VOICE_LISTENING_STOP,
    EventType.VOICE_TRANSCRIPTION_READY,
    EventType.VOICE_ERROR,
    EventType.VOICE_COMMAND_RECOGNIZED,
    EventType.VOICE_COMMAND_UNRECOGNIZED,
    EventType.CELL_NOT_FOUND,
    EventType.GRID_STATE_CHANGED,
}


@dataclass
class Event:
    """Event with type, payload, and metadata."""

    type: EventType
    payload: dict[str, Any]
    timestamp: float
    source: str = "unknown"

    def __post_init__(self):
        if self.timestamp == 0:
            self.timestamp = time.time()


class EventBus:
    """Thread-safe FIFO event bus with a soft size limit.

    Features:
    - Backpressure for worker threads (``emit(..., block=True)``)
    - Guaranteed delivery for voice and grid events, drop counting for the rest
    - Event coalescing for high-frequency events
    - Handler isolation (a failing handler never reaches the emitter)
    """

    def __init__(self, max_queue_size: int = 1000):
        """Initialize event bus.

        Args:
            max_queue_size: Queue length at which blocking emitters wait and
                other emitters drop non-delivered event types
        """
        self.max_queue_size = max_queue_size
        self._queue: deque[Event] = deque()
        self._not_full = threading.Condition()
        self._subscribers: dict[EventType, list[Callable]] = {}
        self._lock = threading.Lock()
        self._running = True

        self._coalesced_events: dict[EventType, Event] = {}

        # Metrics
        self._events_emitted = 0
        self._events_processed = 0
        self._events_dropped = 0
        self._events_coalesced = 0
        self._events_over_limit = 0
        self._last_drop_warning = 0.0

    def is_running(self) -> bool:
        return self._running

    def emit(
        self,
        event_type: EventType,
        payload: dict[str, Any] | None = None,
        source: str = "unknown",
        block: bool = False,
        timeout: float | None = None,
    ) -> bool:
        """Emit an event.

        Args:
            event_type: Type of event
            payload: Event data
            source: Source identifier (e.g., 'text_source', 'voice_session')
            block: Wait for room in the queue. Only worker threads may block;
                the host thread is the one that makes room.
            timeout: Longest wait when blocking (None waits indefinitely)

        Returns:
            True if the event was queued. False if the bus is shut down, a
            blocking wait timed out, or a droppable event met a full queue.
        """
        if not self._running:
            return False

        event = Event(type=event_type, payload=payload or {}, timestamp=time.time(), source=source)

        if event_type in COALESCED_EVENTS:
            with self._lock:
                self._coalesced_events[event_type] = event
                self._events_coalesced += 1
            return True

        with self._not_full:
            if block:
                has_room = self._not_full.wait_for(
                    lambda: len(self._queue) < self.max_queue_size or not self._running,
                    timeout=timeout,
                )
                if not has_room or not self._running:
                    return False
            elif len(self._queue) >= self.max_queue_size:
                if event_type not in DELIVERED_EVENTS:
                    self._events_dropped += 1
                    self._log_drop_warning(event_type)
                    return False
                self._events_over_limit += 1

            self._queue.append(event)
            self._events_emitted += 1
        return True

    def subscribe(
        self, event_type: EventType, handler: Callable[[Event], None]
    ) -> tuple[EventType, Callable]:
        """Subscribe to an event type.

        Args:
            event_type: Type of event to listen for
            handler: Callback function(event)

        Returns:
            Subscription token (event_type, handler) for unsubscription
        """
        with self._lock:
            self._subscribers.setdefault(event_type, []).append(handler)
        return (event_type, handler)

    def unsubscribe(self, event_type: EventType, handler: Callable[[Event], None]):
        with self._lock:
            handlers = self._subscribers.get(event_type)
            if handlers and handler in handlers:
                handlers.remove(handler)

    def unsubscribe_token(self, token: tuple[EventType, Callable]):
        """Unsubscribe using a token returned from subscribe()."""
        event_type, handler = token
        self.unsubscribe(event_type, handler)

    def has_pending(self) -> bool:
        """Check whether any events are waiting to be processed."""
        with self._lock:
            if self._coalesced_events:
                return True
        with self._not_full:
            return bool(self._queue)

    def process_events(self, max_events: int = 100) -> int:
        """Process pending events (call from the host loop).

        Args:
            max_events: Maximum events to process per call

        Returns:
            Number of events processed
        """
        processed = 0

        with self._lock:
            coalesced = list(self._coalesced_events.values())
            self._coalesced_events.clear()

        for event in coalesced:
            self._dispatch(event)
            processed += 1
            self._events_processed += 1

        while processed < max_events:
            with self._not_full:
                if not self._queue:
                    break
                event = self._queue.popleft()
                self._not_full.notify()
            self._dispatch(event)
            processed += 1
            self._events_processed += 1

        return processed

    def _dispatch(self, event: Event):
        with self._lock:
            handlers = list(self._subscribers.get(event.type, []))

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.type}: {e}")

    def _log_drop_warning(self, event_type: EventType):
        """Log a dropped event, at most once per second."""
        current_time = time.time()
        if current_time - self._last_drop_warning >= 1.0:
            logger.warning(
                f"Event queue full, dropped {event_type}. "
                f"Total drops: {self._events_dropped}, Queue size: {len(self._queue)}"
            )
            self._last_drop_warning = current_time

    def get_metrics(self) -> dict[str, int]:
        """Get event bus metrics.

        Returns:
            Dictionary of metrics
        """
        with self._not_full:
            queue_size = len(self._queue)
        return {
            "events_emitted": self._events_emitted,
            "events_processed": self._events_processed,
            "events_dropped": self._events_dropped,
            "events_coalesced": self._events_coalesced,
            "events_over_limit": self._events_over_limit,
            "queue_size": queue_size,
            "coalesced_pending": len(self._coalesced_events),
        }

    def shutdown(self):
        """Shutdown event bus, discard pending events and release blocked emitters."""
        self._running = False
        with self._not_full:
            self._queue.clear()
            self._not_full.notify_all()
        with self._lock:
            self._coalesced_events.clear()


# Global event bus instance
_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get global event bus instance.

    Returns:
        Global EventBus instance
    """
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus
