#!/usr/bin/env python3
"""Voice session - connects a speech source, the interpreter and the grid.

The session owns the grid state. Each finalized utterance is interpreted and
either applied to the grid through the reducer or turned into a short-lived
feedback message ("not understood", "cell not found").
"""

import time
from collections.abc import Callable
from dataclasses import dataclass

from voicegrid.core.event_bus import Event, EventBus, EventType
from voicegrid.core.event_payloads import (
    CellNotFoundPayload,
    CommandRecognizedPayload,
    CommandUnrecognizedPayload,
    GridStateChangedPayload,
)
from voicegrid.core.logging_utils import log_event, setup_logger
from voicegrid.grid.actions import Action, CellNotFound, action_to_payload
from voicegrid.grid.interpreter import parse_voice_command
from voicegrid.grid.model import MAIN_COUNT, GridState
from voicegrid.grid.reducer import reduce
from voicegrid.voice.source import NOT_SUPPORTED_MESSAGE, SpeechSource, SpeechSourceError

logger = setup_logger(__name__)

UNRECOGNIZED_MESSAGE = 'Command not understood. Try "next cell", "select center", "toggle".'


def cell_not_found_message(requested: int) -> str:
    return f"Cell {requested} not found. Cells are 1 to {MAIN_COUNT}."


@dataclass(frozen=True)
class Feedback:
    """A message shown until ``expires_at`` (session clock time)."""

    message: str
    expires_at: float


class VoiceSession:
    """Calling layer around the interpreter and the grid reducer."""

    def __init__(
        self,
        event_bus: EventBus,
        source: SpeechSource | None = None,
        config: dict | None = None,
        state: GridState | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize voice session.

        Args:
            event_bus: Bus the speech source publishes to
            source: Speech source (optional; utterances can also be fed
                directly with handle_utterance)
            config: Configuration dictionary (uses 'feedback')
            state: Initial grid state (default: all off, cell 1 active)
            clock: Monotonic clock, injectable for tests
        """
        feedback_config = (config or {}).get("feedback", {})
        self.message_duration = feedback_config.get("message_duration", 2.5)
        self.flash_duration = feedback_config.get("flash_duration", 0.4)

        self.event_bus = event_bus
        self.source = source
        self.state = state or GridState()
        self._clock = clock

        self.is_listening = False
        self.last_recognized = ""
        self.error: str | None = None
        self.last_action: Action | None = None
        self._committed_transcript = ""
        self._interim = ""
        self._unrecognized: Feedback | None = None
        self._cell_not_found: Feedback | None = None
        self._flash_until = 0.0

        self._tokens = [
            event_bus.subscribe(EventType.VOICE_TRANSCRIPTION_READY, self._on_final),
            event_bus.subscribe(EventType.VOICE_PARTIAL_TRANSCRIPT, self._on_interim),
            event_bus.subscribe(EventType.VOICE_ERROR, self._on_error),
            event_bus.subscribe(EventType.VOICE_LISTENING_START, self._on_listening_start),
            event_bus.subscribe(EventType.VOICE_LISTENING_STOP, self._on_listening_stop),
        ]

    # ----- speech source control -------------------------------------------

    @property
    def is_supported(self) -> bool:
        return self.source is not None and self.source.is_supported

    def start(self) -> bool:
        """Start listening.

        Returns:
            True if the source started; otherwise ``error`` explains why
        """
        if not self.is_supported:
            self.error = NOT_SUPPORTED_MESSAGE
            return False

        self.error = None
        try:
            self.source.start()
        except SpeechSourceError as e:
            self.error = e.message
            logger.error(f"Failed to start voice input: {e.message}")
            return False

        self.is_listening = True
        self._committed_transcript = ""
        self._interim = ""
        self.last_recognized = ""
        return True

    def stop(self):
        if self.source is not None:
            self.source.stop()
        self.is_listening = False

    def toggle_listening(self):
        if self.is_listening:
            self.stop()
        else:
            self.start()

    def clear_transcript(self):
        self._committed_transcript = ""
        self._interim = ""
        self.last_recognized = ""
        self.error = None

    def close(self):
        """Stop the source and drop event subscriptions."""
        self.stop()
        for token in self._tokens:
            self.event_bus.unsubscribe_token(token)
        self._tokens = []

    # ----- display state ---------------------------------------------------

    @property
    def transcript(self) -> str:
        """Everything heard since listening started, plus current interim text."""
        return self._committed_transcript + self._interim

    @property
    def unrecognized_message(self) -> str | None:
        return self._active(self._unrecognized)

    @property
    def cell_not_found_message(self) -> str | None:
        return self._active(self._cell_not_found)

    @property
    def command_flash(self) -> bool:
        """True for a short moment after a voice command changed the grid."""
        return self._clock() < self._flash_until

    def _active(self, feedback: Feedback | None) -> str | None:
        if feedback is None or self._clock() >= feedback.expires_at:
            return None
        return feedback.message

    # ----- interpretation --------------------------------------------------

    def handle_utterance(self, transcript: str) -> Action | None:
        """Interpret one finalized utterance and apply it.

        Args:
            transcript: Finalized text from the speech source

        Returns:
            The interpreted action (None if not understood)
        """
        self.last_recognized = transcript
        self._committed_transcript += transcript + " "
        self._interim = ""

        action = parse_voice_command(transcript)
        self.apply(action, transcript)
        return action

    def apply(self, action: Action | None, transcript: str = ""):
        """Apply an interpreted action, or surface feedback for it."""
        self.last_action = action

        if action is None:
            if transcript.strip():
                self._unrecognized = Feedback(
                    UNRECOGNIZED_MESSAGE, self._clock() + self.message_duration
                )
                log_event(logger, "command_unrecognized", {"transcript": repr(transcript)})
                unrecognized: CommandUnrecognizedPayload = {
                    "transcript": transcript,
                    "message": UNRECOGNIZED_MESSAGE,
                }
                self.event_bus.emit(
                    EventType.VOICE_COMMAND_UNRECOGNIZED, unrecognized, source="voice_session"
                )
            return

        if isinstance(action, CellNotFound):
            message = cell_not_found_message(action.requested)
            self._cell_not_found = Feedback(message, self._clock() + self.message_duration)
            log_event(logger, "cell_not_found", {"requested": action.requested})
            not_found: CellNotFoundPayload = {
                "transcript": transcript,
                "requested": action.requested,
                "message": message,
            }
            self.event_bus.emit(EventType.CELL_NOT_FOUND, not_found, source="voice_session")
            return

        self.state = reduce(self.state, action)
        self._flash_until = self._clock() + self.flash_duration

        action_payload = action_to_payload(action)
        log_event(logger, "command_recognized", action_payload)
        recognized: CommandRecognizedPayload = {"transcript": transcript, "action": action_payload}
        self.event_bus.emit(EventType.VOICE_COMMAND_RECOGNIZED, recognized, source="voice_session")

        focus = self.state.focus
        changed: GridStateChangedPayload = {
            "active_cell_index": focus.active_cell_index,
            "focused_sub_index": focus.focused_sub_index,
            "selected_sub_indices": list(focus.selected_sub_indices),
            "on_count": self.state.on_count(),
        }
        self.event_bus.emit(EventType.GRID_STATE_CHANGED, changed, source="voice_session")

    # ----- event handlers --------------------------------------------------

    def _on_final(self, event: Event):
        transcript = event.payload.get("transcript", "")
        # Utterances still queued when listening was stopped are discarded
        if not self.is_listening:
            logger.debug(f"Discarding utterance after stop: {transcript!r}")
            return
        self.handle_utterance(transcript)

    def _on_interim(self, event: Event):
        self._interim = event.payload.get("transcript", "")

    def _on_error(self, event: Event):
        self.error = event.payload.get("message") or event.payload.get("error", "Voice error")

    def _on_listening_start(self, event: Event):
        self.is_listening = True

    def _on_listening_stop(self, event: Event):
        self.is_listening = False
