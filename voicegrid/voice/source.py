#!/usr/bin/env python3
"""Speech source contract.

A speech source turns some input (microphone, console, script) into
finalized utterance strings. It runs on its own worker thread and never calls
the interpreter directly: it emits events on the bus and the host loop
dispatches them one at a time.
"""

from abc import abstractmethod

from voicegrid.core.event_bus import EventBus, EventType
from voicegrid.core.event_payloads import TranscriptPayload, VoiceErrorPayload
from voicegrid.workers.base import BaseWorker

# Transient conditions that are not worth telling the user about
DEFAULT_IGNORED_ERRORS = frozenset({"no-speech", "aborted"})

NOT_SUPPORTED_MESSAGE = (
    "Voice input is not supported in this environment. "
    "Install sounddevice and webrtcvad, or run with --console."
)

BUSY_MESSAGE = "Voice input is still stopping. Try again in a moment."

# Longest single wait for room on the bus before re-checking for stop
PUBLISH_WAIT = 0.1


class SpeechSourceError(Exception):
    """A speech source could not start or failed while running."""

    def __init__(self, code: str, message: str | None = None):
        self.code = code
        self.message = message or code
        super().__init__(self.message)


class SpeechSource(BaseWorker):
    """Base class for all speech sources.

    Subclasses implement ``is_supported`` and ``_worker_loop`` and report
    results with ``_emit_final``, ``_emit_interim`` and ``_emit_error``.
    """

    def __init__(
        self,
        config: dict | None = None,
        event_bus: EventBus | None = None,
        logger_name: str | None = None,
    ):
        super().__init__(config, event_bus=event_bus, logger_name=logger_name)
        voice_config = self.config.get("voice", {})
        self.language = voice_config.get("language", "en-US")
        self.ignored_errors = frozenset(
            voice_config.get("ignored_errors", DEFAULT_IGNORED_ERRORS)
        )
        self.source_name = logger_name or self.__class__.__name__

    @property
    @abstractmethod
    def is_supported(self) -> bool:
        """Whether this source can run in the current environment."""

    @property
    def is_listening(self) -> bool:
        return self.is_running()

    def start(self):
        """Start delivering utterances.

        Raises:
            SpeechSourceError: If the source is not supported here, the
                previous run is still shutting down, or the underlying input
                cannot be opened
        """
        if not self.is_supported:
            raise SpeechSourceError("not-supported", NOT_SUPPORTED_MESSAGE)
        if self.is_running():
            return
        if self.is_busy():
            raise SpeechSourceError("busy", BUSY_MESSAGE)
        self._open()
        # Queued before the thread exists so it always precedes LISTENING_STOP
        self.event_bus.emit(EventType.VOICE_LISTENING_START, source=self.source_name)
        super().start()

    def _open(self):
        """Acquire input resources before the worker thread starts.

        Raise SpeechSourceError here for failures the caller should see
        synchronously.
        """

    def _on_loop_exit(self):
        self._publish(EventType.VOICE_LISTENING_STOP)

    def _on_fatal_error(self, error: Exception):
        if isinstance(error, SpeechSourceError):
            self._emit_error(error.code, error.message)
        else:
            self._emit_error("audio-capture", str(error))

    def _emit_final(self, text: str):
        """Publish a finalized utterance; blank text counts as no speech."""
        text = text.strip()
        if not text:
            self._emit_error("no-speech")
            return
        self.logger.debug(f"Final transcript: '{text}'")
        self._publish(EventType.VOICE_TRANSCRIPTION_READY, TranscriptPayload(transcript=text))

    def _emit_interim(self, text: str):
        """Publish display-only interim text."""
        self.event_bus.emit(
            EventType.VOICE_PARTIAL_TRANSCRIPT,
            payload=TranscriptPayload(transcript=text),
            source=self.source_name,
        )

    def _emit_error(self, code: str, message: str | None = None):
        """Publish an error unless it is one of the ignored transient codes."""
        if code in self.ignored_errors:
            self.logger.debug(f"Ignoring transient speech error: {code}")
            return
        message = message or code
        self.logger.warning(f"Speech source error ({code}): {message}")
        self._publish(EventType.VOICE_ERROR, VoiceErrorPayload(error=code, message=message))

    def _publish(self, event_type: EventType, payload: dict | None = None):
        """Queue an event, waiting for room on the bus while the worker runs.

        Long scripts are throttled to the host loop instead of overrunning the
        queue. Once stopped, the event is queued without waiting.
        """
        while self._running and self.event_bus.is_running():
            if self.event_bus.emit(
                event_type, payload, source=self.source_name, block=True, timeout=PUBLISH_WAIT
            ):
                return
        self.event_bus.emit(event_type, payload, source=self.source_name)
