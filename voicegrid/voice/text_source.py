#!/usr/bin/env python3
"""Typed or scripted utterances.

Each line of the stream is one finalized utterance. Used for console mode
(stdin), replaying a command script, and tests.
"""

import sys
from collections.abc import Iterable

from voicegrid.core.event_bus import EventBus
from voicegrid.voice.source import SpeechSource


class TextSpeechSource(SpeechSource):
    """Speech source that reads utterances line by line."""

    def __init__(
        self,
        lines: Iterable[str] | None = None,
        config: dict | None = None,
        event_bus: EventBus | None = None,
        echo: bool = False,
    ):
        """Initialize text source.

        Args:
            lines: Any iterable of strings (file object, list); default stdin
            config: Configuration dictionary
            event_bus: Optional event bus instance (defaults to global)
            echo: Print each utterance as it is read (useful for scripts)
        """
        super().__init__(config, event_bus=event_bus, logger_name="text_source")
        self.lines = lines if lines is not None else sys.stdin
        self.echo = echo

    @property
    def is_supported(self) -> bool:
        return True

    def _worker_loop(self):
        for line in self.lines:
            if not self._running:
                break
            # Lines starting with '#' are script comments
            if line.lstrip().startswith("#"):
                continue
            if self.echo:
                print(f"> {line.rstrip()}")
            self._emit_final(line)
        self.logger.info("Text input exhausted")
