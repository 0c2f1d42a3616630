#!/usr/bin/env python3
"""Voice input modules.

Contains:
- SpeechSource contract (start/stop, support flag, event emission)
- TextSpeechSource (console / script input)
- MicSpeechSource (sounddevice + WebRTC VAD + whisper.cpp)
- VoiceSession (interpretation, grid updates, user feedback)
"""

from .mic_source import MicSpeechSource
from .session import UNRECOGNIZED_MESSAGE, VoiceSession, cell_not_found_message
from .source import NOT_SUPPORTED_MESSAGE, SpeechSource, SpeechSourceError
from .text_source import TextSpeechSource
from .whisper_client import WhisperClient, WhisperError


def create_speech_source(config: dict, event_bus=None, lines=None) -> SpeechSource:
    """Build the speech source selected by ``voice.source`` in the config."""
    if config.get("voice", {}).get("source") == "console" or lines is not None:
        return TextSpeechSource(lines=lines, config=config, event_bus=event_bus)
    return MicSpeechSource(config=config, event_bus=event_bus)


__all__ = [
    "SpeechSource",
    "SpeechSourceError",
    "NOT_SUPPORTED_MESSAGE",
    "TextSpeechSource",
    "MicSpeechSource",
    "WhisperClient",
    "WhisperError",
    "VoiceSession",
    "UNRECOGNIZED_MESSAGE",
    "cell_not_found_message",
    "create_speech_source",
]
