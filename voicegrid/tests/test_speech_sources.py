#!/usr/bin/env python3
"""Tests for the speech source contract, text source and mic source plumbing."""

import numpy as np
import pytest
import requests

from voicegrid.core.event_bus import EventType
from voicegrid.voice import MicSpeechSource, TextSpeechSource, create_speech_source
from voicegrid.voice.source import SpeechSource, SpeechSourceError
from voicegrid.core.retry import RetryPolicy
from voicegrid.voice.whisper_client import WhisperClient, WhisperError

ALL_VOICE_EVENTS = (
    EventType.VOICE_LISTENING_START,
    EventType.VOICE_TRANSCRIPTION_READY,
    EventType.VOICE_ERROR,
    EventType.VOICE_LISTENING_STOP,
)


def collect(event_bus):
    seen = []
    for event_type in ALL_VOICE_EVENTS:
        event_bus.subscribe(event_type, seen.append)
    return seen


class UnsupportedSource(SpeechSource):
    @property
    def is_supported(self):
        return False

    def _worker_loop(self):
        pass


class CrashingSource(SpeechSource):
    @property
    def is_supported(self):
        return True

    def _worker_loop(self):
        raise SpeechSourceError("network", "Lost connection")


class TestTextSource:
    def test_emits_each_line(self, event_bus):
        seen = collect(event_bus)
        source = TextSpeechSource(
            lines=["next cell\n", "# comment\n", "  select center  \n"], event_bus=event_bus
        )
        source.start()
        source.join(timeout=2.0)
        event_bus.process_events()

        assert [e.type for e in seen] == [
            EventType.VOICE_LISTENING_START,
            EventType.VOICE_TRANSCRIPTION_READY,
            EventType.VOICE_TRANSCRIPTION_READY,
            EventType.VOICE_LISTENING_STOP,
        ]
        assert [e.payload["transcript"] for e in seen[1:3]] == ["next cell", "select center"]
        assert not source.is_running()

    def test_blank_lines_are_ignored_no_speech(self, event_bus):
        seen = collect(event_bus)
        source = TextSpeechSource(lines=["\n", "   \n"], event_bus=event_bus)
        source.start()
        source.join(timeout=2.0)
        event_bus.process_events()
        assert EventType.VOICE_ERROR not in [e.type for e in seen]

    def test_no_speech_reported_when_not_ignored(self, event_bus):
        seen = collect(event_bus)
        config = {"voice": {"ignored_errors": []}}
        source = TextSpeechSource(lines=["\n"], config=config, event_bus=event_bus)
        source.start()
        source.join(timeout=2.0)
        event_bus.process_events()
        errors = [e for e in seen if e.type == EventType.VOICE_ERROR]
        assert errors[0].payload == {"error": "no-speech", "message": "no-speech"}

    def test_stop_is_safe_any_time(self, event_bus):
        source = TextSpeechSource(lines=[], event_bus=event_bus)
        source.stop()
        source.start()
        source.join(timeout=2.0)
        source.stop()
        source.stop()


class TestSourceContract:
    def test_unsupported_start_raises(self, event_bus):
        source = UnsupportedSource(event_bus=event_bus)
        with pytest.raises(SpeechSourceError) as exc_info:
            source.start()
        assert exc_info.value.code == "not-supported"

    def test_fatal_error_surfaces_message(self, event_bus):
        seen = collect(event_bus)
        source = CrashingSource(event_bus=event_bus)
        source.start()
        source.join(timeout=2.0)
        event_bus.process_events()

        types = [e.type for e in seen]
        assert types[0] == EventType.VOICE_LISTENING_START
        assert types[-1] == EventType.VOICE_LISTENING_STOP
        error = next(e for e in seen if e.type == EventType.VOICE_ERROR)
        assert error.payload == {"error": "network", "message": "Lost connection"}

    def test_language_and_ignored_errors_from_config(self, event_bus):
        config = {"voice": {"language": "en-GB", "ignored_errors": ["aborted"]}}
        source = TextSpeechSource(lines=[], config=config, event_bus=event_bus)
        assert source.language == "en-GB"
        assert source.ignored_errors == frozenset({"aborted"})


class FakeWhisper:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def transcribe(self, audio, sample_rate=16000):
        self.calls.append((len(audio), sample_rate))
        if self.error is not None:
            raise self.error
        return self.text


class TestMicSource:
    def segment(self):
        return np.zeros(4800, dtype=np.int16)

    def test_segment_becomes_utterance(self, event_bus):
        seen = collect(event_bus)
        whisper = FakeWhisper(text=" Next cell. ")
        source = MicSpeechSource(event_bus=event_bus, whisper=whisper, segmenter=object())
        source._handle_segment(self.segment())
        event_bus.process_events()

        assert whisper.calls == [(4800, 16000)]
        assert seen[0].payload == {"transcript": "Next cell."}

    def test_silence_is_ignored(self, event_bus):
        seen = collect(event_bus)
        source = MicSpeechSource(event_bus=event_bus, whisper=FakeWhisper(text=None), segmenter=object())
        source._handle_segment(self.segment())
        event_bus.process_events()
        assert seen == []

    def test_whisper_failure_is_network_error(self, event_bus):
        seen = collect(event_bus)
        whisper = FakeWhisper(error=WhisperError("Cannot connect"))
        source = MicSpeechSource(event_bus=event_bus, whisper=whisper, segmenter=object())
        source._handle_segment(self.segment())
        event_bus.process_events()
        assert seen[0].payload == {"error": "network", "message": "Cannot connect"}

    def test_broken_transfer_is_network_error(self, event_bus):
        seen = collect(event_bus)

        class BrokenSession:
            def post(self, *args, **kwargs):
                raise requests.exceptions.ChunkedEncodingError("connection broken")

        whisper = WhisperClient(retry_policy=RetryPolicy(tries=1), session=BrokenSession())
        source = MicSpeechSource(event_bus=event_bus, whisper=whisper, segmenter=object())
        source._handle_segment(self.segment())
        event_bus.process_events()

        assert seen[0].type == EventType.VOICE_ERROR
        assert seen[0].payload["error"] == "network"
        assert "connection broken" in seen[0].payload["message"]

    def test_config(self, event_bus):
        config = {"mic": {"sample_rate": 8000, "frame_duration_ms": 20, "device_index": 2}}
        source = MicSpeechSource(config=config, event_bus=event_bus)
        assert source.frame_size == 160
        assert source.device_index == 2


def test_create_speech_source(event_bus):
    assert isinstance(create_speech_source({"voice": {"source": "console"}}, event_bus), TextSpeechSource)
    assert isinstance(create_speech_source({}, event_bus, lines=["x"]), TextSpeechSource)
    assert isinstance(create_speech_source({"voice": {"source": "mic"}}, event_bus), MicSpeechSource)
