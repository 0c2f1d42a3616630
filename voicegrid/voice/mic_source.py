#!/usr/bin/env python3
"""Microphone speech source.

sounddevice capture -> VAD segmentation -> whisper.cpp transcription.
Each transcribed segment is one finalized utterance.
"""

import numpy as np

try:
    import sounddevice as sd

    HAVE_SOUNDDEVICE = True
except ImportError:
    HAVE_SOUNDDEVICE = False

from voicegrid.core.event_bus import EventBus
from voicegrid.voice.segmenter import UtteranceSegmenter
from voicegrid.voice.source import SpeechSource, SpeechSourceError
from voicegrid.voice.vad import HAVE_WEBRTCVAD, VAD
from voicegrid.voice.whisper_client import WhisperClient, WhisperError


class MicSpeechSource(SpeechSource):
    """Speech source backed by the default (or configured) microphone."""

    def __init__(
        self,
        config: dict | None = None,
        event_bus: EventBus | None = None,
        whisper: WhisperClient | None = None,
        segmenter: UtteranceSegmenter | None = None,
    ):
        """Initialize microphone source.

        Args:
            config: Configuration dictionary (uses 'mic', 'whisper', 'voice')
            event_bus: Optional event bus instance (defaults to global)
            whisper: Optional Whisper client (built from config otherwise)
            segmenter: Optional segmenter (built from config otherwise)
        """
        super().__init__(config, event_bus=event_bus, logger_name="mic_source")
        mic_config = self.config.get("mic", {})
        self.sample_rate = mic_config.get("sample_rate", 16000)
        self.frame_duration_ms = mic_config.get("frame_duration_ms", 30)
        self.frame_size = int(self.sample_rate * self.frame_duration_ms / 1000)
        self.device_index = mic_config.get("device_index")
        self.min_segment_ms = mic_config.get("min_segment_ms", 250)
        self.max_segment_ms = mic_config.get("max_segment_ms", 8000)
        self.aggressiveness = mic_config.get("aggressiveness", 2)
        self.tail_ms = mic_config.get("tail_ms", 700)

        self.whisper = whisper
        self.segmenter = segmenter
        self._stream = None

    @property
    def is_supported(self) -> bool:
        if not HAVE_SOUNDDEVICE:
            return False
        return self.segmenter is not None or HAVE_WEBRTCVAD

    def _open(self):
        if self.whisper is None:
            self.whisper = WhisperClient.from_config(self.config)
        if self.segmenter is None:
            vad = VAD(
                sample_rate=self.sample_rate,
                frame_duration_ms=self.frame_duration_ms,
                aggressiveness=self.aggressiveness,
                tail_ms=self.tail_ms,
            )
            self.segmenter = UtteranceSegmenter(
                vad, min_segment_ms=self.min_segment_ms, max_segment_ms=self.max_segment_ms
            )

        if not self.whisper.is_available():
            self.logger.warning(
                f"Whisper server not available at {self.whisper.server_url} - "
                "start whisper.cpp server: ./whisper-server -m models/ggml-base.en.bin --port 9001"
            )

        try:
            self._stream = sd.InputStream(
                device=self.device_index,
                channels=1,
                samplerate=self.sample_rate,
                blocksize=self.frame_size,
                dtype="int16",
                latency="high",  # Reduce overflow risk
            )
            self._stream.start()
        except Exception as e:
            self._stream = None
            raise SpeechSourceError("audio-capture", f"Could not open microphone: {e}") from e

        self.logger.info(
            f"Mic stream opened: {self.sample_rate}Hz, {self.frame_size} samples, "
            f"device={self.device_index}"
        )

    def _worker_loop(self):
        while self._running:
            data, overflowed = self._stream.read(self.frame_size)
            if overflowed:
                self.logger.debug("Mic input overflow")
            segment = self.segmenter.process(np.asarray(data[:, 0], dtype=np.int16))
            if segment is not None:
                self._handle_segment(segment)

        # Capture stopped mid-utterance
        segment = self.segmenter.flush()
        if segment is not None:
            self._handle_segment(segment)

    def _handle_segment(self, segment: np.ndarray):
        duration_ms = len(segment) / self.sample_rate * 1000
        self.logger.info(f"Transcribing {len(segment)} samples ({duration_ms:.0f}ms)")
        try:
            text = self.whisper.transcribe(segment, sample_rate=self.sample_rate)
        except WhisperError as e:
            self._emit_error("network", str(e))
            return
        self._emit_final(text or "")

    def _cleanup(self):
        if self._stream is not None:
            try:
                self._stream.stop()
                self._stream.close()
            except Exception as e:
                self.logger.warning(f"Error closing mic stream: {e}")
            self._stream = None
