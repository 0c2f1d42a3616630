#!/usr/bin/env python3
"""Voice Activity Detection using WebRTC VAD.

Provides per-frame speech detection with a silence tail so that short
pauses inside an utterance do not end it. Timing is counted in frames, not
wall-clock time, so the same audio always segments the same way.
"""

import numpy as np

try:
    import webrtcvad

    HAVE_WEBRTCVAD = True
except ImportError:
    HAVE_WEBRTCVAD = False

from voicegrid.core.logging_utils import setup_logger

logger = setup_logger(__name__)

VALID_SAMPLE_RATES = (8000, 16000, 32000, 48000)
VALID_FRAME_DURATIONS_MS = (10, 20, 30)


class VAD:
    """WebRTC VAD wrapper for speech detection."""

    def __init__(
        self,
        sample_rate: int = 16000,
        frame_duration_ms: int = 30,
        aggressiveness: int = 2,
        tail_ms: int = 700,
        detector=None,
    ):
        """Initialize VAD.

        Args:
            sample_rate: Audio sample rate (must be 8000, 16000, 32000, or 48000)
            frame_duration_ms: Frame duration in ms (must be 10, 20, or 30)
            aggressiveness: VAD aggressiveness (0-3, higher = more aggressive)
            tail_ms: Silence duration before declaring speech end (ms)
            detector: Object with is_speech(bytes, sample_rate); defaults to
                webrtcvad.Vad(aggressiveness)

        Raises:
            ImportError: If no detector is given and webrtcvad is missing
            ValueError: If a parameter is out of range
        """
        if sample_rate not in VALID_SAMPLE_RATES:
            raise ValueError(f"Invalid sample_rate: {sample_rate}")
        if frame_duration_ms not in VALID_FRAME_DURATIONS_MS:
            raise ValueError(f"Invalid frame_duration_ms: {frame_duration_ms}")
        if not 0 <= aggressiveness <= 3:
            raise ValueError(f"Invalid aggressiveness: {aggressiveness}")

        if detector is None:
            if not HAVE_WEBRTCVAD:
                raise ImportError("webrtcvad not installed. Install with: pip install webrtcvad")
            detector = webrtcvad.Vad(aggressiveness)

        self.sample_rate = sample_rate
        self.frame_duration_ms = frame_duration_ms
        self.frame_size = int(sample_rate * frame_duration_ms / 1000)
        self.tail_frames = max(1, tail_ms // frame_duration_ms)
        self.detector = detector

        self.is_speech = False
        self._silent_frames = 0

        logger.info(
            f"VAD initialized: {sample_rate}Hz, {frame_duration_ms}ms frames, "
            f"aggressiveness={aggressiveness}, tail={tail_ms}ms"
        )

    def process_frame(self, frame: np.ndarray) -> tuple[bool, bool, bool]:
        """Process audio frame and detect speech activity.

        Args:
            frame: Audio frame (int16 numpy array of frame_size samples)

        Returns:
            Tuple of (is_speech, speech_started, speech_ended)
        """
        if len(frame) != self.frame_size:
            raise ValueError(f"Frame size mismatch: expected {self.frame_size}, got {len(frame)}")

        frame_has_speech = self.detector.is_speech(frame.tobytes(), self.sample_rate)

        speech_started = False
        speech_ended = False

        if frame_has_speech:
            self._silent_frames = 0
            if not self.is_speech:
                self.is_speech = True
                speech_started = True
                logger.debug("Speech started")
        elif self.is_speech:
            self._silent_frames += 1
            if self._silent_frames >= self.tail_frames:
                self.is_speech = False
                speech_ended = True
                self._silent_frames = 0
                logger.debug("Speech ended")

        return self.is_speech, speech_started, speech_ended

    def reset(self):
        """Reset VAD state."""
        self.is_speech = False
        self._silent_frames = 0
