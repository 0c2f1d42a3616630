#!/usr/bin/env python3
"""Cut a stream of audio frames into utterance segments."""

import numpy as np

from voicegrid.core.logging_utils import setup_logger
from voicegrid.voice.vad import VAD

logger = setup_logger(__name__)


class UtteranceSegmenter:
    """Collects frames while the VAD reports speech and returns each utterance.

    A segment is closed when the VAD declares the end of speech or when it
    reaches ``max_segment_ms``. Segments shorter than ``min_segment_ms`` are
    discarded as clicks and noise.
    """

    def __init__(self, vad: VAD, min_segment_ms: int = 250, max_segment_ms: int = 8000):
        self.vad = vad
        self.min_frames = min_segment_ms // vad.frame_duration_ms
        self.max_frames = max(1, max_segment_ms // vad.frame_duration_ms)
        self._frames: list[np.ndarray] = []
        self._discarded = 0

    @property
    def in_speech(self) -> bool:
        return bool(self._frames)

    @property
    def discarded_count(self) -> int:
        """Number of segments dropped for being too short."""
        return self._discarded

    def process(self, frame: np.ndarray) -> np.ndarray | None:
        """Feed one frame.

        Args:
            frame: int16 frame of vad.frame_size samples

        Returns:
            The completed utterance as one int16 array, or None
        """
        is_speech, _, speech_ended = self.vad.process_frame(frame)

        if is_speech or speech_ended:
            self._frames.append(frame)

        if speech_ended or len(self._frames) >= self.max_frames:
            return self._flush()
        return None

    def flush(self) -> np.ndarray | None:
        """Close any open segment (e.g. when capture stops)."""
        segment = self._flush()
        self.vad.reset()
        return segment

    def _flush(self) -> np.ndarray | None:
        frames, self._frames = self._frames, []
        if not frames:
            return None
        if len(frames) < self.min_frames:
            self._discarded += 1
            logger.debug(f"Dropping {len(frames)}-frame segment (too short)")
            return None
        return np.concatenate(frames).astype(np.int16, copy=False)
