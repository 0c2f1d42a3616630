"""Whisper ASR client for a local whisper.cpp server."""

import io
import wave

import numpy as np
import requests

from voicegrid.core.logging_utils import setup_logger
from voicegrid.core.retry import RetryPolicy, retry

# Markers whisper.cpp returns for silence
BLANK_MARKERS = {"", "[BLANK_AUDIO]", "(silence)", "[silence]"}


class WhisperError(Exception):
    """The whisper server could not be reached or answered with an error."""


def encode_wav(audio_int16: np.ndarray, sample_rate: int = 16000) -> io.BytesIO:
    """Wrap mono int16 samples in an in-memory WAV file."""
    wav_buffer = io.BytesIO()
    with wave.open(wav_buffer, "wb") as wav_file:
        wav_file.setnchannels(1)  # mono
        wav_file.setsampwidth(2)  # 16-bit
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(np.asarray(audio_int16, dtype=np.int16).tobytes())
    wav_buffer.seek(0)
    return wav_buffer


class WhisperClient:
    """Client for whisper.cpp server ASR."""

    def __init__(
        self,
        server_url: str = "http://127.0.0.1:9001",
        timeout: float = 5.0,
        retry_policy: RetryPolicy | None = None,
        language: str = "en",
        session: requests.Session | None = None,
    ):
        """Initialize Whisper client.

        Args:
            server_url: URL of whisper.cpp server
            timeout: Request timeout in seconds
            retry_policy: Attempts and backoff for connection errors
            language: Language hint sent to the server
            session: Optional requests session (shared connection pool)
        """
        self.server_url = server_url.rstrip("/")
        self.timeout = timeout
        self.language = language
        self.session = session or requests.Session()
        self.logger = setup_logger("whisper_client")
        self.retry_policy = retry_policy or RetryPolicy()
        self._post = retry(
            self.retry_policy, exceptions=(requests.exceptions.ConnectionError,), log=self.logger
        )(self._post_once)
        self.logger.info(f"WhisperClient initialized (server: {self.server_url})")

    @classmethod
    def from_config(cls, config: dict) -> "WhisperClient":
        whisper_config = config.get("whisper", {})
        language = config.get("voice", {}).get("language", "en-US").split("-")[0]
        return cls(
            server_url=whisper_config.get("server_url", "http://127.0.0.1:9001"),
            timeout=whisper_config.get("timeout", 5.0),
            retry_policy=RetryPolicy.from_config(whisper_config),
            language=language,
        )

    def _post_once(self, wav_buffer: io.BytesIO) -> requests.Response:
        wav_buffer.seek(0)
        return self.session.post(
            f"{self.server_url}/inference",
            files={"file": ("audio.wav", wav_buffer, "audio/wav")},
            data={"response_format": "json", "language": self.language},
            timeout=self.timeout,
        )

    def transcribe(self, audio_int16: np.ndarray, sample_rate: int = 16000) -> str | None:
        """Transcribe audio to text.

        Args:
            audio_int16: Audio samples as int16 numpy array
            sample_rate: Sample rate (default: 16000)

        Returns:
            Transcribed text, or None for silence

        Raises:
            WhisperError: On connection failure, timeout, any other request
                failure or a non-200 response
        """
        wav_buffer = encode_wav(audio_int16, sample_rate)

        try:
            response = self._post(wav_buffer)
        except requests.exceptions.Timeout as e:
            raise WhisperError(f"Whisper request timed out after {self.timeout}s") from e
        except requests.exceptions.ConnectionError as e:
            raise WhisperError(f"Cannot connect to Whisper server at {self.server_url}") from e
        except requests.exceptions.RequestException as e:
            raise WhisperError(f"Whisper request failed: {e}") from e

        if response.status_code != 200:
            raise WhisperError(f"Whisper server error: HTTP {response.status_code}")

        try:
            text = response.json().get("text", "").strip()
        except ValueError as e:
            raise WhisperError("Whisper server returned invalid JSON") from e

        if text in BLANK_MARKERS:
            self.logger.debug("Whisper returned blank/silence")
            return None

        self.logger.info(f"Whisper transcribed: '{text}'")
        return text

    def is_available(self) -> bool:
        """Check if Whisper server is available.

        Returns:
            True if server is reachable
        """
        try:
            response = self.session.get(f"{self.server_url}/", timeout=1.0)
        except requests.exceptions.RequestException:
            return False
        return response.status_code in (200, 404)  # 404 means the server is up
