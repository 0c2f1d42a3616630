#!/usr/bin/env python3
"""Tests for the whisper.cpp HTTP client."""

import wave

import numpy as np
import pytest
import requests

from voicegrid.core.retry import RetryPolicy
from voicegrid.voice.whisper_client import WhisperClient, WhisperError, encode_wav


class MockResponse:
    def __init__(self, status_code=200, payload=None, invalid_json=False):
        self.status_code = status_code
        self._payload = payload or {}
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class MockSession:
    """Records requests and replays canned responses or exceptions."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.posts = []
        self.gets = []

    def _next(self):
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def post(self, url, files=None, data=None, timeout=None):
        self.posts.append({"url": url, "files": files, "data": data, "timeout": timeout})
        return self._next()

    def get(self, url, timeout=None):
        self.gets.append(url)
        return self._next()


@pytest.fixture(autouse=True)
def no_retry_sleep(monkeypatch):
    monkeypatch.setattr("voicegrid.core.retry.time.sleep", lambda seconds: None)


def audio():
    return np.zeros(1600, dtype=np.int16)


def test_encode_wav():
    buffer = encode_wav(np.arange(320, dtype=np.int16), sample_rate=16000)
    with wave.open(buffer, "rb") as wav_file:
        assert wav_file.getnchannels() == 1
        assert wav_file.getsampwidth() == 2
        assert wav_file.getframerate() == 16000
        assert wav_file.getnframes() == 320


def test_transcribe():
    session = MockSession(MockResponse(payload={"text": " select center\n"}))
    client = WhisperClient("http://localhost:9001/", timeout=3.0, language="en", session=session)

    assert client.transcribe(audio()) == "select center"
    post = session.posts[0]
    assert post["url"] == "http://localhost:9001/inference"
    assert post["data"] == {"response_format": "json", "language": "en"}
    assert post["timeout"] == 3.0
    assert post["files"]["file"][0] == "audio.wav"


@pytest.mark.parametrize("text", ["", "[BLANK_AUDIO]", " (silence) "])
def test_blank_output(text):
    client = WhisperClient(session=MockSession(MockResponse(payload={"text": text})))
    assert client.transcribe(audio()) is None


def test_connection_error_retried():
    session = MockSession(
        requests.exceptions.ConnectionError("refused"),
        MockResponse(payload={"text": "next cell"}),
    )
    client = WhisperClient(retry_policy=RetryPolicy(tries=2), session=session)
    assert client.transcribe(audio()) == "next cell"
    assert len(session.posts) == 2


def test_connection_error_exhausted():
    session = MockSession(
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.ConnectionError("refused"),
    )
    client = WhisperClient(retry_policy=RetryPolicy(tries=2), session=session)
    with pytest.raises(WhisperError, match="Cannot connect"):
        client.transcribe(audio())


def test_timeout_not_retried():
    session = MockSession(requests.exceptions.ReadTimeout("slow"))
    client = WhisperClient(retry_policy=RetryPolicy(tries=3), session=session)
    with pytest.raises(WhisperError, match="timed out"):
        client.transcribe(audio())
    assert len(session.posts) == 1


@pytest.mark.parametrize(
    "error",
    [
        requests.exceptions.ChunkedEncodingError("connection broken"),
        requests.exceptions.InvalidURL("bad url"),
        requests.exceptions.TooManyRedirects("loop"),
    ],
)
def test_other_request_failures_become_whisper_error(error):
    session = MockSession(error)
    client = WhisperClient(retry_policy=RetryPolicy(tries=3), session=session)
    with pytest.raises(WhisperError, match="request failed") as exc_info:
        client.transcribe(audio())
    assert exc_info.value.__cause__ is error
    assert len(session.posts) == 1


def test_http_error():
    client = WhisperClient(session=MockSession(MockResponse(status_code=500)))
    with pytest.raises(WhisperError, match="HTTP 500"):
        client.transcribe(audio())


def test_invalid_json():
    client = WhisperClient(session=MockSession(MockResponse(invalid_json=True)))
    with pytest.raises(WhisperError, match="invalid JSON"):
        client.transcribe(audio())


def test_is_available():
    assert WhisperClient(session=MockSession(MockResponse(status_code=404))).is_available()
    down = MockSession(requests.exceptions.ConnectionError("refused"))
    assert not WhisperClient(session=down).is_available()


def test_from_config():
    config = {
        "voice": {"language": "en-GB"},
        "whisper": {
            "server_url": "http://asr:9001",
            "timeout": 2.0,
            "retries": 3,
            "retry_delay": 0.5,
        },
    }
    client = WhisperClient.from_config(config)
    assert client.server_url == "http://asr:9001"
    assert client.timeout == 2.0
    assert client.language == "en"
    assert client.retry_policy == RetryPolicy(tries=3, delay=0.5)
