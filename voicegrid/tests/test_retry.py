"""Test retry policy and decorator."""

import logging

import pytest

from voicegrid.core.retry import RetryPolicy, retry


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    delays = []
    monkeypatch.setattr("voicegrid.core.retry.time.sleep", delays.append)
    return delays


def test_succeeds_after_failures(no_sleep):
    calls = []

    @retry(RetryPolicy(tries=3, delay=0.5, backoff=2.0), exceptions=(ConnectionError,))
    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise ConnectionError("down")
        return "ok"

    assert flaky() == "ok"
    assert len(calls) == 3
    assert no_sleep == [0.5, 1.0]


def test_raises_last_error(no_sleep):
    @retry(RetryPolicy(tries=2, delay=0.1), exceptions=(ConnectionError,))
    def always_down():
        raise ConnectionError("down")

    with pytest.raises(ConnectionError):
        always_down()
    assert no_sleep == [0.1]


def test_single_try_never_sleeps(no_sleep):
    calls = []

    @retry(RetryPolicy(tries=1), exceptions=(ConnectionError,))
    def down():
        calls.append(1)
        raise ConnectionError("down")

    with pytest.raises(ConnectionError):
        down()
    assert len(calls) == 1
    assert no_sleep == []


def test_other_exceptions_not_retried():
    calls = []

    @retry(RetryPolicy(tries=3), exceptions=(ConnectionError,))
    def broken():
        calls.append(1)
        raise KeyError("bug")

    with pytest.raises(KeyError):
        broken()
    assert len(calls) == 1


def test_warnings_go_to_given_logger(caplog):
    log = logging.getLogger("retry_test_client")
    calls = []

    @retry(RetryPolicy(tries=2), exceptions=(ConnectionError,), log=log)
    def flaky_once():
        calls.append(1)
        if len(calls) == 1:
            raise ConnectionError("down")
        return "ok"

    with caplog.at_level(logging.WARNING, logger="retry_test_client"):
        assert flaky_once() == "ok"
    assert [r.name for r in caplog.records] == ["retry_test_client"]
    assert "attempt 1/2" in caplog.records[0].getMessage()


def test_preserves_name():
    @retry(RetryPolicy(), exceptions=(ConnectionError,))
    def named():
        return 1

    assert named.__name__ == "named"


class TestRetryPolicy:
    def test_from_config(self):
        policy = RetryPolicy.from_config({"retries": 4, "retry_delay": 0.1, "retry_backoff": 3.0})
        assert policy == RetryPolicy(tries=4, delay=0.1, backoff=3.0)
        assert policy.pauses() == pytest.approx([0.1, 0.3, 0.9])

    def test_from_empty_config_uses_defaults(self):
        assert RetryPolicy.from_config({}) == RetryPolicy()

    def test_rejects_zero_tries(self):
        with pytest.raises(ValueError):
            RetryPolicy(tries=0)
