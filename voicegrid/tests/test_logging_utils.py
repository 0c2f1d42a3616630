"""Test logging utilities."""

import io
import json
import logging

import pytest

from voicegrid.core.logging_utils import (
    close_file_logging,
    configure_file_logging,
    configure_from_config,
    get_logger_stats,
    log_event,
    set_global_log_level,
    setup_logger,
)


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    close_file_logging()
    set_global_log_level(logging.INFO)


def test_setup_logger_once():
    stream = io.StringIO()
    logger = setup_logger("test_setup_once", stream=stream)
    again = setup_logger("test_setup_once")
    assert logger is again
    assert len(logger.handlers) == 1
    assert not logger.propagate
    assert "test_setup_once" in get_logger_stats()["loggers"]


def test_log_event_format():
    stream = io.StringIO()
    logger = setup_logger("test_log_event", stream=stream)
    log_event(logger, "command_recognized", {"type": "go_to_cell", "index": 4})
    assert "[EVENT] command_recognized type=go_to_cell index=4" in stream.getvalue()


def test_global_level():
    stream = io.StringIO()
    logger = setup_logger("test_global_level", stream=stream)
    set_global_log_level("warning")
    logger.info("hidden")
    logger.warning("shown")
    output = stream.getvalue()
    assert "hidden" not in output
    assert "shown" in output


def test_structured_file_logging(tmp_path):
    log_file = tmp_path / "logs" / "voicegrid.log"
    logger = setup_logger("test_structured", stream=io.StringIO())
    configure_file_logging(log_file, structured=True)

    logger.info("hello")

    record = json.loads(log_file.read_text().strip().splitlines()[-1])
    assert record["message"] == "hello"
    assert record["logger"] == "test_structured"
    assert record["level"] == "INFO"


def test_file_handler_attached_to_new_loggers(tmp_path):
    log_file = tmp_path / "voicegrid.log"
    configure_from_config({"logging": {"level": "DEBUG", "file": str(log_file)}})
    logger = setup_logger("test_late_logger", stream=io.StringIO())
    logger.debug("late message")
    assert "late message" in log_file.read_text()
