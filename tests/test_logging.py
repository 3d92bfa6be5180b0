"""
Tests for logging configuration module.
"""

import pytest
import logging
from io import StringIO

from stellarsynth.core.logging_config import setup_logging, get_logger, log_stage


def test_setup_logging_default():
    """Test setting up logging with default parameters."""
    stream = StringIO()
    setup_logging(level="INFO", stream=stream)

    logger = logging.getLogger("stellarsynth.test")
    logger.info("Test message")

    output = stream.getvalue()
    assert "Test message" in output
    assert "INFO" in output


def test_setup_logging_custom_level():
    """Test setting up logging with custom level."""
    stream = StringIO()
    setup_logging(level="WARNING", stream=stream)

    logger = logging.getLogger("stellarsynth.test")
    logger.info("Hidden message")
    logger.warning("Shown message")

    output = stream.getvalue()
    assert "Hidden message" not in output
    assert "Shown message" in output


def test_setup_logging_custom_format():
    """Test setting up logging with custom format."""
    stream = StringIO()
    setup_logging(level="INFO", format_string="%(levelname)s - %(message)s", stream=stream)

    logging.getLogger("stellarsynth.test").info("Test message")

    assert "INFO - Test message" in stream.getvalue()


def test_setup_logging_file(tmp_path):
    """Test writing log records to a file as well."""
    log_file = tmp_path / "run.log"
    stream = StringIO()
    setup_logging(level="INFO", stream=stream, log_file=log_file)

    logging.getLogger("stellarsynth.test").info("File message")
    logging.shutdown()

    assert "File message" in stream.getvalue()
    assert "File message" in log_file.read_text()
    setup_logging(level="INFO", stream=StringIO())


def test_get_logger():
    """Test getting a logger instance."""
    logger = get_logger("test.module")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "stellarsynth.test.module"


def test_logger_hierarchy():
    """Test that loggers follow proper hierarchy."""
    parent_logger = get_logger("parent")
    child_logger = get_logger("parent.child")

    assert child_logger.parent is parent_logger


def test_log_stage():
    """Test that a stage logs its start and duration."""
    stream = StringIO()
    setup_logging(level="DEBUG", format_string="%(message)s", stream=stream)

    with log_stage(get_logger("test"), "opacity"):
        pass

    lines = stream.getvalue().splitlines()
    assert lines[0] == "Starting opacity"
    assert lines[1].startswith("Finished opacity in ")


def test_log_stage_on_error():
    """Test that a failing stage is still closed and the error propagates."""
    stream = StringIO()
    setup_logging(level="DEBUG", format_string="%(message)s", stream=stream)

    with pytest.raises(RuntimeError):
        with log_stage(get_logger("test"), "transfer"):
            raise RuntimeError("boom")

    assert "Finished transfer" in stream.getvalue()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
