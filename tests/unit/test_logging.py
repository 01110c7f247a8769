"""Unit tests for logging infrastructure."""
import sys
import logging
from mediaaudit.infrastructure.logging import setup_logging


def test_setup_logging_returns_logger():
    logger = setup_logging(debug=False)

    assert logger is not None
    assert isinstance(logger, logging.Logger)


def test_setup_logging_debug_mode():
    logger = setup_logging(debug=True)
    assert logger.getEffectiveLevel() == logging.DEBUG


def test_setup_logging_normal_mode():
    logger = setup_logging(debug=False)
    assert logger.getEffectiveLevel() == logging.INFO


def test_setup_logging_uses_stderr():
    setup_logging()
    streams = [h.stream for h in logging.getLogger().handlers if type(h) is logging.StreamHandler]
    assert sys.stderr in streams
    assert sys.stdout not in streams


def test_setup_logging_writes_to_file(tmp_path):
    log_file = tmp_path / "logs" / "nested" / "audit.log"
    logger = setup_logging(debug=False, log_path=log_file)

    logger.info("Test message")
    logging.getLogger("mediaaudit.pipeline.dispatcher").warning("Worker warning")
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = log_file.read_text()
    assert "Test message" in content
    assert "WARNING - Worker warning" in content
