"""Unit tests for pipeline logging setup."""

from __future__ import annotations

import logging

import pytest

from faceverify.logging_config import ColoredFormatter, LOG_FORMAT, get_logger, setup_logging


@pytest.fixture
def fresh_logger():
    """Yield a unique logger name and remove its handlers afterwards."""
    name = "faceverify.tests.logging"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_setup_logging_level_and_no_duplicates(fresh_logger):
    logger = setup_logging(fresh_logger, level="debug")
    again = get_logger(fresh_logger)

    assert again is logger
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_setup_logging_writes_plain_file(fresh_logger, tmp_path):
    log_file = tmp_path / "verify.log"
    logger = setup_logging(fresh_logger, level="INFO", log_file=str(log_file))

    logger.info("Blur variance 12.5 below minimum 100.0")
    logger.debug("not written")
    for handler in logger.handlers:
        handler.flush()

    text = log_file.read_text()
    assert "| INFO     | faceverify.tests.logging | Blur variance 12.5" in text
    assert "not written" not in text
    assert "\033[" not in text


def test_colored_formatter_leaves_record_untouched():
    record = logging.LogRecord("faceverify", logging.WARNING, __file__, 1, "dim", None, None)

    colored = ColoredFormatter(LOG_FORMAT, use_color=True).format(record)
    plain = ColoredFormatter(LOG_FORMAT, use_color=False).format(record)

    assert "\033[33m" in colored
    assert "\033[" not in plain
    assert record.levelname == "WARNING"
    assert record.name == "faceverify"
