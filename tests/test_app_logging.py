"""Tests for logging configuration."""

import logging

import pytest

from nutrilog.app_logging import configure_logging


@pytest.fixture
def nutrilog_logger():
    logger = logging.getLogger("nutrilog")
    logger.handlers.clear()
    yield logger
    logger.handlers.clear()
    logger.setLevel(logging.INFO)


def test_configure_logging_idempotent(nutrilog_logger: logging.Logger) -> None:
    configure_logging()
    first_count = len(nutrilog_logger.handlers)

    configure_logging()
    second_count = len(nutrilog_logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert nutrilog_logger.level == logging.INFO


def test_configure_logging_applies_level(nutrilog_logger: logging.Logger) -> None:
    configure_logging("debug")
    assert nutrilog_logger.level == logging.DEBUG

    configure_logging("WARNING")
    assert nutrilog_logger.level == logging.WARNING
    assert len(nutrilog_logger.handlers) == 1
