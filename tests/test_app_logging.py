"""Tests for logging configuration."""

import logging

from food_aggregator.app_logging import LOG_FORMAT, configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("food_aggregator")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert logger.propagate is False


def test_configure_logging_formats_with_level_and_logger_name() -> None:
    logger = logging.getLogger("food_aggregator")
    logger.handlers.clear()

    configure_logging(logging.DEBUG)
    formatter = logger.handlers[0].formatter
    record = logging.LogRecord(
        "food_aggregator.services.search", logging.WARNING, __file__, 1, "slow", None, None
    )

    assert logger.level == logging.DEBUG
    assert formatter is not None
    assert formatter._fmt == LOG_FORMAT
    assert formatter.format(record) == "WARNING: food_aggregator.services.search: slow"
    logger.handlers.clear()
    logger.propagate = True
