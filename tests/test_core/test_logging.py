"""Tests for logging configuration."""

import logging

import pytest
import structlog
from structlog.stdlib import BoundLogger
from structlog.types import BindableLogger

from georecon.core.logging import (
    LOG_LEVELS,
    configure_logging,
    get_batch_logger,
    get_logger,
)


@pytest.fixture(autouse=True)
def restore_logging():
    """Put test logging back after each test."""
    yield
    configure_logging(testing=True)


def _processor_names() -> list[str]:
    return [p.__class__.__name__ for p in structlog.get_config()["processors"]]


def test_configure_logging_uses_json_in_production() -> None:
    """Test the JSON renderer is configured outside of tests."""
    configure_logging()

    assert "JSONRenderer" in _processor_names()


def test_configure_logging_uses_key_value_in_tests() -> None:
    """Test the key/value renderer is configured in test mode."""
    configure_logging(testing=True)

    names = _processor_names()
    assert "KeyValueRenderer" in names
    assert "JSONRenderer" not in names


def test_configure_logging_sets_level() -> None:
    """Test an explicit level is applied to the engine logger."""
    configure_logging(testing=True, level="warning")

    assert logging.getLogger("georecon").level == logging.WARNING
    assert len(logging.getLogger().handlers) == 1


def test_configure_logging_does_not_duplicate_handlers() -> None:
    """Test repeated configuration keeps a single root handler."""
    configure_logging(testing=True)
    configure_logging(testing=True)

    assert len(logging.getLogger().handlers) == 1


def test_log_levels_mapping() -> None:
    """Test level names map to stdlib levels."""
    assert LOG_LEVELS["debug"] == logging.DEBUG
    assert LOG_LEVELS["critical"] == logging.CRITICAL


def test_get_logger() -> None:
    """Test get_logger returns a configured logger."""
    logger = get_logger(__name__)
    assert isinstance(logger, BoundLogger | BindableLogger)

    # Test logging with the returned logger
    logger.info("test_message", test_key="test_value")


def test_get_batch_logger_binds_batch_id() -> None:
    """Test get_batch_logger binds the batch id."""
    logger = get_batch_logger("batch-1")

    assert isinstance(logger, BoundLogger | BindableLogger)
    assert logger._context.get("batch_id") == "batch-1"  # type: ignore[attr-defined]


def test_get_batch_logger_without_id() -> None:
    """Test get_batch_logger works without a batch id."""
    logger = get_batch_logger()

    logger.info("test_message")
