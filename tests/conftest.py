"""Pytest configuration and fixtures for rulechain tests."""

import logging

import pytest
import structlog

from rulechain.config import get_settings
from rulechain.logging import LIBRARY_LOGGER
from rulechain.validation import ValidationContext


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so env overrides apply per test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def ctx():
    """Background validation context."""
    return ValidationContext.background()


@pytest.fixture
def reset_structlog():
    """Restore structlog defaults and the library logger after a test reconfigures them."""
    library_logger = logging.getLogger(LIBRARY_LOGGER)
    handlers, level, propagate = library_logger.handlers[:], library_logger.level, library_logger.propagate
    yield
    structlog.reset_defaults()
    library_logger.handlers = handlers
    library_logger.setLevel(level)
    library_logger.propagate = propagate
