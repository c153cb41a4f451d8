"""Shared pytest configuration."""

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _quiet_loguru():
    """Keep loguru's stderr sink out of test output."""
    logger.disable("engine")
    logger.disable("app")
    yield
    logger.enable("engine")
    logger.enable("app")
