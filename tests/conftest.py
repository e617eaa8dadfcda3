"""Shared fixtures."""

import logging

import numpy as np
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture(autouse=True)
def reset_oligosim_logger():
    """CLI tests attach handlers bound to captured streams; drop them afterwards."""
    yield
    logger = logging.getLogger("oligosim")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
