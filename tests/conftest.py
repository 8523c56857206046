"""
Pytest configuration and shared fixtures.
"""

import logging

import pytest

from bsm_engine.utils.types import MarketParams


@pytest.fixture
def standard_params():
    """At-the-money option, six months to expiry."""
    return MarketParams(S=100.0, K=100.0, T=0.5, r=0.05, sigma=0.20)


@pytest.fixture
def one_year_params():
    """Hull's textbook example: S=K=100, T=1, r=5%, σ=20%."""
    return MarketParams(S=100.0, K=100.0, T=1.0, r=0.05, sigma=0.20)


@pytest.fixture
def itm_call_params():
    """In-the-money call parameters."""
    return MarketParams(S=110.0, K=100.0, T=1.0, r=0.05, sigma=0.20)


@pytest.fixture
def expired_params():
    """Option at expiration."""
    return MarketParams(S=105.0, K=100.0, T=0.0, r=0.05, sigma=0.20)


@pytest.fixture(autouse=True)
def reset_engine_logger():
    """Undo setup_logging() handlers installed by CLI invocations."""
    yield
    logger = logging.getLogger("bsm_engine")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
