# tests/conftest.py
"""
Pytest configuration and fixtures for leaklab tests.
"""

import gc
import time

import pytest

from leaklab import CacheManager, LeakConfig, Timer


@pytest.fixture(autouse=True)
def reset_global_state():
    """Dispose leftover timers and empty the static cache around each test."""
    # Cleanup before test
    Timer.dispose_all()
    CacheManager.clear_cache()
    gc.collect()

    yield

    # Cleanup after test
    Timer.dispose_all()
    CacheManager.clear_cache()
    gc.collect()


@pytest.fixture
def small_config():
    """Scenario config with payloads at 0.1% of their real size and a fast timer."""
    config = LeakConfig().scaled(0.001)
    config.timer_interval = 0.05
    return config


def _wait_for(predicate, timeout=2.0, interval=0.01):
    """Poll ``predicate`` until it is true or ``timeout`` seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def wait_for():
    """Polling helper for behavior driven by the timer thread."""
    return _wait_for


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: Slow tests that take significant time"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: Unit tests"
    )
