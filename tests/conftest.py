"""
Pytest configuration for test suite

Markers:
- unit: Fast unit tests (no external dependencies)
- integration: Integration tests (requires a Redis server, skipped otherwise)
"""

import pytest

from tests.factories import NOW


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Fast unit tests (no dependencies)")
    config.addinivalue_line(
        "markers", "integration: Integration tests (requires Redis)"
    )


@pytest.fixture
def now():
    """Fixed wall clock (top of hour, UTC)"""
    return NOW
