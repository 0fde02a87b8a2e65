"""Pytest configuration for tests.

Sets up Python path and shared fixtures for all tests.
"""

import sys
from pathlib import Path

import httpx
import pytest

# Add project root to Python path so imports work correctly
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture
def recorded_requests():
    """List that mock transports append every request to."""
    return []


@pytest.fixture
def make_transport(recorded_requests):
    """Build an httpx.MockTransport from a request handler, recording requests."""

    def _make(handler):
        def _record(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return httpx.MockTransport(_record)

    return _make
