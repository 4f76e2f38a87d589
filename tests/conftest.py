"""Shared fixtures: sessions whose traffic is served by an in-process handler."""

import sys
from pathlib import Path

import httpx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from reqwest import Session  # noqa: E402

TEST_SETTINGS = {
    'user_agent': 'reqwest-tests/1.0',
    'timeout': 5.0,
    'follow_redirects': False,
    'max_redirects': 0,
}


@pytest.fixture
def make_session():
    """Build a Session that routes requests to handler instead of the network."""
    def factory(handler):
        return Session(settings=TEST_SETTINGS, transport=httpx.MockTransport(handler))
    return factory
