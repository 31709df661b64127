"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone

import pytest

from catalog.context import build_context
from utilities.config import CatalogConfig


class FakeClock:
    """Manually advanced time source for session expiry tests."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def sample_seed():
    """Small catalog with overlapping titles and authors."""
    return {
        "001": {"title": "Foo Bar", "author": "Ann"},
        "002": {"title": "The Alchemist", "author": "Paulo Coelho"},
        "003": {"title": "Return of The Alchemist", "author": "ann lee"},
        "004": {"title": "  the   ALCHEMIST ", "author": "Anonymous"},
        "005": {"title": "Pride and Prejudice", "author": "Jane Austen"},
    }


@pytest.fixture
def catalog_settings():
    """Core configuration with no simulated search latency."""
    return CatalogConfig(search_delay_seconds=0, session_ttl_minutes=60, min_password_length=6)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))


@pytest.fixture
def context(catalog_settings, sample_seed, clock):
    """Fully wired catalog context over the sample catalog."""
    return build_context(catalog_settings, seed=sample_seed, clock=clock)


@pytest.fixture
def logged_in(context):
    """Register and log in ``alice``; returns her session."""
    context.users.register("alice", "secret1")
    return context.sessions.login("alice", "secret1").value
