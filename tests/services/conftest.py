"""Service test fixtures — an OrbClient wired to a scripted MockOrb transport.

Invariants:
    - Every test gets a fresh MockOrb (no replies scripted) and a recording FakeSleep
    - The client is closed after each test
    - The cached get_settings() is cleared around each test
"""

import pytest

from orb_billing.config import get_settings

from tests.services.mock_orb import FakeSleep, MockOrb, make_client


@pytest.fixture
def orb():
    return MockOrb()


@pytest.fixture
def sleep():
    return FakeSleep()


@pytest.fixture
async def client(orb, sleep):
    c = make_client(orb, sleep, base_delay_ms=100, max_delay_ms=1000)
    yield c
    await c.aclose()


@pytest.fixture(autouse=True)
def fresh_settings():
    """get_settings() is lru_cached; env changes made by a test must not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
