import asyncio

import pytest

from agency_hub.services.store import get_mock_store, reset_mock_store


class MockLatencyClient:
    """Client stub that records simulate_latency calls."""

    def __init__(self) -> None:
        self.use_mock_data = True
        self.latency_called = False

    async def simulate_latency(self) -> None:
        self.latency_called = True


@pytest.fixture(autouse=True)
def _reset_store() -> None:
    reset_mock_store()
    yield
    reset_mock_store()


@pytest.fixture
def client() -> MockLatencyClient:
    return MockLatencyClient()


@pytest.fixture
def store():
    return get_mock_store()


@pytest.fixture
def seed(store):
    """Insert a raw document and return its id."""

    def _seed(table: str, **fields):
        return asyncio.run(store.insert(table, fields))

    return _seed
