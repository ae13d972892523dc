"""Integration test fixtures with a seeded in-memory store."""

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from school_ops.api.app import create_app
from school_ops.payroll import Workload
from school_ops.store import Store


@pytest.fixture
def seeded_store(roster, senior_rate_card, junior_rate_card, budget, vendor) -> Store:
    """Store with the shared roster, rate cards, budget and workloads."""
    store = Store()
    store.add_staff(roster)
    store.add_rate_cards([senior_rate_card, junior_rate_card])
    store.add_budgets([budget])
    store.add_vendors([vendor])
    store.set_workload("teacher-01", Workload(Decimal("20"), Decimal("5")))
    store.set_workload("teacher-02", Workload(Decimal("13"), Decimal("1.5")))
    return store


@pytest_asyncio.fixture
async def client(seeded_store: Store) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = create_app(seeded_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def empty_client() -> AsyncGenerator[AsyncClient, None]:
    """Client over a store with no reference data loaded."""
    app = create_app(Store())
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
