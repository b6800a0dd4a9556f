"""Integration-test fixtures.

Pre-condition: a reachable PostgreSQL at DATABASE_URL and `alembic upgrade head`.
These tests only run with BANK_INTEGRATION=1.

All integration tests share a single event loop so that the module-level
SQLAlchemy async engine pool (created at import time) stays valid across
the whole session.
"""

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.bank_accounts.infrastructure.persistence import BankAccountRepository
from src.bank_common.database import async_session_factory
from src.main import app


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if os.environ.get("BANK_INTEGRATION") == "1":
        return
    skip = pytest.mark.skip(reason="set BANK_INTEGRATION=1 with a migrated PostgreSQL")
    for item in items:
        if "integration" in item.nodeid.split("/"):
            item.add_marker(skip)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client; keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session")
async def clean_db() -> None:
    """Empty both tables before a test (test-environment reset only)."""
    async with async_session_factory() as session:
        await BankAccountRepository().clear(session)
        await session.commit()
