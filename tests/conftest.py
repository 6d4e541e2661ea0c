"""
Shared fixtures: an in-memory SQLite store, a store agent bound to it and an
HTTP client talking to the app with that agent injected.
"""
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.agents.postgres import PostgresAgent, create_tables
from app.main import app, get_agent


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def agent(engine):
    return PostgresAgent(engine)


@pytest.fixture
async def client(agent):
    app.dependency_overrides[get_agent] = lambda: agent
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
