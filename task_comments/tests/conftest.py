# tests/conftest.py
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from task_comments.core.rate_limit import limiter
from task_comments.main import create_app
from task_comments.store.memory import InMemoryStore
from task_comments.store.sql import SQLAlchemyStore

MISSING_ID = "507f1f77-bcf8-4cd7-9943-901100000000"


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def store(request, tmp_path: Path):
    """Every API test runs once per store implementation."""
    if request.param == "memory":
        backend = InMemoryStore()
    else:
        backend = SQLAlchemyStore(f"sqlite+aiosqlite:///{tmp_path / 'comments.sqlite3'}")
    await backend.connect()
    yield backend
    await backend.disconnect()


@pytest_asyncio.fixture
async def client(store):
    app = create_app(store=store)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def sample_task_id(store) -> str:
    task = await store.create_task("Sample Task")
    return task.id
