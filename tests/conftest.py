# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from task_tracker.app.main import create_app
from task_tracker.config import Settings
from task_tracker.infra.db.engine import make_engine, make_sessionmaker, make_sqlite_url
from task_tracker.infra.db.task_repo_memory import InMemoryTaskRepo
from task_tracker.infra.db.task_repo_sql import SQLTaskRepo, create_schema


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a per-test SQLite file, console logging only."""
    return Settings(db_path=str(tmp_path / "tasks.db"), log_dir=None, log_level="WARNING")


@pytest_asyncio.fixture()
async def sql_repo(settings: Settings):
    engine = make_engine(make_sqlite_url(settings.db_path))
    await create_schema(engine)
    yield SQLTaskRepo(make_sessionmaker(engine))
    await engine.dispose()


@pytest_asyncio.fixture(params=["memory", "sql"])
async def repo(request, settings: Settings):
    """Every repository implementation must behave the same."""
    if request.param == "memory":
        yield InMemoryTaskRepo()
    else:
        engine = make_engine(make_sqlite_url(settings.db_path))
        await create_schema(engine)
        yield SQLTaskRepo(make_sessionmaker(engine))
        await engine.dispose()


@pytest.fixture()
def app(settings: Settings):
    return create_app(settings, repo=InMemoryTaskRepo())


@pytest_asyncio.fixture()
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture()
def milk() -> dict:
    return {"title": "Buy milk", "description": "2%", "due_date": "2025-01-10", "status": "pending"}
