from __future__ import annotations
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncEngine, AsyncSession
from pathlib import Path

from task_tracker.config import Settings


def make_sqlite_url(db_path: str) -> str:
    # db_path like "./data/tasks.db"
    p = Path(db_path).resolve()
    p.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{p.as_posix()}"


def make_postgres_url(settings: Settings) -> str:
    url = URL.create(
        "postgresql+asyncpg",
        username=settings.db_user,
        password=settings.db_password or None,
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_name,
    )
    return url.render_as_string(hide_password=False)


def make_database_url(settings: Settings) -> str:
    if settings.database_url:
        return settings.database_url
    if settings.db_host:
        return make_postgres_url(settings)
    return make_sqlite_url(settings.db_path)


def make_engine(url: str, pool_size: int = 5, pool_timeout: float = 30.0) -> AsyncEngine:
    kwargs = {"future": True, "pool_pre_ping": True}
    if make_url(url).get_backend_name() != "sqlite":
        # bounded pool: a request waits at most pool_timeout for a connection
        kwargs.update(pool_size=pool_size, max_overflow=0, pool_timeout=pool_timeout)
    return create_async_engine(url, **kwargs)


def make_sessionmaker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)
