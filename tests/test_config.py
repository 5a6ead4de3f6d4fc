# tests/test_config.py

from __future__ import annotations

import pytest

from task_tracker.config import Settings
from task_tracker.infra.db.engine import make_database_url, make_engine


def test_defaults_without_environment() -> None:
    s = Settings.from_env({})
    assert s.database_url is None
    assert s.db_host is None
    assert s.port == 8080
    assert s.log_level == "INFO"


def test_reads_store_and_listener_settings() -> None:
    s = Settings.from_env(
        {
            "DB_HOST": "db.internal",
            "DB_PORT": "5579",
            "DB_USER": "tracker",
            "DB_PASSWORD": "secret",
            "DB_NAME": "tasks",
            "PORT": "9000",
            "LOG_LEVEL": "debug",
        }
    )
    assert (s.db_host, s.db_port, s.db_user, s.db_password, s.db_name) == (
        "db.internal", 5579, "tracker", "secret", "tasks",
    )
    assert s.port == 9000
    assert s.log_level == "DEBUG"


def test_bad_integer_is_reported_by_name() -> None:
    with pytest.raises(ValueError, match="DB_PORT"):
        Settings.from_env({"DB_PORT": "five"})


def test_url_prefers_explicit_database_url() -> None:
    s = Settings(database_url="sqlite+aiosqlite:///:memory:", db_host="ignored")
    assert make_database_url(s) == "sqlite+aiosqlite:///:memory:"


def test_url_uses_postgres_when_host_given() -> None:
    s = Settings.from_env({"DB_HOST": "db", "DB_PORT": "5579", "DB_PASSWORD": "pw", "DB_NAME": "taskdb"})
    assert make_database_url(s) == "postgresql+asyncpg://postgres:pw@db:5579/taskdb"


def test_url_falls_back_to_sqlite_file(tmp_path) -> None:
    s = Settings(db_path=str(tmp_path / "nested" / "tasks.db"))
    url = make_database_url(s)
    assert url.startswith("sqlite+aiosqlite:///")
    assert url.endswith("/nested/tasks.db")
    assert (tmp_path / "nested").is_dir()


@pytest.mark.asyncio
async def test_sqlite_engine_skips_server_pool_options() -> None:
    engine = make_engine("sqlite+aiosqlite:///:memory:")
    try:
        assert engine.url.get_backend_name() == "sqlite"
    finally:
        await engine.dispose()
