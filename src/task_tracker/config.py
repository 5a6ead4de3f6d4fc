"""Settings loaded from environment variables.

Everything has a development default, so the app starts against a local
SQLite file with no configuration at all.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


def _env(env: Mapping[str, str], name: str, default: str = "") -> str:
    v = env.get(name)
    return default if v is None or v.strip() == "" else v


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    # Store
    database_url: Optional[str] = None
    db_host: Optional[str] = None
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "taskdb"
    db_path: str = "./data/tasks.db"
    db_pool_size: int = 5
    db_pool_timeout: float = 30.0

    # HTTP
    host: str = "0.0.0.0"
    port: int = 8080

    # Logging; log_dir=None logs to the console only
    log_level: str = "INFO"
    log_dir: Optional[str] = "./logs"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            database_url=_env(env, "DATABASE_URL") or None,
            db_host=_env(env, "DB_HOST") or None,
            db_port=_env_int(env, "DB_PORT", 5432),
            db_user=_env(env, "DB_USER", "postgres"),
            db_password=_env(env, "DB_PASSWORD"),
            db_name=_env(env, "DB_NAME", "taskdb"),
            db_path=_env(env, "DB_PATH", "./data/tasks.db"),
            db_pool_size=_env_int(env, "DB_POOL_SIZE", 5),
            db_pool_timeout=_env_float(env, "DB_POOL_TIMEOUT", 30.0),
            host=_env(env, "HOST", "0.0.0.0"),
            port=_env_int(env, "PORT", 8080),
            log_level=_env(env, "LOG_LEVEL", "INFO").upper(),
            log_dir=_env(env, "LOG_DIR", "./logs"),
        )
