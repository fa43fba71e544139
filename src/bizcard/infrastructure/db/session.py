from __future__ import annotations

import os
from functools import lru_cache

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

DEFAULT_POOL_SIZE = 5


def database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


def _pool_size() -> int:
    return int(os.getenv("DATABASE_POOL_SIZE", str(DEFAULT_POOL_SIZE)))


@lru_cache(maxsize=8)
def _engine_for(url: str, connect_timeout: int, pool_size: int) -> Engine:
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=pool_size,
        connect_args={"connect_timeout": connect_timeout},
    )


def get_engine(timeout_seconds: float = 1.0) -> Engine:
    """Shared engine for the configured database, one per timeout."""
    return _engine_for(database_url(), max(1, int(timeout_seconds)), _pool_size())


def ping_database(timeout_seconds: float = 1.0) -> bool:
    try:
        with get_engine(timeout_seconds).connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception:
        return False
    return True
