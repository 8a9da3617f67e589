from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg_pool import ConnectionPool

from docarchive.config.settings import Settings
from docarchive.logging.logger import Log

_POOL_WAIT_SECONDS = 10.0

_pool: ConnectionPool | None = None


def init_pool(settings: Settings) -> None:
    """Open the process-wide pool. No-op if it is already open.

    Sized so every processing slot can hold a connection while listings
    are served. Blocks until the first connection is established.

    Raises:
        psycopg_pool.PoolTimeout: if the database is unreachable.
    """
    global _pool  # noqa: PLW0603
    if _pool is not None:
        return
    conninfo = make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_database,
        user=settings.db_username,
        password=settings.db_password,
    )
    pool = ConnectionPool(
        conninfo,
        min_size=1,
        max_size=settings.max_concurrent_jobs + 2,
        name="docarchive",
        open=True,
    )
    try:
        pool.wait(timeout=_POOL_WAIT_SECONDS)
    except Exception:
        pool.close()
        raise
    _pool = pool
    Log.info(f"Database pool open ({settings.db_host}:{settings.db_port}/{settings.db_database})")


def close_pool() -> None:
    global _pool  # noqa: PLW0603
    if _pool is not None:
        _pool.close()
        _pool = None


@contextmanager
def get_connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Yield a pooled connection. Caller manages commit/rollback."""
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    with _pool.connection() as conn:
        yield conn
