from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg
from psycopg_pool import ConnectionPool

from app.config.settings import Settings

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

_pool: ConnectionPool | None = None


def init_pool(settings: Settings) -> None:
    """Initialize the process-wide connection pool from settings.

    Calling it again while a pool is open is a no-op, so request entry points
    can acquire-or-reuse.
    """
    global _pool  # noqa: PLW0603
    if _pool is not None:
        return
    conninfo = (
        f"host={settings.db_host} "
        f"port={settings.db_port} "
        f"dbname={settings.db_database} "
        f"user={settings.db_username} "
        f"password={settings.db_password}"
    )
    _pool = ConnectionPool(
        conninfo,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        open=True,
    )


def close_pool() -> None:
    """Close the process-wide connection pool."""
    global _pool  # noqa: PLW0603
    if _pool is not None:
        _pool.close()
        _pool = None


@contextmanager
def get_connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Yield a pooled connection and return it on every exit path.

    The pool rolls back an uncommitted transaction when the block raises.
    Caller commits explicitly.
    """
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    with _pool.connection() as conn:
        yield conn


def ensure_schema(conn: psycopg.Connection[Any]) -> None:
    """Create the users and payments tables if they are missing."""
    conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
    conn.commit()
