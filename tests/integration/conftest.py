import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from app.config.settings import Settings
from app.database.connection import close_pool, ensure_schema, get_connection, init_pool


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "cverve_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        with psycopg.connect(
            host=test_settings.db_host,
            port=test_settings.db_port,
            dbname=test_settings.db_database,
            user=test_settings.db_username,
            password=test_settings.db_password,
            connect_timeout=3,
        ):
            pass
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")

    init_pool(test_settings)
    try:
        with get_connection() as conn:
            ensure_schema(conn)
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[dict[str, list[str]], None, None]:
    """Collect transaction and user ids to delete after the test."""
    cleanup: dict[str, list[str]] = {"payments": [], "users": []}
    yield cleanup
    with get_connection() as conn:
        with conn.cursor() as cur:
            for transaction_id in cleanup["payments"]:
                cur.execute("DELETE FROM payments WHERE transaction_id = %s", (transaction_id,))
            for user_id in cleanup["users"]:
                cur.execute("DELETE FROM users WHERE user_id = %s", (user_id,))
        conn.commit()
