import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from geokml.config.settings import Settings
from geokml.database.connection import close_pool, get_connection, init_pool
from geokml.database.schema import ensure_schema


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "geokml_test")
    return Settings()


def _delete_all_jobs() -> None:
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM jobs")
        conn.commit()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        ensure_schema()
    except Exception as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to point at one")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def clean_tables(integration_pool: None) -> Generator[None, None, None]:
    _delete_all_jobs()
    yield
    _delete_all_jobs()


@pytest.fixture
def db_conn(clean_tables: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn
