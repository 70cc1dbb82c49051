import os
import uuid
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from rag_ingestion.config.settings import Settings
from rag_ingestion.database.connection import apply_schema, close_pool, get_connection, init_pool


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "rag_ingestion_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        apply_schema()
    except Exception as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a scratch database"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def document_id(db_conn: psycopg.Connection[Any]) -> Generator[str, None, None]:
    """A unique document id whose validation row is removed afterwards."""
    value = f"it-{uuid.uuid4()}"
    yield value
    with db_conn.cursor() as cur:
        cur.execute("DELETE FROM document_validations WHERE document_id = %s", (value,))
    db_conn.commit()
