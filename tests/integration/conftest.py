import os
from collections.abc import Generator

import pytest

from docarchive.config.settings import Settings
from docarchive.store.connection import close_pool, get_connection, init_pool
from docarchive.store.postgres_store import PostgresDocumentStore


def _db_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docarchive_test")
    return Settings(document_store="postgres")


@pytest.fixture(scope="session")
def db_settings() -> Settings:
    return _db_settings()


@pytest.fixture(scope="session")
def integration_pool(db_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(db_settings)
        with get_connection() as conn:
            conn.execute("SELECT 1")
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def integration_cleanup() -> Generator[list[str], None, None]:
    cleanup: list[str] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for record_id in cleanup:
                cur.execute("DELETE FROM archived_documents WHERE id = %s::uuid", (record_id,))
        conn.commit()


@pytest.fixture
def postgres_store(integration_pool: None, db_settings: Settings) -> PostgresDocumentStore:
    store = PostgresDocumentStore(db_settings.preview_url_prefix)
    store.ensure_schema()
    return store
