"""Tests for the Postgres catalog store."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import asyncpg
import pytest

from lecture_sync.db import SCHEMA, CatalogStore, open_store
from lecture_sync.errors import DuplicateFileError
from lecture_sync.schemas.catalog import CatalogEntry, EntryMeta, SourceInfo


@pytest.fixture
def mock_pool():
    """Create a mock asyncpg pool."""
    pool = MagicMock()
    conn = MagicMock()

    # Setup async context manager
    conn.execute = AsyncMock()
    conn.fetchval = AsyncMock()
    conn.fetch = AsyncMock()

    pool.acquire.return_value.__aenter__ = AsyncMock(return_value=conn)
    pool.acquire.return_value.__aexit__ = AsyncMock(return_value=False)
    pool.close = AsyncMock()

    return pool, conn


@pytest.fixture
def entry():
    return CatalogEntry(
        title="Introdução a Grafos",
        summary="Resumo da aula",
        source=SourceInfo(drive_file_id="drive-1", file_name="aula1.pdf", mime_type="application/pdf"),
        meta=EntryMeta(discipline="Algoritmos", lecture_number=1, theme=""),
    )


@pytest.mark.asyncio
async def test_ensure_schema(mock_pool):
    pool, conn = mock_pool

    await CatalogStore(pool).ensure_schema()

    conn.execute.assert_awaited_once_with(SCHEMA)
    assert "UNIQUE INDEX" in SCHEMA


@pytest.mark.asyncio
async def test_exists_true(mock_pool):
    pool, conn = mock_pool
    conn.fetchval.return_value = 1

    assert await CatalogStore(pool).exists("drive-1") is True
    assert conn.fetchval.call_args[0][1] == "drive-1"


@pytest.mark.asyncio
async def test_exists_false(mock_pool):
    pool, conn = mock_pool
    conn.fetchval.return_value = None

    assert await CatalogStore(pool).exists("drive-1") is False


@pytest.mark.asyncio
async def test_insert(mock_pool, entry):
    pool, conn = mock_pool

    await CatalogStore(pool).insert(entry)

    args = conn.execute.call_args[0]
    assert "INSERT INTO catalog_entries" in args[0]
    assert args[1] == entry.id
    assert args[4] == "drive-1"
    assert args[8] == 1
    assert args[10] == entry.created_at


@pytest.mark.asyncio
async def test_insert_duplicate(mock_pool, entry):
    pool, conn = mock_pool
    conn.execute.side_effect = asyncpg.UniqueViolationError("duplicate key value")

    with pytest.raises(DuplicateFileError) as exc_info:
        await CatalogStore(pool).insert(entry)

    assert exc_info.value.drive_file_id == "drive-1"


@pytest.mark.asyncio
async def test_list_all(mock_pool):
    pool, conn = mock_pool
    created = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)
    conn.fetch.return_value = [
        {
            "id": "entry-1",
            "title": "Introdução a Grafos",
            "summary": "Resumo",
            "drive_file_id": "drive-1",
            "file_name": "aula1.pdf",
            "mime_type": "application/pdf",
            "discipline": "",
            "lecture_number": None,
            "theme": "",
            "created_at": created,
        }
    ]

    entries = await CatalogStore(pool).list_all(limit=5)

    assert len(entries) == 1
    assert entries[0].source.drive_file_id == "drive-1"
    assert entries[0].meta.lecture_number is None
    assert entries[0].created_at == created
    query, limit = conn.fetch.call_args[0]
    assert "ORDER BY created_at DESC" in query
    assert limit == 5


@pytest.mark.asyncio
async def test_run_lock_acquired(mock_pool):
    pool, conn = mock_pool
    conn.fetchval.return_value = True

    async with CatalogStore(pool).run_lock(42) as acquired:
        assert acquired is True

    conn.execute.assert_awaited_once_with("SELECT pg_advisory_unlock($1)", 42)


@pytest.mark.asyncio
async def test_run_lock_held_elsewhere(mock_pool):
    pool, conn = mock_pool
    conn.fetchval.return_value = False

    async with CatalogStore(pool).run_lock(42) as acquired:
        assert acquired is False

    conn.execute.assert_not_called()


@pytest.mark.asyncio
async def test_open_store_closes_pool(mock_pool):
    pool, _ = mock_pool

    with patch("lecture_sync.db.asyncpg.create_pool", new=AsyncMock(return_value=pool)):
        async with open_store("postgresql://test") as store:
            assert store.pool is pool

    pool.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_open_store_closes_pool_on_error(mock_pool):
    pool, _ = mock_pool

    with patch("lecture_sync.db.asyncpg.create_pool", new=AsyncMock(return_value=pool)):
        with pytest.raises(RuntimeError):
            async with open_store("postgresql://test"):
                raise RuntimeError("boom")

    pool.close.assert_awaited_once()
