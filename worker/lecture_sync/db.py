"""Postgres catalog store using an asyncpg connection pool."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import asyncpg

from lecture_sync.config import DATABASE_URL, SYNC_LOCK_KEY
from lecture_sync.errors import DuplicateFileError
from lecture_sync.schemas.catalog import CatalogEntry, EntryMeta, SourceInfo

logger = logging.getLogger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS catalog_entries (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        summary TEXT NOT NULL,
        drive_file_id TEXT NOT NULL,
        file_name TEXT NOT NULL,
        mime_type TEXT NOT NULL,
        discipline TEXT NOT NULL DEFAULT '',
        lecture_number INTEGER,
        theme TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    CREATE UNIQUE INDEX IF NOT EXISTS catalog_entries_drive_file_id_key
        ON catalog_entries (drive_file_id);
    CREATE INDEX IF NOT EXISTS catalog_entries_created_at_idx
        ON catalog_entries (created_at DESC);
"""


def row_to_entry(row) -> CatalogEntry:
    """Build a CatalogEntry from a catalog_entries row."""
    return CatalogEntry(
        id=row["id"],
        title=row["title"],
        summary=row["summary"],
        source=SourceInfo(
            drive_file_id=row["drive_file_id"],
            file_name=row["file_name"],
            mime_type=row["mime_type"],
        ),
        meta=EntryMeta(
            discipline=row["discipline"],
            lecture_number=row["lecture_number"],
            theme=row["theme"],
        ),
        created_at=row["created_at"],
    )


class CatalogStore:
    """Catalog entries keyed by source file, one per drive file ID.

    Args:
        pool: asyncpg connection pool owned by the caller
    """

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def ensure_schema(self) -> None:
        """Create the catalog table and its indexes if missing."""
        async with self.pool.acquire() as conn:
            await conn.execute(SCHEMA)
        logger.info("Catalog schema ready")

    async def exists(self, drive_file_id: str) -> bool:
        """Check whether an entry was stored for a drive file.

        Args:
            drive_file_id: Source file ID

        Returns:
            True if a catalog entry exists
        """
        query = """
            SELECT 1 FROM catalog_entries
            WHERE drive_file_id = $1
        """

        async with self.pool.acquire() as conn:
            found = await conn.fetchval(query, drive_file_id)
            return found is not None

    async def insert(self, entry: CatalogEntry) -> None:
        """Insert a new catalog entry.

        Args:
            entry: Entry to store

        Raises:
            DuplicateFileError: If an entry for the same drive file exists
        """
        query = """
            INSERT INTO catalog_entries (
                id, title, summary, drive_file_id, file_name, mime_type,
                discipline, lecture_number, theme, created_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
        """

        async with self.pool.acquire() as conn:
            try:
                await conn.execute(
                    query,
                    entry.id,
                    entry.title,
                    entry.summary,
                    entry.source.drive_file_id,
                    entry.source.file_name,
                    entry.source.mime_type,
                    entry.meta.discipline,
                    entry.meta.lecture_number,
                    entry.meta.theme,
                    entry.created_at,
                )
            except asyncpg.UniqueViolationError as e:
                raise DuplicateFileError(entry.source.drive_file_id) from e

    async def list_all(self, limit: Optional[int] = None) -> list[CatalogEntry]:
        """List catalog entries, newest first.

        Args:
            limit: Maximum number of entries (all if None)

        Returns:
            Entries ordered by created_at descending
        """
        query = """
            SELECT id, title, summary, drive_file_id, file_name, mime_type,
                   discipline, lecture_number, theme, created_at
            FROM catalog_entries
            ORDER BY created_at DESC
            LIMIT $1
        """

        async with self.pool.acquire() as conn:
            rows = await conn.fetch(query, limit)
            return [row_to_entry(row) for row in rows]

    @asynccontextmanager
    async def run_lock(self, key: int = SYNC_LOCK_KEY) -> AsyncIterator[bool]:
        """Hold a session advisory lock for the duration of a sync run.

        Yields:
            True if this session holds the lock, False if another run does
        """
        async with self.pool.acquire() as conn:
            acquired = await conn.fetchval("SELECT pg_try_advisory_lock($1)", key)
            try:
                yield bool(acquired)
            finally:
                if acquired:
                    await conn.execute("SELECT pg_advisory_unlock($1)", key)


@asynccontextmanager
async def open_store(dsn: str = DATABASE_URL) -> AsyncIterator[CatalogStore]:
    """Open a catalog store for one run and close its pool on exit.

    Args:
        dsn: Postgres connection string
    """
    pool = await asyncpg.create_pool(dsn, min_size=1, max_size=5, command_timeout=60)
    logger.info("Database connection pool created")
    try:
        yield CatalogStore(pool)
    finally:
        await pool.close()
        logger.info("Database connection pool closed")
