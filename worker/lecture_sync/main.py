"""Entry points for running a sync and inspecting the catalog.

Usage:
    lecture-sync sync
    lecture-sync sync --folder-id <DRIVE_FOLDER_ID>
    lecture-sync list --limit 20
    lecture-sync init-db
"""
import argparse
import asyncio
import json
import logging
from typing import Optional

import asyncpg

from lecture_sync.config import DATABASE_URL, DRIVE_FOLDER_ID, LOG_LEVEL
from lecture_sync.db import open_store
from lecture_sync.errors import LectureSyncError
from lecture_sync.pipeline import sync_folder
from lecture_sync.schemas.catalog import CatalogEntry, SyncResult
from lecture_sync.sources import FileSource, get_source
from lecture_sync.summarizer import Summarizer

logger = logging.getLogger(__name__)


async def run_sync(
    folder_id: str = "",
    source: Optional[FileSource] = None,
    summarizer: Optional[Summarizer] = None,
    dsn: str = DATABASE_URL,
) -> Optional[SyncResult]:
    """Run one sync of the configured folder.

    The store is opened for this run only and closed on every exit path.
    Returns None without syncing when another run holds the sync lock.

    Raises:
        ValueError: If no folder ID is configured
        LectureSyncError: If the folder cannot be listed
    """
    folder_id = folder_id or DRIVE_FOLDER_ID
    if not folder_id:
        raise ValueError("DRIVE_FOLDER_ID environment variable is required")

    source = source or get_source()
    summarizer = summarizer or Summarizer()

    async with open_store(dsn) as store:
        async with store.run_lock() as acquired:
            if not acquired:
                logger.warning("Another sync run is in progress; skipping this run")
                return None
            await store.ensure_schema()
            return await sync_folder(folder_id, source, store, summarizer)


async def list_entries(limit: Optional[int] = None, dsn: str = DATABASE_URL) -> list[CatalogEntry]:
    """Load catalog entries, newest first."""
    async with open_store(dsn) as store:
        return await store.list_all(limit)


async def init_db(dsn: str = DATABASE_URL) -> None:
    """Create the catalog table and indexes."""
    async with open_store(dsn) as store:
        await store.ensure_schema()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lecture-sync",
        description="Summarize new lecture PDFs from a folder into the catalog.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Process new files in the folder")
    sync_parser.add_argument("--folder-id", default="", help="Overrides DRIVE_FOLDER_ID")

    list_parser = subparsers.add_parser("list", help="Print stored catalog entries")
    list_parser.add_argument("--limit", type=int, default=None)

    subparsers.add_parser("init-db", help="Create the catalog table")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the lecture-sync command."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s"
    )

    try:
        if args.command == "sync":
            result = asyncio.run(run_sync(args.folder_id))
            if result is None:
                print(json.dumps({"skipped": True, "reason": "sync already running"}))
            else:
                print(result.model_dump_json(indent=2))
        elif args.command == "list":
            entries = asyncio.run(list_entries(args.limit))
            print(json.dumps([e.model_dump(mode="json") for e in entries], indent=2, ensure_ascii=False))
        elif args.command == "init-db":
            asyncio.run(init_db())
            print("Catalog schema ready")
    except (LectureSyncError, ValueError, OSError, asyncpg.PostgresError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Stopped by user")
        return 130

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
