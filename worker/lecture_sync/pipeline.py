"""Folder sync pipeline: download, extract, summarize and store new lectures."""

import asyncio
import json
import logging
import time
from typing import Awaitable, Callable

from lecture_sync.config import DELAY_BETWEEN_FILES
from lecture_sync.db import CatalogStore
from lecture_sync.errors import DuplicateFileError, FileProcessingError
from lecture_sync.extractor import extract_text
from lecture_sync.schemas.catalog import (
    CatalogEntry,
    EntryMeta,
    FileFailure,
    RemoteFile,
    SourceInfo,
    SyncResult,
)
from lecture_sync.schemas.summary import SummaryResult
from lecture_sync.sources.base import FileSource
from lecture_sync.summarizer import Summarizer

logger = logging.getLogger(__name__)

STAGE_CHECK = "check"
STAGE_DOWNLOAD = "download"
STAGE_EXTRACT = "extract"
STAGE_SUMMARIZE = "summarize"
STAGE_PERSIST = "persist"


def build_catalog_entry(file: RemoteFile, mime_type: str, result: SummaryResult) -> CatalogEntry:
    """Map a summary onto the catalog record shown in the UI.

    Missing discipline and theme become empty strings; a missing or zero
    lecture number is left unset.
    """
    return CatalogEntry(
        title=result.title,
        summary=result.summary,
        source=SourceInfo(
            drive_file_id=file.id,
            file_name=file.name or "",
            mime_type=mime_type,
        ),
        meta=EntryMeta(
            discipline=result.discipline or "",
            lecture_number=result.lecture_number or None,
            theme=result.theme or "",
        ),
    )


async def process_file(
    file: RemoteFile,
    source: FileSource,
    store: CatalogStore,
    summarizer: Summarizer,
) -> CatalogEntry:
    """Run one file through download, extraction, summary and insert.

    Args:
        file: Unprocessed source file
        source: File source to download from
        store: Catalog store to insert into
        summarizer: Summary generator

    Returns:
        The stored catalog entry

    Raises:
        DuplicateFileError: If another run stored this file first
        FileProcessingError: If any stage fails
    """
    stage = STAGE_DOWNLOAD
    try:
        data, mime_type = await source.download(file.id)

        stage = STAGE_EXTRACT
        # PyMuPDF is CPU-bound
        text = await asyncio.to_thread(extract_text, data, mime_type)
        logger.info(f"Extracted {len(text)} characters from {file.name}, generating summary")

        stage = STAGE_SUMMARIZE
        result = await summarizer.summarize(text)

        stage = STAGE_PERSIST
        entry = build_catalog_entry(file, mime_type, result)
        await store.insert(entry)
    except DuplicateFileError:
        raise
    except Exception as e:
        raise FileProcessingError(file.id, file.name, stage, e) from e

    return entry


async def partition_files(
    files: list[RemoteFile], store: CatalogStore, result: SyncResult
) -> list[RemoteFile]:
    """Return the files with no catalog entry yet.

    Files whose existence check fails are recorded as failures on ``result``
    and left out.
    """
    unprocessed = []
    for file in files:
        try:
            processed = await store.exists(file.id)
        except Exception as e:
            logger.error(f"Existence check failed for {file.name} ({file.id}): {e}")
            result.failures.append(
                FileFailure(file_id=file.id, file_name=file.name, stage=STAGE_CHECK, reason=str(e))
            )
            continue

        if processed:
            logger.info(f"Already processed: {file.name}")
            result.skipped += 1
            continue
        unprocessed.append(file)
    return unprocessed


async def sync_folder(
    folder_id: str,
    source: FileSource,
    store: CatalogStore,
    summarizer: Summarizer,
    delay: float = DELAY_BETWEEN_FILES,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> SyncResult:
    """Sync a folder into the catalog, one file at a time.

    Args:
        folder_id: Source folder to sync
        source: File source
        store: Catalog store
        summarizer: Summary generator
        delay: Seconds to pause between files
        sleep: Awaitable sleep function

    Returns:
        SyncResult for this run

    Raises:
        LectureSyncError: If the folder cannot be listed
    """
    files = [f for f in await source.list_files(folder_id) if f.id]

    result = SyncResult()
    unprocessed = await partition_files(files, store, result)

    logger.info(
        f"Folder {folder_id}: {len(files)} files, {result.skipped} already processed, "
        f"{len(unprocessed)} pending"
    )

    if not unprocessed:
        logger.info("No new files to process")
        result.total = len(files)
        return result

    result.total = len(unprocessed)
    run_start = time.time()

    for index, file in enumerate(unprocessed, start=1):
        logger.info(f"[{index}/{len(unprocessed)}] Processing: {file.name}")
        start_time = time.time()

        try:
            entry = await process_file(file, source, store, summarizer)
            result.processed += 1

            elapsed_ms = int((time.time() - start_time) * 1000)
            logger.info(
                json.dumps(
                    {
                        "event": "file_processed",
                        "fileId": file.id,
                        "fileName": file.name,
                        "entryId": entry.id,
                        "elapsed_ms": elapsed_ms,
                    }
                )
            )
        except DuplicateFileError:
            result.duplicates += 1
            logger.info(f"Skipping {file.name}: stored by another run")
        except FileProcessingError as e:
            result.failures.append(
                FileFailure(
                    file_id=file.id, file_name=file.name, stage=e.stage, reason=e.reason
                )
            )
            logger.error(
                f"Error processing {file.name} ({file.id}) at stage {e.stage}: {e.reason}",
                exc_info=e.__cause__,
            )

        if index < len(unprocessed):
            logger.info(f"Waiting {delay:g}s before the next file")
            await sleep(delay)

    logger.info(
        json.dumps(
            {
                "event": "sync_complete",
                "folderId": folder_id,
                "processed": result.processed,
                "total": result.total,
                "skipped": result.skipped,
                "duplicates": result.duplicates,
                "failed": len(result.failures),
                "elapsed_ms": int((time.time() - run_start) * 1000),
            }
        )
    )
    return result
