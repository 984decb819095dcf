"""Pydantic models and the summary prompt."""

from lecture_sync.schemas.catalog import (
    CatalogEntry,
    EntryMeta,
    FileFailure,
    RemoteFile,
    SourceInfo,
    SyncResult,
)
from lecture_sync.schemas.summary import PROMPT, SummaryResult

__all__ = [
    "CatalogEntry",
    "EntryMeta",
    "FileFailure",
    "PROMPT",
    "RemoteFile",
    "SourceInfo",
    "SummaryResult",
    "SyncResult",
]
