"""Catalog records and sync run results."""
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RemoteFile(BaseModel):
    """A file listed in the source folder."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str = ""
    mime_type: str = Field(default="", alias="mimeType")


class SourceInfo(BaseModel):
    """Where a catalog entry came from."""
    drive_file_id: str
    file_name: str
    mime_type: str


class EntryMeta(BaseModel):
    """Descriptive fields shown alongside a catalog entry."""
    discipline: str = ""
    lecture_number: Optional[int] = None
    theme: Optional[str] = None


class CatalogEntry(BaseModel):
    """Persisted study summary for one source file."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    summary: str
    source: SourceInfo
    meta: EntryMeta
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class FileFailure(BaseModel):
    """A file that did not advance during a sync run."""
    file_id: str
    file_name: str
    stage: str
    reason: str


class SyncResult(BaseModel):
    """Outcome of one sync run.

    ``total`` counts the files attempted in this run, not the whole folder;
    add ``skipped`` for the folder's full listing. A run with nothing to
    attempt reports the listing size as ``total``.
    """
    processed: int = 0
    total: int = 0
    skipped: int = 0
    duplicates: int = 0
    failures: List[FileFailure] = []
