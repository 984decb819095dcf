"""Shared fakes for the pipeline tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from lecture_sync.errors import DuplicateFileError, SourceError
from lecture_sync.schemas.catalog import CatalogEntry, RemoteFile
from lecture_sync.schemas.summary import SummaryResult

LONG_SUMMARY = (
    "**Introdução** Nesta aula estudamos probabilidade condicional e o teorema de Bayes. "
    * 8
)


def make_summary(**overrides) -> SummaryResult:
    data = {
        "title": "Probabilidade Condicional e Bayes",
        "summary": LONG_SUMMARY,
        "discipline": "Estatística",
        "lectureNumber": 3,
        "theme": "Probabilidade",
    }
    data.update(overrides)
    return SummaryResult.model_validate(data)


class FakeSource:
    """In-memory file source; downloads of IDs in ``failing`` raise."""

    def __init__(self, files: list[RemoteFile], failing: set[str] | None = None):
        self.files = files
        self.failing = failing or set()
        self.downloads: list[str] = []

    async def list_files(self, folder_id: str) -> list[RemoteFile]:
        return list(self.files)

    async def download(self, file_id: str) -> tuple[bytes, str]:
        self.downloads.append(file_id)
        if file_id in self.failing:
            raise SourceError(f"Failed to download file: {file_id}")
        return b"%PDF-1.4 fake", "application/pdf"


class FakeStore:
    """In-memory catalog store with a unique drive file ID constraint."""

    def __init__(self):
        self.entries: list[CatalogEntry] = []

    async def exists(self, drive_file_id: str) -> bool:
        return any(e.source.drive_file_id == drive_file_id for e in self.entries)

    async def insert(self, entry: CatalogEntry) -> None:
        if await self.exists(entry.source.drive_file_id):
            raise DuplicateFileError(entry.source.drive_file_id)
        self.entries.append(entry)

    def file_ids(self) -> list[str]:
        return [e.source.drive_file_id for e in self.entries]


@pytest.fixture
def remote_files() -> list[RemoteFile]:
    return [
        RemoteFile(id=f"file-{i}", name=f"aula{i}.pdf", mime_type="application/pdf")
        for i in range(1, 4)
    ]


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def summarizer():
    mock = MagicMock()
    mock.summarize = AsyncMock(return_value=make_summary())
    return mock
