"""Local directory file source, for running without Google Drive."""

import asyncio
import logging
import mimetypes
from pathlib import Path
from typing import Optional

from lecture_sync.config import LOCAL_SOURCE_ROOT
from lecture_sync.errors import SourceError, SourceFileNotFoundError
from lecture_sync.schemas.catalog import RemoteFile
from lecture_sync.sources.base import FileSource

logger = logging.getLogger(__name__)


class LocalFolderSource(FileSource):
    """Files under a root directory.

    Folder IDs are subdirectories of the root (empty for the root itself)
    and file IDs are POSIX paths relative to the root.
    """

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root or LOCAL_SOURCE_ROOT).resolve()

    def _resolve(self, relative: str) -> Path:
        path = (self.root / relative).resolve()
        if path != self.root and self.root not in path.parents:
            raise SourceError(f"Path escapes source root: {relative}")
        return path

    async def list_files(self, folder_id: str) -> list[RemoteFile]:
        folder = self._resolve(folder_id)
        if not folder.is_dir():
            raise SourceError(f"Folder not found: {folder}", {"folder_id": folder_id})

        files = []
        for path in sorted(folder.iterdir()):
            if not path.is_file():
                continue
            mime_type, _ = mimetypes.guess_type(path.name)
            files.append(
                RemoteFile(
                    id=path.relative_to(self.root).as_posix(),
                    name=path.name,
                    mime_type=mime_type or "application/octet-stream",
                )
            )

        logger.info(f"Found {len(files)} files in {folder}")
        return files

    async def download(self, file_id: str) -> tuple[bytes, str]:
        path = self._resolve(file_id)
        if not path.is_file():
            raise SourceFileNotFoundError(file_id)

        data = await asyncio.to_thread(path.read_bytes)
        mime_type, _ = mimetypes.guess_type(path.name)
        return data, mime_type or "application/octet-stream"
