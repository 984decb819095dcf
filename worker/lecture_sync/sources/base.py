"""Base interface for lecture file sources."""

from abc import ABC, abstractmethod

from lecture_sync.schemas.catalog import RemoteFile


class FileSource(ABC):
    """A folder of lecture files that can be listed and downloaded."""

    @abstractmethod
    async def list_files(self, folder_id: str) -> list[RemoteFile]:
        """List the files in a folder.

        Args:
            folder_id: Folder identifier

        Returns:
            Files in the folder (not recursive)
        """
        pass

    @abstractmethod
    async def download(self, file_id: str) -> tuple[bytes, str]:
        """Download a file.

        Args:
            file_id: File identifier from list_files

        Returns:
            Tuple of (file bytes, MIME type)
        """
        pass
