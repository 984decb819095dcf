"""Source factory and exports."""
from lecture_sync.config import SOURCE_PROVIDER
from lecture_sync.sources.base import FileSource


def get_source() -> FileSource:
    """Get the configured file source.

    Returns:
        FileSource instance based on SOURCE_PROVIDER config
    """
    if SOURCE_PROVIDER == "local":
        from lecture_sync.sources.local import LocalFolderSource
        return LocalFolderSource()
    else:
        from lecture_sync.sources.drive import DriveSource
        return DriveSource()


__all__ = ["FileSource", "get_source"]
