"""Google Drive file source."""

import asyncio
import io
import json
import logging
from typing import Any, Optional

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseDownload

from lecture_sync.config import GOOGLE_SERVICE_ACCOUNT_JSON
from lecture_sync.errors import NetworkError, SourceError, SourceFileNotFoundError
from lecture_sync.schemas.catalog import RemoteFile
from lecture_sync.sources.base import FileSource

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/drive.readonly"]


def build_drive_service(service_account_json: str = "") -> Any:
    """Build a Drive v3 service from service account key JSON."""
    raw = service_account_json or GOOGLE_SERVICE_ACCOUNT_JSON
    if not raw:
        raise ValueError("GOOGLE_SERVICE_ACCOUNT_JSON environment variable is required")

    try:
        info = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"GOOGLE_SERVICE_ACCOUNT_JSON is not valid JSON: {e}") from e

    credentials = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
    return build("drive", "v3", credentials=credentials, cache_discovery=False)


class DriveSource(FileSource):
    """Lists and downloads files from a Google Drive folder."""

    def __init__(self, service: Optional[Any] = None, page_size: int = 100):
        self.service = service or build_drive_service()
        self.page_size = page_size

    def _list_sync(self, folder_id: str) -> list[dict]:
        query = f"'{folder_id}' in parents and trashed = false"
        files = []
        page_token = None
        while True:
            response = (
                self.service.files()
                .list(
                    q=query,
                    fields="nextPageToken, files(id, name, mimeType)",
                    pageSize=self.page_size,
                    pageToken=page_token,
                )
                .execute()
            )
            files.extend(response.get("files", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break
        return files

    def _download_sync(self, file_id: str) -> tuple[bytes, str]:
        buffer = io.BytesIO()
        request = self.service.files().get_media(fileId=file_id)
        downloader = MediaIoBaseDownload(buffer, request)
        done = False
        while not done:
            _status, done = downloader.next_chunk()

        meta = self.service.files().get(fileId=file_id, fields="mimeType").execute()
        return buffer.getvalue(), meta.get("mimeType", "")

    async def list_files(self, folder_id: str) -> list[RemoteFile]:
        """List non-trashed files directly inside a Drive folder."""
        try:
            # The Google API client is blocking
            raw_files = await asyncio.to_thread(self._list_sync, folder_id)
        except HttpError as e:
            logger.error(f"Failed to list files in folder {folder_id}: {e}")
            raise SourceError(f"Failed to list files: {e}", {"folder_id": folder_id}) from e
        except RefreshError as e:
            logger.error(f"Drive credentials were rejected: {e}")
            raise SourceError(f"Drive credentials were rejected: {e}", {"folder_id": folder_id}) from e
        except (OSError, httplib2.HttpLib2Error, TransportError) as e:
            raise NetworkError(f"Failed to reach Google Drive: {e}", {"folder_id": folder_id}) from e

        logger.info(f"Found {len(raw_files)} files in folder {folder_id}")
        return [RemoteFile.model_validate(f) for f in raw_files]

    async def download(self, file_id: str) -> tuple[bytes, str]:
        """Download file content and its MIME type."""
        try:
            data, mime_type = await asyncio.to_thread(self._download_sync, file_id)
        except HttpError as e:
            if e.resp.status == 404:
                raise SourceFileNotFoundError(file_id) from e
            logger.error(f"Failed to download file {file_id}: {e}")
            raise SourceError(f"Failed to download file: {e}", {"file_id": file_id}) from e
        except RefreshError as e:
            logger.error(f"Drive credentials were rejected: {e}")
            raise SourceError(f"Drive credentials were rejected: {e}", {"file_id": file_id}) from e
        except (OSError, httplib2.HttpLib2Error, TransportError) as e:
            raise NetworkError(f"Failed to reach Google Drive: {e}", {"file_id": file_id}) from e

        logger.debug(f"Downloaded {file_id} ({len(data)} bytes, {mime_type})")
        return data, mime_type
