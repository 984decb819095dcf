"""Exceptions raised by the lecture sync pipeline.

Each stage of the pipeline raises a subclass of :class:`LectureSyncError`.
The orchestrator catches them per file; only source listing failures
propagate out of a run.
"""

from typing import Any, Optional


class LectureSyncError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class NetworkError(LectureSyncError):
    """Transient transport failure talking to a remote service."""

    pass


# =============================================================================
# Extraction
# =============================================================================


class ExtractionError(LectureSyncError):
    """Base exception for PDF text extraction errors."""

    pass


class UnsupportedFormatError(ExtractionError):
    """File is not a PDF."""

    def __init__(self, mime_type: str) -> None:
        super().__init__(
            f"Unsupported file type: {mime_type}. Only PDFs are accepted.",
            {"mime_type": mime_type},
        )


class PDFParseError(ExtractionError):
    """PDF byte stream could not be parsed."""

    pass


class EmptyOrCorruptError(ExtractionError):
    """PDF has no pages or too little text to summarize."""

    pass


# =============================================================================
# Summarization
# =============================================================================


class SummarizationError(LectureSyncError):
    """Base exception for summary generation errors."""

    pass


class TextTooShortError(SummarizationError):
    """Input text is too short to summarize."""

    def __init__(self, length: int, minimum: int) -> None:
        super().__init__(
            f"Text too short to summarize ({length} < {minimum} characters)",
            {"length": length, "minimum": minimum},
        )


class RateLimitedError(SummarizationError):
    """Completion endpoint rejected the request with a rate limit."""

    def __init__(
        self,
        message: str,
        retry_after: Optional[float] = None,
        attempts: int = 1,
        waited: float = 0.0,
    ) -> None:
        details: dict[str, Any] = {"attempts": attempts}
        if retry_after is not None:
            details["retry_after"] = retry_after
        if waited:
            details["waited"] = waited
        super().__init__(message, details)
        self.retry_after = retry_after
        self.attempts = attempts
        self.waited = waited


class ProviderError(SummarizationError):
    """Completion endpoint returned a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(
            f"Completion request failed with status {status_code}: {body}",
            {"status_code": status_code},
        )
        self.status_code = status_code
        self.body = body


class MalformedResponseError(SummarizationError):
    """Completion response is not the expected JSON shape."""

    pass


class InvalidSummaryShapeError(SummarizationError):
    """The summary field could not be normalized into a string."""

    pass


class SchemaValidationError(SummarizationError):
    """Normalized model output failed schema validation."""

    def __init__(self, fields: list[str], errors: list[dict[str, Any]]) -> None:
        super().__init__(
            f"Summary failed validation on fields: {', '.join(fields)}",
            {"fields": fields},
        )
        self.fields = fields
        self.errors = errors


class FileProcessingError(LectureSyncError):
    """A file failed at one stage of the sync pipeline."""

    def __init__(self, file_id: str, file_name: str, stage: str, cause: Exception) -> None:
        super().__init__(
            f"Failed to process '{file_name}' at stage '{stage}': {cause}",
            {"file_id": file_id, "stage": stage},
        )
        self.file_id = file_id
        self.file_name = file_name
        self.stage = stage
        self.reason = str(cause) or type(cause).__name__


# =============================================================================
# Sources and storage
# =============================================================================


class SourceError(LectureSyncError):
    """Listing or downloading from the file source failed."""

    pass


class SourceFileNotFoundError(SourceError):
    """File does not exist in the source."""

    def __init__(self, file_id: str) -> None:
        super().__init__(f"File with ID '{file_id}' not found", {"file_id": file_id})


class StoreError(LectureSyncError):
    """Catalog store operation failed."""

    pass


class DuplicateFileError(StoreError):
    """A catalog entry for this drive file already exists."""

    def __init__(self, drive_file_id: str) -> None:
        super().__init__(
            f"Catalog entry already exists for file '{drive_file_id}'",
            {"drive_file_id": drive_file_id},
        )
        self.drive_file_id = drive_file_id
