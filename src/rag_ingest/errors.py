"""Error taxonomy for the ingestion service.

Every error carries the HTTP status code the serving layer answers with,
so the FastAPI exception handler never has to inspect concrete types.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base class for failures while ingesting an uploaded document."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(IngestionError):
    """The upload was rejected before any processing (type, size, content)."""

    status_code = 400


class ExtractionError(ValidationError):
    """Text could not be extracted from the uploaded bytes."""


class ConfigurationError(IngestionError):
    """A required setting (API key, index name …) is missing."""


class EmbeddingError(IngestionError):
    """The embedding provider failed or returned a malformed response."""


class ProcessingError(IngestionError):
    """Chunking or indexing produced no usable output."""
