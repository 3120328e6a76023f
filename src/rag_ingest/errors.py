"""Exception taxonomy for the ingestion worker.

Every error carries a ``retryable`` flag.  The job runner never acts on it;
the ingest task reads it to decide between a retry and a terminal failure.
"""

from __future__ import annotations


class IngestError(Exception):
    """Base class for all ingestion failures."""

    retryable: bool = False

    def __init__(self, message: str, *, retryable: bool | None = None) -> None:
        super().__init__(message)
        if retryable is not None:
            self.retryable = retryable


class InvalidJobError(IngestError):
    """The job payload cannot be resolved to a file path."""


class DocumentNotFoundError(IngestError, FileNotFoundError):
    """The resolved source document does not exist on disk."""

    def __init__(self, path: str) -> None:
        super().__init__(f"File not found at path: {path}")
        self.path = path


class LoadError(IngestError):
    """The document could not be read or contained no extractable text."""


class EmbedError(IngestError):
    """The embedding provider failed or returned an unusable response."""

    retryable = True


class IndexServiceError(IngestError):
    """The vector index service is unreachable or in an unexpected state."""

    retryable = True
