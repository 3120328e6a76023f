"""Domain models shared by the ingestion pipeline, index layer and worker."""

from __future__ import annotations

import json
import os
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rag_ingest.errors import InvalidJobError


class JobState(str, Enum):
    """Steps a job moves through inside the runner."""

    RECEIVED = "received"
    PATH_RESOLVED = "path_resolved"
    PROBING = "probing"
    RECONCILING = "reconciling"
    LOADING = "loading"
    CHUNKING = "chunking"
    INDEXING = "indexing"
    COMPLETED = "completed"
    FAILED = "failed"


class ReconcileAction(str, Enum):
    """What the reconciler has to do to bring a collection in line."""

    NOOP = "noop"
    CREATE = "create"
    RECREATE = "recreate"


class JobPayload(BaseModel):
    """File location carried by an upload job.

    Upload front-ends usually forward the whole multipart file record, so
    unknown keys (``originalname``, ``mimetype``, ...) are tolerated.
    """

    model_config = ConfigDict(extra="allow")

    path: str | None = None
    destination: str | None = None
    filename: str | None = None

    def resolve_path(self) -> str:
        """Return ``path`` if set, else ``destination`` joined with ``filename``."""
        if self.path:
            return self.path
        if self.destination and self.filename:
            return os.path.join(self.destination, self.filename)
        raise InvalidJobError("Job payload needs 'path' or both 'destination' and 'filename'")


class Job(BaseModel):
    """A unit of work received from the broker; *attempts* counts earlier deliveries."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    data: dict[str, Any] | str = Field(default_factory=dict)
    attempts: int = 0

    def payload(self) -> JobPayload:
        """Parse ``data`` (a mapping or a JSON string) into a :class:`JobPayload`."""
        data = self.data
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as exc:
                raise InvalidJobError(f"Job {self.id} data is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise InvalidJobError(f"Job {self.id} data must be a mapping, got {type(data).__name__}")
        try:
            return JobPayload.model_validate(data)
        except ValidationError as exc:
            raise InvalidJobError(f"Job {self.id} payload is malformed: {exc}") from exc


class Page(BaseModel):
    """One page of extracted text."""

    text: str
    page_index: int
    metadata: dict[str, Any] = Field(default_factory=dict)


class Chunk(BaseModel):
    """A bounded window of document text with its provenance.

    Attributes
    ----------
    text:
        The chunk content.
    chunk_index:
        Ordinal position of the chunk within the document.
    start:
        Offset of the first character in the page-joined document text.
    page:
        Page index the chunk starts on.
    pages:
        Every page index the chunk overlaps.
    source:
        File path of the originating document.
    doc_id:
        Stable identifier of the originating document.
    """

    text: str
    chunk_index: int
    start: int = 0
    page: int | None = None
    pages: list[int] = Field(default_factory=list)
    source: str = "unknown"
    doc_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Point payload in the layout LangChain vector stores read back."""
        return {
            "page_content": self.text,
            "metadata": {
                "chunk_index": self.chunk_index,
                "start": self.start,
                "page": self.page,
                "pages": list(self.pages),
                "source": self.source,
                "doc_id": self.doc_id,
            },
        }


class CollectionInfo(BaseModel):
    """Vector configuration of an existing collection."""

    name: str
    vector_size: int
    distance: str = "cosine"


class IndexedPoint(BaseModel):
    """A chunk embedding ready to be upserted."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    vector: list[float]
    payload: dict[str, Any] = Field(default_factory=dict)


class IndexResult(BaseModel):
    """Outcome of a :class:`~rag_ingest.index.indexer.BatchIndexer` run."""

    inserted_count: int = 0
    batch_count: int = 0


class JobResult(BaseModel):
    """Value the ingest task returns when a job completes."""

    success: bool = True
    doc_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "docCount": self.doc_count}
