"""Job runner: drives one upload job through the ingestion steps.

States, in order::

    RECEIVED → PATH_RESOLVED → PROBING → RECONCILING → LOADING
             → CHUNKING → INDEXING → COMPLETED

Any failure moves the job to ``FAILED`` and re-raises the original
exception; retry decisions belong to the ingest task.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import Protocol

from rag_ingest.config import settings
from rag_ingest.errors import DocumentNotFoundError
from rag_ingest.index.indexer import BatchIndexer
from rag_ingest.index.reconciler import CollectionReconciler
from rag_ingest.ingestion.chunker import Chunker
from rag_ingest.ingestion.embedder import EmbeddingProbe
from rag_ingest.models import Job, JobResult, JobState, Page

logger = logging.getLogger(__name__)

StateListener = Callable[[str, JobState], None]


class DocumentLoader(Protocol):
    def load(self, path: str) -> list[Page]: ...


class JobRunner:
    """Run the ingestion steps for a single job, strictly in order.

    Parameters
    ----------
    probe:
        Measures the embedding dimension (never fails).
    reconciler:
        Makes the target collection match that dimension.
    loader:
        Extracts pages from the resolved file.
    chunker:
        Splits pages into chunks.
    indexer:
        Embeds and upserts chunks.
    collection_name:
        Collection the job writes into.
    listener:
        Optional ``listener(job_id, state)`` called on every transition.
    """

    def __init__(
        self,
        probe: EmbeddingProbe,
        reconciler: CollectionReconciler,
        loader: DocumentLoader,
        chunker: Chunker,
        indexer: BatchIndexer,
        *,
        collection_name: str = settings.collection_name,
        listener: StateListener | None = None,
    ) -> None:
        self._probe = probe
        self._reconciler = reconciler
        self._loader = loader
        self._chunker = chunker
        self._indexer = indexer
        self.collection_name = collection_name
        self._listener = listener

    def _enter(self, job: Job, state: JobState) -> None:
        logger.debug("Job %s → %s", job.id, state.value)
        if self._listener is not None:
            self._listener(job.id, state)

    def run(self, job: Job) -> JobResult:
        """Process *job* and return its result, or raise the step's error."""
        self._enter(job, JobState.RECEIVED)
        logger.info("Processing job: %s", job.id)
        try:
            path = job.payload().resolve_path()
            self._enter(job, JobState.PATH_RESOLVED)
            logger.info("Loading PDF from: %s", path)
            if not os.path.exists(path):
                raise DocumentNotFoundError(path)

            self._enter(job, JobState.PROBING)
            dimension = self._probe.probe()

            self._enter(job, JobState.RECONCILING)
            self._reconciler.reconcile(self.collection_name, dimension)

            self._enter(job, JobState.LOADING)
            pages = self._loader.load(path)

            self._enter(job, JobState.CHUNKING)
            chunks = self._chunker.split(pages, source=path)

            self._enter(job, JobState.INDEXING)
            result = self._indexer.index(chunks)
        except Exception:
            self._enter(job, JobState.FAILED)
            logger.error("Error processing job %s", job.id, exc_info=True)
            raise

        self._enter(job, JobState.COMPLETED)
        logger.info("All %d chunks of job %s added to vector store", result.inserted_count, job.id)
        return JobResult(success=True, doc_count=len(chunks))
