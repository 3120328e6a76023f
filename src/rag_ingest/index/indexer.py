"""Embed chunks and upsert them into a collection in paced batches."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable

from rag_ingest.config import settings
from rag_ingest.index.base import IndexServiceBase
from rag_ingest.ingestion.embedder import Embedder
from rag_ingest.models import Chunk, IndexedPoint, IndexResult

logger = logging.getLogger(__name__)


class BatchIndexer:
    """Write chunks to the index in groups of at most *batch_size*.

    Each group is embedded with one provider call and written with one
    upsert.  The indexer sleeps *cooldown_seconds* between groups so a
    local embedding server is not flooded.  A failing group aborts the
    run; groups already written stay in the collection.

    Parameters
    ----------
    embedder:
        Produces one vector per chunk text.
    index_service:
        Destination backend.
    collection_name:
        Target collection (must already be reconciled).
    batch_size:
        Maximum number of chunks per embed/upsert round.
    cooldown_seconds:
        Pause between consecutive rounds.
    sleep:
        Sleep function, replaceable in tests.
    """

    def __init__(
        self,
        embedder: Embedder,
        index_service: IndexServiceBase,
        collection_name: str = settings.collection_name,
        *,
        batch_size: int = settings.batch_size,
        cooldown_seconds: float = settings.batch_cooldown_seconds,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._embedder = embedder
        self._service = index_service
        self.collection_name = collection_name
        self.batch_size = batch_size
        self.cooldown_seconds = cooldown_seconds
        self._sleep = sleep

    def index(self, chunks: list[Chunk]) -> IndexResult:
        """Embed and upsert *chunks* in order.

        Raises
        ------
        EmbedError
            When the provider fails on any group.
        IndexServiceError
            When an upsert fails.
        """
        total_batches = math.ceil(len(chunks) / self.batch_size)
        logger.info("Adding %d chunks in batches of %d...", len(chunks), self.batch_size)

        result = IndexResult()
        t0 = time.monotonic()
        for start in range(0, len(chunks), self.batch_size):
            batch = chunks[start : start + self.batch_size]
            logger.info("Processing batch %d/%d", result.batch_count + 1, total_batches)

            vectors = self._embedder.embed_documents([c.text for c in batch])
            points = [
                IndexedPoint(vector=vector, payload=chunk.to_payload())
                for chunk, vector in zip(batch, vectors)
            ]
            self._service.upsert_points(self.collection_name, points)

            result.inserted_count += len(points)
            result.batch_count += 1
            if start + self.batch_size < len(chunks) and self.cooldown_seconds > 0:
                self._sleep(self.cooldown_seconds)

        logger.info(
            "Indexed %d chunks into %s in %.1fs (%d batches)",
            result.inserted_count,
            self.collection_name,
            time.monotonic() - t0,
            result.batch_count,
        )
        return result
