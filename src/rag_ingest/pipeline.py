"""Wire the ingestion components together from settings."""

from __future__ import annotations

from rag_ingest.config import Settings, settings as default_settings
from rag_ingest.index import get_index_service
from rag_ingest.index.base import IndexServiceBase
from rag_ingest.index.indexer import BatchIndexer
from rag_ingest.index.reconciler import CollectionReconciler
from rag_ingest.ingestion.chunker import Chunker
from rag_ingest.ingestion.embedder import Embedder, EmbeddingProbe, get_embedding_function
from rag_ingest.ingestion.loader import PdfLoader
from rag_ingest.worker.runner import JobRunner, StateListener


def build_runner(
    cfg: Settings | None = None,
    *,
    embedder: Embedder | None = None,
    index_service: IndexServiceBase | None = None,
    listener: StateListener | None = None,
) -> JobRunner:
    """Return a :class:`JobRunner` configured from *cfg* (the global settings by default).

    *embedder* and *index_service* may be passed in to reuse clients or
    substitute fakes.
    """
    cfg = cfg or default_settings
    if embedder is None:
        embedder = Embedder(
            get_embedding_function(
                cfg.embedding_provider, cfg.embedding_model, base_url=cfg.ollama_base_url
            )
        )
    if index_service is None:
        index_service = get_index_service(cfg)

    return JobRunner(
        probe=EmbeddingProbe(
            embedder, sample_text=cfg.probe_text, fallback_dim=cfg.fallback_embedding_dim
        ),
        reconciler=CollectionReconciler(index_service, distance=cfg.distance_metric),
        loader=PdfLoader(),
        chunker=Chunker(cfg.chunk_size, cfg.chunk_overlap),
        indexer=BatchIndexer(
            embedder,
            index_service,
            cfg.collection_name,
            batch_size=cfg.batch_size,
            cooldown_seconds=cfg.batch_cooldown_seconds,
        ),
        collection_name=cfg.collection_name,
        listener=listener,
    )
