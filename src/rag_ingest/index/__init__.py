"""
Index — vector collection management and batched writes.

Public surface
--------------
- :class:`IndexServiceBase` — abstract backend (subclass for other stores).
- :class:`QdrantIndexService` — default Qdrant backend.
- :class:`ChromaIndexService` — Chroma backend.
- :class:`CollectionReconciler`, :func:`plan_reconcile` — dimension consistency.
- :class:`BatchIndexer` — paced embed + upsert.
- :func:`get_index_service` — backend factory driven by settings.
"""

from rag_ingest.config import Settings, settings
from rag_ingest.index.base import IndexServiceBase
from rag_ingest.index.indexer import BatchIndexer
from rag_ingest.index.reconciler import CollectionReconciler, plan_reconcile

__all__ = [
    "BatchIndexer",
    "ChromaIndexService",
    "CollectionReconciler",
    "IndexServiceBase",
    "QdrantIndexService",
    "get_index_service",
    "plan_reconcile",
]


def get_index_service(cfg: Settings = settings) -> IndexServiceBase:
    """Build the index backend selected by ``cfg.vector_backend``."""
    if cfg.vector_backend == "qdrant":
        from rag_ingest.index.qdrant_store import QdrantIndexService

        return QdrantIndexService(cfg.qdrant_url, timeout=cfg.qdrant_timeout)
    if cfg.vector_backend == "chroma":
        from rag_ingest.index.chroma_store import ChromaIndexService

        return ChromaIndexService(cfg.chroma_host, cfg.chroma_port)
    raise ValueError(f"Unsupported vector backend: {cfg.vector_backend!r}")


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import backends to avoid pulling in their clients at import time."""
    if name == "QdrantIndexService":
        from rag_ingest.index.qdrant_store import QdrantIndexService

        return QdrantIndexService
    if name == "ChromaIndexService":
        from rag_ingest.index.chroma_store import ChromaIndexService

        return ChromaIndexService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
