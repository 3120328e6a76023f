"""Chroma implementation of the index-service abstraction.

Chroma does not fix a vector size when a collection is created, so the
size is recorded in the collection metadata under ``"dimension"``.
"""

from __future__ import annotations

import logging
from typing import Any

import chromadb

from rag_ingest.config import settings
from rag_ingest.errors import IndexServiceError
from rag_ingest.index.base import IndexServiceBase
from rag_ingest.models import CollectionInfo, IndexedPoint

logger = logging.getLogger(__name__)

_SPACE_MAP = {"cosine": "cosine", "dot": "ip", "euclid": "l2"}
_DISTANCE_MAP = {space: distance for distance, space in _SPACE_MAP.items()}


def _flatten_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """Chroma metadata values must be flat str/int/float/bool."""
    meta: dict[str, Any] = {}
    for k, v in metadata.items():
        if isinstance(v, (str, int, float, bool)):
            meta[k] = v
        elif isinstance(v, list) and v:
            meta[k] = ",".join(str(item) for item in v)
    return meta


class ChromaIndexService(IndexServiceBase):
    """Chroma-backed index service.

    Parameters
    ----------
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    client:
        Pre-built Chroma client; overrides *host* / *port*.
    """

    def __init__(
        self,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        *,
        client: Any = None,
    ) -> None:
        self._client = client if client is not None else chromadb.HttpClient(host=host, port=port)

    # -- IndexServiceBase overrides -------------------------------------------

    def list_collections(self) -> set[str]:
        try:
            collections = self._client.list_collections()
        except Exception as exc:
            raise IndexServiceError(f"Chroma list collections failed: {exc}") from exc
        # Depending on the client version these are names or Collection objects.
        return {c if isinstance(c, str) else c.name for c in collections}

    def get_collection(self, name: str) -> CollectionInfo:
        try:
            collection = self._client.get_collection(name=name)
            meta = collection.metadata or {}
            size = meta.get("dimension")
            if size is None:
                peeked = collection.peek(limit=1)
                embeddings = peeked.get("embeddings")
                size = len(embeddings[0]) if embeddings is not None and len(embeddings) else 0
        except Exception as exc:
            raise IndexServiceError(f"Chroma get collection {name!r} failed: {exc}") from exc
        distance = _DISTANCE_MAP.get(meta.get("hnsw:space", "l2"), "euclid")
        return CollectionInfo(name=name, vector_size=int(size), distance=distance)

    def create_collection(self, name: str, vector_size: int, distance: str = "cosine") -> None:
        if distance not in _SPACE_MAP:
            raise ValueError(f"Unsupported distance metric: {distance!r}")
        try:
            self._client.create_collection(
                name=name,
                metadata={"hnsw:space": _SPACE_MAP[distance], "dimension": vector_size},
            )
        except Exception as exc:
            raise IndexServiceError(f"Chroma create collection {name!r} failed: {exc}") from exc
        logger.info("Created collection %s (size=%d, distance=%s)", name, vector_size, distance)

    def delete_collection(self, name: str) -> None:
        try:
            self._client.delete_collection(name=name)
        except Exception as exc:
            raise IndexServiceError(f"Chroma delete collection {name!r} failed: {exc}") from exc
        logger.info("Deleted collection %s", name)

    def upsert_points(self, collection_name: str, points: list[IndexedPoint]) -> None:
        try:
            collection = self._client.get_collection(name=collection_name)
            collection.upsert(
                ids=[p.id for p in points],
                embeddings=[p.vector for p in points],
                documents=[p.payload.get("page_content", "") for p in points],
                metadatas=[_flatten_metadata(p.payload.get("metadata", {})) for p in points],
            )
        except Exception as exc:
            raise IndexServiceError(f"Chroma upsert into {collection_name!r} failed: {exc}") from exc

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
