"""Qdrant implementation of the index-service abstraction."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from qdrant_client import QdrantClient
from qdrant_client.models import Distance, PointStruct, VectorParams

from rag_ingest.config import settings
from rag_ingest.errors import IndexServiceError
from rag_ingest.index.base import IndexServiceBase
from rag_ingest.models import CollectionInfo, IndexedPoint

logger = logging.getLogger(__name__)

_DISTANCE_MAP = {
    "cosine": Distance.COSINE,
    "dot": Distance.DOT,
    "euclid": Distance.EUCLID,
}


@contextmanager
def _service_call(action: str) -> Iterator[None]:
    """Re-raise any client failure during *action* as :class:`IndexServiceError`."""
    try:
        yield
    except IndexServiceError:
        raise
    except Exception as exc:
        raise IndexServiceError(f"Qdrant {action} failed: {exc}") from exc


class QdrantIndexService(IndexServiceBase):
    """Qdrant-backed index service.

    Parameters
    ----------
    url:
        Qdrant REST endpoint.
    timeout:
        Request timeout in seconds.
    client:
        Pre-built ``QdrantClient``; overrides *url* / *timeout* (useful in tests).
    """

    def __init__(
        self,
        url: str = settings.qdrant_url,
        *,
        timeout: int = settings.qdrant_timeout,
        client: QdrantClient | None = None,
    ) -> None:
        self._client = client if client is not None else QdrantClient(url=url, timeout=timeout)

    # -- IndexServiceBase overrides -------------------------------------------

    def list_collections(self) -> set[str]:
        with _service_call("list collections"):
            response = self._client.get_collections()
        return {collection.name for collection in response.collections}

    def get_collection(self, name: str) -> CollectionInfo:
        with _service_call(f"get collection {name!r}"):
            info = self._client.get_collection(collection_name=name)
        vectors = info.config.params.vectors
        if not isinstance(vectors, VectorParams):
            # Named vectors: there is no single size to compare against.
            raise IndexServiceError(
                f"Collection {name!r} uses named vectors; a single unnamed vector config is required"
            )
        return CollectionInfo(name=name, vector_size=vectors.size, distance=vectors.distance.value.lower())

    def create_collection(self, name: str, vector_size: int, distance: str = "cosine") -> None:
        if distance not in _DISTANCE_MAP:
            raise ValueError(f"Unsupported distance metric: {distance!r}")
        with _service_call(f"create collection {name!r}"):
            self._client.create_collection(
                collection_name=name,
                vectors_config=VectorParams(size=vector_size, distance=_DISTANCE_MAP[distance]),
            )
        logger.info("Created collection %s (size=%d, distance=%s)", name, vector_size, distance)

    def delete_collection(self, name: str) -> None:
        with _service_call(f"delete collection {name!r}"):
            self._client.delete_collection(collection_name=name)
        logger.info("Deleted collection %s", name)

    def upsert_points(self, collection_name: str, points: list[IndexedPoint]) -> None:
        structs = [PointStruct(id=p.id, vector=p.vector, payload=p.payload) for p in points]
        with _service_call(f"upsert into {collection_name!r}"):
            self._client.upsert(collection_name=collection_name, points=structs, wait=True)

    def health_check(self) -> bool:
        try:
            self._client.get_collections()
            return True
        except Exception:
            logger.warning("Qdrant health-check failed", exc_info=True)
            return False
