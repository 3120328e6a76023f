"""Abstract base class for vector-index backends.

Adding a new backend (Pinecone, Weaviate, pgvector …) only requires
subclassing :class:`IndexServiceBase` and implementing the collection CRUD
and upsert methods.  The reconciler and batch indexer are backend-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rag_ingest.models import CollectionInfo, IndexedPoint


class IndexServiceBase(ABC):
    """Backend-agnostic collection CRUD and point upsert.

    Implementations must raise :class:`~rag_ingest.errors.IndexServiceError`
    for every failure of the underlying service.
    """

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def list_collections(self) -> set[str]:
        """Return the names of all existing collections."""
        ...

    @abstractmethod
    def get_collection(self, name: str) -> CollectionInfo:
        """Return the vector configuration of collection *name*."""
        ...

    @abstractmethod
    def create_collection(self, name: str, vector_size: int, distance: str = "cosine") -> None:
        """Create collection *name* holding vectors of length *vector_size*."""
        ...

    @abstractmethod
    def delete_collection(self, name: str) -> None:
        """Drop collection *name* together with all its points."""
        ...

    @abstractmethod
    def upsert_points(self, collection_name: str, points: list[IndexedPoint]) -> None:
        """Insert or overwrite *points* in a single request."""
        ...

    # -- optional overrides ---------------------------------------------------

    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        raise NotImplementedError(f"{type(self).__name__} does not support health checks")
