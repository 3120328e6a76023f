"""Keep a collection's vector size in line with the embedding model.

The decision is a pure function (:func:`plan_reconcile`) so it can be
tested without an index service; :class:`CollectionReconciler` applies it.
A size mismatch is resolved by dropping and recreating the collection:
every point previously stored in it is lost.
"""

from __future__ import annotations

import logging

from rag_ingest.config import settings
from rag_ingest.index.base import IndexServiceBase
from rag_ingest.models import CollectionInfo, ReconcileAction

logger = logging.getLogger(__name__)


def plan_reconcile(existing: CollectionInfo | None, dimension: int) -> ReconcileAction:
    """Decide what has to happen for a collection to hold *dimension*-sized vectors."""
    if existing is None:
        return ReconcileAction.CREATE
    if existing.vector_size == dimension:
        return ReconcileAction.NOOP
    return ReconcileAction.RECREATE


class CollectionReconciler:
    """Ensure a collection exists with the expected vector size.

    Parameters
    ----------
    index_service:
        Backend used for collection CRUD.
    distance:
        Distance metric for collections this reconciler creates.
    """

    def __init__(
        self,
        index_service: IndexServiceBase,
        *,
        distance: str = settings.distance_metric,
    ) -> None:
        self._service = index_service
        self.distance = distance

    def reconcile(self, collection_name: str, dimension: int) -> ReconcileAction:
        """Bring *collection_name* to *dimension*; return the action taken.

        Raises
        ------
        IndexServiceError
            When any call to the index service fails, including a create
            that follows a successful delete.
        """
        if dimension <= 0:
            raise ValueError(f"dimension must be positive, got {dimension}")

        logger.info("Checking if collection %s exists...", collection_name)
        existing = None
        if collection_name in self._service.list_collections():
            existing = self._service.get_collection(collection_name)

        action = plan_reconcile(existing, dimension)
        if action is ReconcileAction.NOOP:
            logger.info("Collection %s already has dimension %d", collection_name, dimension)
        elif action is ReconcileAction.CREATE:
            logger.info("Creating collection %s with dimension %d", collection_name, dimension)
            self._service.create_collection(collection_name, dimension, self.distance)
        else:
            logger.warning(
                "Dimension mismatch: collection %s uses %d but embeddings are %d; "
                "recreating it (existing points are dropped)",
                collection_name,
                existing.vector_size,
                dimension,
            )
            self._service.delete_collection(collection_name)
            self._service.create_collection(collection_name, dimension, self.distance)
            logger.info("Collection %s recreated with dimension %d", collection_name, dimension)
        return action
