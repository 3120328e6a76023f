"""Unit tests for the Qdrant and Chroma index backends (clients mocked)."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from qdrant_client.models import Distance, VectorParams

from rag_ingest.errors import IndexServiceError
from rag_ingest.index import get_index_service
from rag_ingest.index.chroma_store import ChromaIndexService, _flatten_metadata
from rag_ingest.index.qdrant_store import QdrantIndexService
from rag_ingest.models import Chunk, IndexedPoint


def _qdrant_info(vectors) -> SimpleNamespace:
    return SimpleNamespace(config=SimpleNamespace(params=SimpleNamespace(vectors=vectors)))


# ── Qdrant ─────────────────────────────────────────────────────────────


class TestQdrantIndexService:
    def test_list_collections(self) -> None:
        client = MagicMock()
        client.get_collections.return_value = SimpleNamespace(
            collections=[SimpleNamespace(name="pdf-docs"), SimpleNamespace(name="other")]
        )
        assert QdrantIndexService(client=client).list_collections() == {"pdf-docs", "other"}

    def test_get_collection_reads_vector_size(self) -> None:
        client = MagicMock()
        client.get_collection.return_value = _qdrant_info(VectorParams(size=768, distance=Distance.COSINE))
        info = QdrantIndexService(client=client).get_collection("pdf-docs")
        assert info.vector_size == 768
        assert info.distance == "cosine"

    def test_named_vectors_are_rejected(self) -> None:
        client = MagicMock()
        client.get_collection.return_value = _qdrant_info(
            {"text": VectorParams(size=768, distance=Distance.COSINE)}
        )
        with pytest.raises(IndexServiceError, match="named vectors"):
            QdrantIndexService(client=client).get_collection("pdf-docs")

    def test_create_collection_uses_cosine(self) -> None:
        client = MagicMock()
        QdrantIndexService(client=client).create_collection("pdf-docs", 1024, "cosine")
        kwargs = client.create_collection.call_args.kwargs
        assert kwargs["collection_name"] == "pdf-docs"
        assert kwargs["vectors_config"] == VectorParams(size=1024, distance=Distance.COSINE)

    def test_upsert_builds_points(self) -> None:
        client = MagicMock()
        point = IndexedPoint(vector=[0.1, 0.2], payload=Chunk(text="hello", chunk_index=0).to_payload())
        QdrantIndexService(client=client).upsert_points("pdf-docs", [point])
        kwargs = client.upsert.call_args.kwargs
        assert kwargs["collection_name"] == "pdf-docs"
        assert kwargs["points"][0].id == point.id
        assert kwargs["points"][0].payload["page_content"] == "hello"
        assert kwargs["points"][0].payload["metadata"]["chunk_index"] == 0

    def test_client_errors_are_translated(self) -> None:
        client = MagicMock()
        client.delete_collection.side_effect = ConnectionError("refused")
        with pytest.raises(IndexServiceError, match="refused") as excinfo:
            QdrantIndexService(client=client).delete_collection("pdf-docs")
        assert isinstance(excinfo.value.__cause__, ConnectionError)

    def test_health_check(self) -> None:
        client = MagicMock()
        client.get_collections.side_effect = ConnectionError("refused")
        assert QdrantIndexService(client=client).health_check() is False


# ── Chroma ─────────────────────────────────────────────────────────────


class TestChromaIndexService:
    def test_list_collections_accepts_names_or_objects(self) -> None:
        client = MagicMock()
        client.list_collections.return_value = ["a", SimpleNamespace(name="b")]
        assert ChromaIndexService(client=client).list_collections() == {"a", "b"}

    def test_create_records_dimension(self) -> None:
        client = MagicMock()
        ChromaIndexService(client=client).create_collection("pdf-docs", 768, "cosine")
        client.create_collection.assert_called_once_with(
            name="pdf-docs", metadata={"hnsw:space": "cosine", "dimension": 768}
        )

    def test_get_collection_from_metadata(self) -> None:
        client = MagicMock()
        client.get_collection.return_value = SimpleNamespace(
            metadata={"hnsw:space": "cosine", "dimension": 768}, peek=MagicMock()
        )
        info = ChromaIndexService(client=client).get_collection("pdf-docs")
        assert info.vector_size == 768
        assert info.distance == "cosine"

    def test_get_collection_without_metadata_peeks(self) -> None:
        collection = MagicMock(metadata=None)
        collection.peek.return_value = {"embeddings": [[0.0] * 384]}
        client = MagicMock()
        client.get_collection.return_value = collection
        assert ChromaIndexService(client=client).get_collection("legacy").vector_size == 384

    def test_upsert_flattens_metadata(self) -> None:
        collection = MagicMock()
        client = MagicMock()
        client.get_collection.return_value = collection
        point = IndexedPoint(
            id="p1",
            vector=[0.5],
            payload={
                "page_content": "hello",
                "metadata": {"page": 2, "pages": [2, 3], "doc_id": None},
            },
        )
        ChromaIndexService(client=client).upsert_points("pdf-docs", [point])
        collection.upsert.assert_called_once_with(
            ids=["p1"],
            embeddings=[[0.5]],
            documents=["hello"],
            metadatas=[{"page": 2, "pages": "2,3"}],
        )

    def test_errors_are_translated(self) -> None:
        client = MagicMock()
        client.list_collections.side_effect = RuntimeError("boom")
        with pytest.raises(IndexServiceError):
            ChromaIndexService(client=client).list_collections()

    def test_flatten_skips_empty_lists(self) -> None:
        assert _flatten_metadata({"pages": [], "ok": True}) == {"ok": True}


def test_get_index_service_rejects_unknown_backend() -> None:
    cfg = SimpleNamespace(vector_backend="pinecone")
    with pytest.raises(ValueError, match="Unsupported vector backend"):
        get_index_service(cfg)
