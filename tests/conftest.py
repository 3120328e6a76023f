"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from rag_ingest.errors import IndexServiceError
from rag_ingest.index.base import IndexServiceBase
from rag_ingest.models import CollectionInfo, IndexedPoint


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fakes ───────────────────────────────────────────────────────────────


class FakeIndexService(IndexServiceBase):
    """In-memory index service that records every call."""

    def __init__(self, collections: dict[str, int] | None = None) -> None:
        self.collections: dict[str, int] = dict(collections or {})
        self.points: dict[str, list[IndexedPoint]] = {name: [] for name in self.collections}
        self.calls: list[tuple[str, ...]] = []
        self.fail_on: set[str] = set()

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail_on:
            raise IndexServiceError(f"{op} failed")

    def list_collections(self) -> set[str]:
        self.calls.append(("list",))
        self._maybe_fail("list")
        return set(self.collections)

    def get_collection(self, name: str) -> CollectionInfo:
        self.calls.append(("get", name))
        self._maybe_fail("get")
        return CollectionInfo(name=name, vector_size=self.collections[name])

    def create_collection(self, name: str, vector_size: int, distance: str = "cosine") -> None:
        self.calls.append(("create", name, vector_size))
        self._maybe_fail("create")
        self.collections[name] = vector_size
        self.points[name] = []

    def delete_collection(self, name: str) -> None:
        self.calls.append(("delete", name))
        self._maybe_fail("delete")
        del self.collections[name]
        del self.points[name]

    def upsert_points(self, collection_name: str, points: list[IndexedPoint]) -> None:
        self.calls.append(("upsert", collection_name, len(points)))
        self._maybe_fail("upsert")
        self.points[collection_name].extend(points)

    def health_check(self) -> bool:
        return True

    def ops(self) -> list[str]:
        return [call[0] for call in self.calls]


class FakeEmbeddings:
    """Deterministic LangChain-style embeddings of a fixed dimension."""

    def __init__(self, dim: int = 8) -> None:
        self.dim = dim
        self.query_calls = 0
        self.document_calls: list[int] = []

    def embed_query(self, text: str) -> list[float]:
        self.query_calls += 1
        return [float(len(text) % 7)] * self.dim

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls.append(len(texts))
        return [[float(i)] * self.dim for i, _ in enumerate(texts)]


@pytest.fixture()
def fake_index() -> FakeIndexService:
    return FakeIndexService()


@pytest.fixture()
def fake_embeddings() -> FakeEmbeddings:
    return FakeEmbeddings(dim=8)
