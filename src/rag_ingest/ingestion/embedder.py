"""Embedding provider wrapper and vector-dimension probe."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rag_ingest.config import settings
from rag_ingest.errors import EmbedError

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)


def get_embedding_function(
    provider: str = settings.embedding_provider,
    model: str = settings.embedding_model,
    *,
    base_url: str = settings.ollama_base_url,
) -> Embeddings:
    """Return the configured LangChain embedding function.

    ``ollama`` talks to a local Ollama server; ``huggingface`` runs a
    sentence-transformer model in-process.
    """
    if provider == "ollama":
        from langchain_ollama import OllamaEmbeddings

        return OllamaEmbeddings(model=model, base_url=base_url)
    if provider == "huggingface":
        from langchain_huggingface import HuggingFaceEmbeddings

        return HuggingFaceEmbeddings(model_name=model)
    raise ValueError(f"Unsupported embedding provider: {provider!r}")


class Embedder:
    """Turns text into vectors, reporting every provider failure as :class:`EmbedError`.

    Parameters
    ----------
    embeddings:
        Any LangChain ``Embeddings`` implementation.  When *None*, one is
        built from the global settings.
    """

    def __init__(self, embeddings: Embeddings | None = None) -> None:
        self._embeddings = embeddings if embeddings is not None else get_embedding_function()

    def embed_query(self, text: str) -> list[float]:
        try:
            vector = self._embeddings.embed_query(text)
        except Exception as exc:
            raise EmbedError(f"Embedding provider failed: {exc}") from exc
        try:
            return [float(x) for x in vector]
        except (TypeError, ValueError) as exc:
            raise EmbedError(f"Embedding provider returned a malformed vector: {vector!r}") from exc

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        try:
            vectors = self._embeddings.embed_documents(texts)
        except Exception as exc:
            raise EmbedError(f"Embedding provider failed on {len(texts)} texts: {exc}") from exc
        try:
            vectors = [[float(x) for x in v] for v in vectors]
        except (TypeError, ValueError) as exc:
            raise EmbedError(
                f"Embedding provider returned malformed vectors for {len(texts)} texts"
            ) from exc
        if len(vectors) != len(texts):
            raise EmbedError(
                f"Embedding provider returned {len(vectors)} vectors for {len(texts)} texts"
            )
        return vectors


class EmbeddingProbe:
    """Measure the dimensionality of the active embedding model.

    Falls back to *fallback_dim* when the provider cannot be reached.  A
    wrong fallback surfaces later as an upsert failure.
    """

    def __init__(
        self,
        embedder: Embedder,
        *,
        sample_text: str = settings.probe_text,
        fallback_dim: int = settings.fallback_embedding_dim,
    ) -> None:
        if not sample_text:
            raise ValueError("sample_text must be non-empty")
        if fallback_dim <= 0:
            raise ValueError(f"fallback_dim must be positive, got {fallback_dim}")
        self._embedder = embedder
        self.sample_text = sample_text
        self.fallback_dim = fallback_dim

    def probe(self) -> int:
        """Return the vector length produced for the sample text."""
        logger.info("Testing embedding dimension...")
        try:
            dimension = len(self._embedder.embed_query(self.sample_text))
        except EmbedError as exc:
            logger.warning(
                "Embedding dimension probe failed (%s); falling back to %d",
                exc,
                self.fallback_dim,
            )
            return self.fallback_dim

        if dimension == 0:
            logger.warning(
                "Embedding provider returned an empty vector; falling back to %d",
                self.fallback_dim,
            )
            return self.fallback_dim

        logger.info("Detected embedding dimension: %d", dimension)
        return dimension
