"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Worker-wide settings, populated from env vars or .env file."""

    # Embedding
    embedding_provider: Literal["ollama", "huggingface"] = "ollama"
    embedding_model: str = Field(default="nomic-embed-text", description="Embedding model identifier")
    ollama_base_url: str = "http://localhost:11434"
    probe_text: str = Field(
        default="test query",
        description="Sample text embedded once per job to measure the vector dimension",
    )
    fallback_embedding_dim: int = Field(
        default=768,
        gt=0,
        description="Dimension assumed when the embedding provider cannot be probed",
    )

    # Vector index
    vector_backend: Literal["qdrant", "chroma"] = "qdrant"
    qdrant_url: str = "http://localhost:6333"
    qdrant_timeout: int = 30
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    collection_name: str = "pdf-docs"
    distance_metric: Literal["cosine", "dot", "euclid"] = "cosine"

    # Chunking / indexing
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=200, ge=0)
    batch_size: int = Field(default=50, gt=0)
    batch_cooldown_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Pause between upsert batches so a local embedding server is not saturated",
    )

    # Celery broker / worker
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    queue_name: str = "file-upload-queue"
    max_attempts: int = Field(default=3, ge=1, description="Deliveries allowed for a retryable failure")
    retry_backoff_seconds: int = Field(default=60, ge=0, description="Retry backoff base in seconds")
    retry_backoff_max_seconds: int = Field(default=600, ge=0, description="Maximum retry backoff in seconds")
    worker_concurrency: int = 1
    shutdown_grace_seconds: float = Field(
        default=30.0,
        ge=0,
        description="Time in-flight jobs get after a stop request before the worker is forced down",
    )

    # Upload API
    upload_dir: str = "uploads"

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def _check_limits(self) -> Settings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )
        if self.worker_concurrency < 1:
            raise ValueError("worker_concurrency must be at least 1")
        return self

    @property
    def broker_url(self) -> str:
        """Redis URL used as both Celery broker and result backend."""
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


# Singleton; import `settings` wherever needed.
settings = Settings()
