"""
Document ingestion Celery task.

Async task: ingest_pdf(data)
Flow: resolve path -> probe -> reconcile -> load -> chunk -> embed/upsert

Errors flagged ``retryable`` are retried with exponential backoff until
``max_attempts`` deliveries have been made; any other error fails the job
at once.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any
from uuid import uuid4

from celery.utils.time import get_exponential_backoff_interval
from pydantic import ValidationError

from rag_ingest.config import settings
from rag_ingest.errors import InvalidJobError
from rag_ingest.models import Job
from rag_ingest.pipeline import build_runner
from rag_ingest.worker.celery_app import celery_app
from rag_ingest.worker.runner import JobRunner

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_runner() -> JobRunner:
    """Build the job runner once per worker process."""
    return build_runner()


def retry_countdown(retries: int) -> int:
    """Seconds to wait before the retry following *retries* earlier ones."""
    return get_exponential_backoff_interval(
        factor=settings.retry_backoff_seconds,
        retries=retries,
        maximum=settings.retry_backoff_max_seconds,
    )


@celery_app.task(
    bind=True,
    name="rag_ingest.ingest_pdf",
    acks_late=True,
    max_retries=settings.max_attempts - 1,
)
def ingest_pdf(self, data: dict[str, Any] | str) -> dict[str, Any]:
    """
    Ingest one uploaded PDF.

    Args:
        data: Upload record with ``path`` or ``destination`` + ``filename``,
            as a mapping or a JSON string

    Returns:
        dict: ``{"success": True, "docCount": n}``
    """
    try:
        job = Job(id=self.request.id or uuid4().hex, data=data, attempts=self.request.retries)
    except ValidationError as exc:
        logger.error("Task %s carries a malformed job record: %r", self.request.id, data)
        raise InvalidJobError(f"Malformed job record: {exc}") from exc
    logger.info("Job %s is active (attempt %d)", job.id, job.attempts + 1)
    try:
        result = get_runner().run(job)
    except Exception as exc:
        if not getattr(exc, "retryable", True):
            logger.error("Job %s failed with error: %s", job.id, exc)
            raise
        if self.request.retries >= self.max_retries:
            logger.error("Job %s failed after %d attempt(s): %s", job.id, job.attempts + 1, exc)
            raise
        countdown = retry_countdown(self.request.retries)
        logger.warning("Job %s failed with error: %s; retrying in %ds", job.id, exc, countdown)
        raise self.retry(exc=exc, countdown=countdown)

    logger.info("Job %s completed with result: %s", job.id, result.to_dict())
    return result.to_dict()
