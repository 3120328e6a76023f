"""
Worker — per-job runner plus the Celery app and ingest task that drive it.

Import :mod:`rag_ingest.worker.tasks` for the ``ingest_pdf`` task.
"""

from rag_ingest.worker.runner import JobRunner

__all__ = ["JobRunner"]
