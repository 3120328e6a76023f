"""Celery application for the ingestion worker.

Redis serves as broker and result backend.  Jobs are acknowledged only after
they finish (``acks_late``), so a worker that dies mid-job leaves the message
for redelivery.  A warm shutdown is escalated to a cold one once
``shutdown_grace_seconds`` have passed.
"""

from __future__ import annotations

import logging
import os
import signal
import threading
from typing import Any

from celery import Celery
from celery.signals import worker_shutting_down

from rag_ingest.config import settings

logger = logging.getLogger(__name__)

celery_app = Celery(
    "rag_ingest",
    broker=settings.broker_url,
    backend=settings.broker_url,
    include=["rag_ingest.worker.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    task_default_queue=settings.queue_name,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
    worker_concurrency=settings.worker_concurrency,
)


def _force_cold_shutdown() -> None:
    logger.warning("In-flight jobs outlived the grace period; forcing cold shutdown")
    os.kill(os.getpid(), signal.SIGQUIT)


@worker_shutting_down.connect
def bound_warm_shutdown(sig: str, how: str, exitcode: int, **kwargs: Any) -> None:
    """Give in-flight jobs ``shutdown_grace_seconds``, then shut down cold."""
    if how != "Warm":
        return
    logger.info(
        "Shutting down worker on %s; waiting up to %.0fs for in-flight jobs",
        sig,
        settings.shutdown_grace_seconds,
    )
    timer = threading.Timer(settings.shutdown_grace_seconds, _force_cold_shutdown)
    timer.daemon = True
    timer.start()
