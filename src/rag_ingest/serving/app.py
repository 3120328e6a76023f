"""FastAPI application that accepts PDF uploads and queues them for ingestion."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from uuid import uuid4

from celery import Task
from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from pydantic import BaseModel

from rag_ingest.config import settings
from rag_ingest.worker.tasks import ingest_pdf

logger = logging.getLogger(__name__)

app = FastAPI(
    title="RAG Ingest API",
    version="0.1.0",
    description="Upload PDFs for background chunking, embedding and indexing.",
)


def get_ingest_task() -> Task:
    """Return the Celery task uploads are dispatched to."""
    return ingest_pdf


# ── Response schemas ──────────────────────────────────────────────────
class UploadResponse(BaseModel):
    """Acknowledgement for a queued upload."""

    job_id: str
    filename: str
    message: str = "uploaded"


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@app.post("/upload/pdf", response_model=UploadResponse)
def upload_pdf(
    pdf: UploadFile = File(...),
    task: Task = Depends(get_ingest_task),
) -> UploadResponse:
    """Store the uploaded PDF and enqueue an ingestion job for it."""
    original = Path(pdf.filename or "").name
    if not original.lower().endswith(".pdf"):
        raise HTTPException(status_code=400, detail="Only PDF uploads are accepted")

    destination = Path(settings.upload_dir)
    destination.mkdir(parents=True, exist_ok=True)
    filename = f"{uuid4().hex}-{original}"
    path = destination / filename
    with path.open("wb") as fh:
        shutil.copyfileobj(pdf.file, fh)

    payload = {
        "filename": filename,
        "originalname": original,
        "destination": str(destination),
        "path": str(path.resolve()),
    }
    try:
        result = task.delay(payload)
    except Exception as exc:
        logger.exception("Failed to queue %s", path)
        path.unlink(missing_ok=True)
        raise HTTPException(status_code=503, detail="Ingestion queue unavailable") from exc

    logger.info("Queued %s as job %s", path, result.id)
    return UploadResponse(job_id=result.id, filename=filename)
