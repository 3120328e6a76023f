"""
Serving — FastAPI upload front-end for the ingestion worker.

Uploaded PDFs are written to the upload directory and a job pointing at
the stored file is sent to the Celery ingest task through the Redis broker.
"""
