"""Command-line entry point for the worker, the upload API and one-off ingestion."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from rag_ingest.config import settings

logger = logging.getLogger(__name__)


def configure_logging(level: str = settings.log_level) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )


def _cmd_worker(args: argparse.Namespace) -> int:
    from rag_ingest.worker.celery_app import celery_app

    celery_app.worker_main(
        [
            "worker",
            f"--concurrency={args.concurrency}",
            f"--loglevel={args.log_level.upper()}",
            f"--queues={settings.queue_name}",
        ]
    )
    return 0


def _cmd_enqueue(args: argparse.Namespace) -> int:
    from rag_ingest.worker.tasks import ingest_pdf

    result = ingest_pdf.delay({"path": os.path.abspath(args.path)})
    print(result.id)
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("rag_ingest.serving.app:app", host=args.host, port=args.port)
    return 0


def _cmd_ingest(args: argparse.Namespace) -> int:
    from rag_ingest.models import Job
    from rag_ingest.pipeline import build_runner

    result = build_runner().run(Job(data={"path": os.path.abspath(args.path)}))
    print(json.dumps(result.to_dict()))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rag-ingest", description="PDF ingestion worker")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    sub = parser.add_subparsers(dest="command", required=True)

    worker = sub.add_parser("worker", help="Run the Celery worker that consumes upload jobs")
    worker.add_argument(
        "--concurrency",
        type=int,
        default=settings.worker_concurrency,
        help="Maximum jobs processed at once",
    )
    worker.set_defaults(func=_cmd_worker)

    enqueue = sub.add_parser("enqueue", help="Queue a PDF for ingestion")
    enqueue.add_argument("path", help="Path to the PDF")
    enqueue.set_defaults(func=_cmd_enqueue)

    ingest = sub.add_parser("ingest", help="Ingest a PDF immediately, bypassing the queue")
    ingest.add_argument("path", help="Path to the PDF")
    ingest.set_defaults(func=_cmd_ingest)

    serve = sub.add_parser("serve", help="Run the upload API")
    serve.add_argument("--host", default="0.0.0.0", help="Interface to bind")
    serve.add_argument("--port", type=int, default=8000, help="Port to listen on")
    serve.set_defaults(func=_cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
