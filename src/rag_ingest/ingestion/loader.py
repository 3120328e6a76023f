"""Document loader — thin wrapper around LangChain's PDF loader."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from langchain_community.document_loaders import PyPDFLoader

from rag_ingest.errors import LoadError
from rag_ingest.models import Page

if TYPE_CHECKING:
    from langchain_core.documents import Document

logger = logging.getLogger(__name__)


def documents_to_pages(documents: list[Document]) -> list[Page]:
    """Convert LangChain page documents into :class:`Page` models.

    ``PyPDFLoader`` stores a zero-based ``page`` key in each document's
    metadata; documents without it are numbered by position.
    """
    pages: list[Page] = []
    for position, doc in enumerate(documents):
        meta = dict(doc.metadata or {})
        page_index = meta.get("page", position)
        pages.append(Page(text=doc.page_content or "", page_index=int(page_index), metadata=meta))
    return pages


class PdfLoader:
    """Load a PDF into one :class:`Page` per physical page."""

    def load(self, path: str | Path) -> list[Page]:
        """Return the ordered pages of *path*.

        Raises
        ------
        LoadError
            When the file cannot be parsed or carries no extractable text.
        """
        try:
            documents = PyPDFLoader(str(path)).load()
        except Exception as exc:
            raise LoadError(f"Could not read PDF {path}: {exc}") from exc

        pages = documents_to_pages(documents)
        logger.info("Loaded %d pages from %s", len(pages), path)
        if not any(page.text.strip() for page in pages):
            raise LoadError(f"No extractable text in {path}")
        return pages
