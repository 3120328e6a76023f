"""Fixed-window text chunking with overlap."""

from __future__ import annotations

import hashlib
import logging
from bisect import bisect_right

from langchain_text_splitters import CharacterTextSplitter

from rag_ingest.config import settings
from rag_ingest.models import Chunk, Page

logger = logging.getLogger(__name__)


class Chunker:
    """Split page texts into overlapping windows of bounded length.

    Pages are joined with *page_separator* into one document string, which
    a character-level ``CharacterTextSplitter`` cuts into windows of at most
    *chunk_size* characters, each window starting *chunk_overlap* characters
    before the end of the previous one.  Whitespace is kept as-is.  Dropping the first *chunk_overlap* characters
    of every chunk but the first and concatenating the results gives back
    the joined text exactly.

    Parameters
    ----------
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of overlapping characters between consecutive chunks.
        Must be smaller than *chunk_size*, otherwise the window never advances.
    page_separator:
        Inserted between consecutive pages before splitting.
    """

    def __init__(
        self,
        chunk_size: int = settings.chunk_size,
        chunk_overlap: int = settings.chunk_overlap,
        *,
        page_separator: str = "\n\n",
    ) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0:
            raise ValueError(f"chunk_overlap must be >= 0, got {chunk_overlap}")
        if chunk_overlap >= chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})"
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.page_separator = page_separator
        self._splitter = CharacterTextSplitter(
            separator="",
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            length_function=len,
            strip_whitespace=False,
            add_start_index=True,
        )

    def join_pages(self, pages: list[Page]) -> tuple[str, list[int], list[int]]:
        """Join non-empty pages; return the text, page start offsets and page indices."""
        parts: list[str] = []
        starts: list[int] = []
        indices: list[int] = []
        offset = 0
        for page in pages:
            if not page.text:
                continue
            if parts:
                parts.append(self.page_separator)
                offset += len(self.page_separator)
            starts.append(offset)
            indices.append(page.page_index)
            parts.append(page.text)
            offset += len(page.text)
        return "".join(parts), starts, indices

    def split(self, pages: list[Page], source: str | None = None) -> list[Chunk]:
        """Split *pages* into ordered :class:`Chunk` objects.

        Returns an empty list when the pages carry no text at all.
        """
        text, starts, indices = self.join_pages(pages)
        if not text:
            return []

        doc_id = hashlib.sha256(text.encode()).hexdigest()[:16]
        if source is None:
            source = str(pages[0].metadata.get("source", "unknown"))

        def page_at(offset: int) -> int:
            return indices[max(bisect_right(starts, offset) - 1, 0)]

        chunks: list[Chunk] = []
        for position, document in enumerate(self._splitter.create_documents([text])):
            start = document.metadata["start_index"]
            first = page_at(start)
            last = page_at(start + len(document.page_content) - 1)
            chunks.append(
                Chunk(
                    text=document.page_content,
                    chunk_index=position,
                    start=start,
                    page=first,
                    pages=[i for i in indices if first <= i <= last],
                    source=source,
                    doc_id=doc_id,
                )
            )

        logger.info(
            "Created %d text chunks from %d pages (%d chars)", len(chunks), len(pages), len(text)
        )
        return chunks
