"""Unit tests for the chunker module."""

from __future__ import annotations

import pytest

from rag_ingest.ingestion.chunker import Chunker
from rag_ingest.models import Page


def _pages(*texts: str) -> list[Page]:
    return [Page(text=t, page_index=i, metadata={"source": "doc.pdf"}) for i, t in enumerate(texts)]


def _reassemble(chunks, overlap: int) -> str:
    return chunks[0].text + "".join(c.text[overlap:] for c in chunks[1:])


def test_split_long_text_respects_chunk_size() -> None:
    """A document longer than chunk_size should be split into bounded windows."""
    chunker = Chunker(chunk_size=256, chunk_overlap=32)
    chunks = chunker.split(_pages("word " * 500))
    assert len(chunks) > 1
    assert all(len(c.text) <= 256 for c in chunks)


def test_split_short_text_yields_single_chunk() -> None:
    chunks = Chunker(chunk_size=100, chunk_overlap=10).split(_pages("Short text."))
    assert len(chunks) == 1
    assert chunks[0].text == "Short text."


def test_split_empty_input() -> None:
    """No pages, or only empty pages, should produce no chunks."""
    chunker = Chunker(chunk_size=100, chunk_overlap=10)
    assert chunker.split([]) == []
    assert chunker.split(_pages("", "")) == []


def test_consecutive_chunks_overlap() -> None:
    text = "".join(chr(ord("a") + i % 26) for i in range(2500))
    chunks = Chunker(chunk_size=1000, chunk_overlap=200).split(_pages(text))
    for prev, nxt in zip(chunks, chunks[1:]):
        assert prev.text[-200:] == nxt.text[:200]
        assert nxt.start == prev.start + len(prev.text) - 200


@pytest.mark.parametrize(
    ("size", "overlap"),
    [(1000, 200), (50, 0), (7, 6), (1, 0)],
)
def test_round_trip_reconstructs_joined_text(size: int, overlap: int) -> None:
    """Dropping each later chunk's overlap and concatenating gives back the text."""
    chunker = Chunker(chunk_size=size, chunk_overlap=overlap)
    pages = _pages("alpha beta gamma " * 40, "delta\nepsilon " * 25, "zeta")
    joined, _, _ = chunker.join_pages(pages)
    chunks = chunker.split(pages)
    assert _reassemble(chunks, overlap) == joined
    assert all(0 < len(c.text) <= size for c in chunks)


def test_whitespace_is_preserved() -> None:
    """Runs of blanks and newlines survive splitting untouched."""
    chunker = Chunker(chunk_size=100, chunk_overlap=20)
    pages = _pages("  lead\n\n\n   " * 30, " \t trailing   \n")
    joined, _, _ = chunker.join_pages(pages)
    chunks = chunker.split(pages)
    assert _reassemble(chunks, 20) == joined
    for chunk in chunks:
        assert joined[chunk.start : chunk.start + len(chunk.text)] == chunk.text


def test_pages_joined_with_separator() -> None:
    chunker = Chunker(chunk_size=100, chunk_overlap=0)
    joined, starts, indices = chunker.join_pages(_pages("abc", "", "def"))
    assert joined == "abc\n\ndef"
    assert starts == [0, 5]
    assert indices == [0, 2]


def test_chunks_carry_page_provenance() -> None:
    chunker = Chunker(chunk_size=10, chunk_overlap=2)
    chunks = chunker.split(_pages("a" * 8, "b" * 8), source="/docs/a.pdf")

    # joined text is "aaaaaaaa\n\nbbbbbbbb": windows [0, 10) and [8, 18)
    assert len(chunks) == 2
    assert chunks[0].page == 0
    assert chunks[0].pages == [0]
    assert chunks[1].page == 0
    assert chunks[1].pages == [0, 1]
    assert all(c.source == "/docs/a.pdf" for c in chunks)
    assert len({c.doc_id for c in chunks}) == 1
    assert [c.chunk_index for c in chunks] == list(range(len(chunks)))


def test_source_defaults_to_page_metadata() -> None:
    chunks = Chunker(chunk_size=100, chunk_overlap=0).split(_pages("text"))
    assert chunks[0].source == "doc.pdf"


def test_three_pages_2500_chars() -> None:
    """Three pages totalling 2500 characters split with the default 1000/200 window."""
    pages = _pages("x" * 800, "y" * 900, "z" * 800)
    chunks = Chunker(chunk_size=1000, chunk_overlap=200).split(pages)
    assert len(chunks) == 3
    assert all(len(c.text) <= 1000 for c in chunks)


@pytest.mark.parametrize(
    ("size", "overlap"),
    [(100, 100), (100, 150), (0, 0), (10, -1)],
)
def test_invalid_window_rejected(size: int, overlap: int) -> None:
    with pytest.raises(ValueError):
        Chunker(chunk_size=size, chunk_overlap=overlap)
