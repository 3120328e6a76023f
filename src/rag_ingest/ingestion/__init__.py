"""
Ingestion — document loading, chunking, and embedding.

This package turns a PDF on disk into ordered, bounded text chunks and
provides the embedding wrapper (plus dimension probe) used by the index
layer to turn those chunks into vectors.
"""
