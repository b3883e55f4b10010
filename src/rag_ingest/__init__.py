"""rag_ingest — chunk, embed and index uploaded documents for retrieval."""

__version__ = "0.1.0"
