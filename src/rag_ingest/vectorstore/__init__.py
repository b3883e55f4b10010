"""
Vector store — batched upsert of embedded chunks into a hosted index.

Public surface
--------------
- :class:`VectorStoreBase` — abstract backend (subclass for others).
- :class:`PineconeVectorStore` — default Pinecone backend.
- :class:`ChromaVectorStore` — Chroma backend for self-hosted setups.
- :class:`ChunkMetadata`, :class:`VectorRecord`, :class:`UpsertResult` — data models.
- :func:`get_vector_store` — build the backend selected in settings.
"""

from __future__ import annotations

from rag_ingest.config import Settings
from rag_ingest.errors import ConfigurationError
from rag_ingest.vectorstore.base import VectorStoreBase
from rag_ingest.vectorstore.models import (
    DEFAULT_NAMESPACE,
    ChunkMetadata,
    UpsertResult,
    VectorRecord,
    resolve_namespace,
)

__all__ = [
    "DEFAULT_NAMESPACE",
    "ChromaVectorStore",
    "ChunkMetadata",
    "PineconeVectorStore",
    "UpsertResult",
    "VectorRecord",
    "VectorStoreBase",
    "get_vector_store",
    "resolve_namespace",
]


def get_vector_store(settings: Settings) -> VectorStoreBase:
    """Build the backend selected by ``settings.vector_store_backend``.

    Raises
    ------
    ConfigurationError
        Unknown backend, or no index / collection name configured.
    """
    backend = settings.vector_store_backend.lower()
    if backend == "pinecone":
        if not settings.pinecone_index:
            raise ConfigurationError("Pinecone index not configured")
        from rag_ingest.vectorstore.pinecone_store import PineconeVectorStore

        return PineconeVectorStore(settings.pinecone_index, api_key=settings.pinecone_api_key)
    if backend == "chroma":
        if not settings.chroma_collection:
            raise ConfigurationError("Chroma collection not configured")
        from rag_ingest.vectorstore.chroma_store import ChromaVectorStore

        return ChromaVectorStore(
            settings.chroma_collection,
            host=settings.chroma_host,
            port=settings.chroma_port,
        )
    raise ConfigurationError(f"Unsupported vector_store_backend={settings.vector_store_backend!r}")


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import backends to avoid pulling in their clients at import time."""
    if name == "ChromaVectorStore":
        from rag_ingest.vectorstore.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    if name == "PineconeVectorStore":
        from rag_ingest.vectorstore.pinecone_store import PineconeVectorStore

        return PineconeVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
