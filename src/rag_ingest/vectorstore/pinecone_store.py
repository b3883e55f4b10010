"""Pinecone implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pinecone import Pinecone

from rag_ingest.vectorstore.base import VectorStoreBase
from rag_ingest.vectorstore.models import VectorRecord

logger = logging.getLogger(__name__)


class PineconeVectorStore(VectorStoreBase):
    """Pinecone-backed vector store.

    Parameters
    ----------
    index_name:
        Name of an existing Pinecone index.  Its dimension must match the
        embedder's output (512 for the default OpenAI configuration).
    api_key:
        Pinecone API key.  When empty the client falls back to the
        ``PINECONE_API_KEY`` environment variable.
    """

    def __init__(self, index_name: str, *, api_key: str = "") -> None:
        super().__init__(index_name)
        self._client = Pinecone(api_key=api_key or None)
        self._index = self._client.Index(index_name)

    def _upsert_batch(self, records: Sequence[VectorRecord], namespace: str) -> None:
        vectors = [
            {"id": rec.id, "values": rec.values, "metadata": rec.metadata.to_store()}
            for rec in records
        ]
        self._index.upsert(vectors=vectors, namespace=namespace)

    def health_check(self) -> bool:
        try:
            self._index.describe_index_stats()
            return True
        except Exception:
            logger.warning("Pinecone health-check failed", exc_info=True)
            return False

