"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import chromadb

from rag_ingest.vectorstore.base import VectorStoreBase
from rag_ingest.vectorstore.models import VectorRecord

logger = logging.getLogger(__name__)


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Chroma has no namespaces; the namespace travels in each record's
    metadata so queries can filter on it.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    """

    def __init__(
        self,
        collection_name: str,
        *,
        host: str = "localhost",
        port: int = 8000,
        distance_metric: str = "cosine",
    ) -> None:
        super().__init__(collection_name)
        self._client = chromadb.HttpClient(host=host, port=port)
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": distance_metric},
        )

    def _upsert_batch(self, records: Sequence[VectorRecord], namespace: str) -> None:
        metadatas = []
        for rec in records:
            meta = rec.metadata.to_store()
            meta["namespace"] = namespace
            # Chroma stores the text as the document; no need to keep it twice.
            meta.pop("text")
            meta.pop("chunk")
            metadatas.append(meta)

        self._collection.upsert(
            ids=[rec.id for rec in records],
            embeddings=[rec.values for rec in records],
            documents=[rec.metadata.text for rec in records],
            metadatas=metadatas,
        )

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False

