"""Ingestion pipeline — validate, extract, chunk, embed, upsert.

Usage::

    from rag_ingest.ingestion.pipeline import IngestionPipeline

    pipeline = IngestionPipeline.from_settings(settings)
    result = await pipeline.ingest("notes.md", data, namespace="team-a")

Every collaborator is injected, so tests can pass fakes for the embedder
and the vector store.  Nothing is retried: the first failure aborts the
whole document.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone

from rag_ingest.config import Settings
from rag_ingest.errors import ProcessingError, ValidationError
from rag_ingest.ingestion.chunker import chunk_text_smart
from rag_ingest.ingestion.embedder import Embedder, get_embedder
from rag_ingest.ingestion.extractors import ExtractorRegistry, default_registry
from rag_ingest.ingestion.validation import (
    get_file_extension,
    validate_file_size,
    validate_file_type,
)
from rag_ingest.vectorstore import VectorStoreBase, get_vector_store
from rag_ingest.vectorstore.models import ChunkMetadata, VectorRecord, resolve_namespace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestionResult:
    """Summary of one ingested document."""

    file_name: str
    chunks: int
    namespace: str


class IngestionPipeline:
    """Turns one uploaded file into vectors in the configured index.

    Parameters
    ----------
    embedder:
        Embedding client; called once per chunk, concurrently.
    store:
        Vector-store backend receiving the records.
    settings:
        Chunking, size-limit and batching parameters.
    extractors:
        Format registry; defaults to :func:`default_registry`.
    """

    def __init__(
        self,
        embedder: Embedder,
        store: VectorStoreBase,
        settings: Settings,
        *,
        extractors: ExtractorRegistry | None = None,
    ) -> None:
        self.embedder = embedder
        self.store = store
        self.settings = settings
        self.extractors = extractors or default_registry(settings)

    @classmethod
    def from_settings(cls, settings: Settings) -> IngestionPipeline:
        """Build the pipeline with the embedder and store named in *settings*."""
        return cls(get_embedder(settings), get_vector_store(settings), settings)

    # -- steps ----------------------------------------------------------------

    def validate(self, file_name: str, size: int) -> None:
        """Reject uploads with no name, an unsupported type or too many bytes."""
        if not file_name:
            raise ValidationError("Invalid file")

        allowed = self.extractors.allowed_extensions()
        if not validate_file_type(file_name, allowed):
            listed = ", ".join(ext.upper() for ext in allowed)
            raise ValidationError(f"Invalid file type. Only {listed} files are allowed.")

        if not validate_file_size(size, self.settings.max_upload_mb):
            raise ValidationError(f"File size exceeds {self.settings.max_upload_mb}MB limit")

    def chunk(self, text: str) -> list[str]:
        """Split extracted *text* with the boundary-aware chunker."""
        return chunk_text_smart(text, self.settings.chunk_size, self.settings.chunk_overlap)

    def build_records(
        self,
        chunks: list[str],
        embeddings: list[list[float]],
        *,
        file_name: str,
        namespace: str,
    ) -> list[VectorRecord]:
        """Pair each chunk with its embedding (matched by index) and tag it."""
        if len(chunks) != len(embeddings):
            raise ProcessingError(
                f"Got {len(embeddings)} embeddings for {len(chunks)} chunks"
            )

        file_type = get_file_extension(file_name)
        uploaded_at = datetime.now(timezone.utc)
        timestamp_ms = time.time_ns() // 1_000_000
        total = len(chunks)

        return [
            VectorRecord(
                id=VectorRecord.make_id(namespace, file_name, timestamp_ms, idx),
                values=vector,
                metadata=ChunkMetadata(
                    text=chunk,
                    file_name=file_name,
                    file_type=file_type,
                    chunk_index=idx,
                    total_chunks=total,
                    namespace=namespace,
                    uploaded_at=uploaded_at,
                ),
            )
            for idx, (chunk, vector) in enumerate(zip(chunks, embeddings))
        ]

    # -- entry point ----------------------------------------------------------

    async def ingest(self, file_name: str, data: bytes, namespace: str = "") -> IngestionResult:
        """Run the whole pipeline for one uploaded file.

        Raises
        ------
        ValidationError
            Bad name, type or size, or no text in the file.
        ProcessingError
            Chunking produced nothing.
        EmbeddingError
            The embedding provider failed.
        """
        self.validate(file_name, len(data))

        text = self.extractors.extract(file_name, data)
        if not text.strip():
            raise ValidationError("No text content found in file")

        chunks = self.chunk(text)
        if not chunks:
            raise ProcessingError("Failed to process file content")
        logger.info("Split %s into %d chunks", file_name, len(chunks))

        t0 = time.monotonic()
        embeddings = await self.embedder.aembed_many(chunks)
        logger.info("Embedded %d chunks in %.1fs", len(embeddings), time.monotonic() - t0)

        ns = resolve_namespace(namespace)
        records = self.build_records(chunks, embeddings, file_name=file_name, namespace=ns)

        result = await asyncio.to_thread(
            self.store.upsert, records, ns, batch_size=self.settings.upsert_batch_size
        )
        logger.info(
            "Indexed %d vectors for %s → %s/%s (%d batches)",
            result.upserted, file_name, self.store.index_name, ns, result.batches,
        )

        return IngestionResult(file_name=file_name, chunks=len(chunks), namespace=ns)
