"""Fakes shared by the pipeline and serving tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import pytest

from rag_ingest.config import Settings
from rag_ingest.errors import EmbeddingError
from rag_ingest.ingestion.embedder import Embedder
from rag_ingest.ingestion.pipeline import IngestionPipeline
from rag_ingest.vectorstore.base import VectorStoreBase
from rag_ingest.vectorstore.models import VectorRecord


class FakeEmbedder(Embedder):
    """Embeds a text as ``[len(text), 1.0]``; optionally fails."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[str] = []

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail:
            raise EmbeddingError("Error calling embedding API: boom")
        return [float(len(text)), 1.0]


class FakeVectorStore(VectorStoreBase):
    """In-memory fake that records every batch."""

    def __init__(self) -> None:
        super().__init__("test-index")
        self.batches: list[tuple[str, list[VectorRecord]]] = []

    def _upsert_batch(self, records: Sequence[VectorRecord], namespace: str) -> None:
        self.batches.append((namespace, list(records)))

    def health_check(self) -> bool:
        return True

    @property
    def records(self) -> list[VectorRecord]:
        return [r for _, batch in self.batches for r in batch]


@pytest.fixture()
def store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture()
def make_pipeline(store: FakeVectorStore) -> Callable[..., IngestionPipeline]:
    """Factory: ``make_pipeline(fail=False, **settings_overrides)``."""

    def _make(fail: bool = False, **overrides: Any) -> IngestionPipeline:
        params: dict[str, Any] = {
            "chunk_size": 1000,
            "chunk_overlap": 200,
            "upsert_batch_size": 100,
            "enable_pdf": False,
        }
        params.update(overrides)
        return IngestionPipeline(FakeEmbedder(fail=fail), store, Settings(**params))

    return _make


@pytest.fixture()
def pipeline(make_pipeline: Callable[..., IngestionPipeline]) -> IngestionPipeline:
    return make_pipeline()
