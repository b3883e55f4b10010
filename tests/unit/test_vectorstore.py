"""Unit tests for the vector-store layer — models, batching, backends."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from rag_ingest.config import Settings
from rag_ingest.errors import ConfigurationError
from rag_ingest.vectorstore import get_vector_store
from rag_ingest.vectorstore.base import VectorStoreBase
from rag_ingest.vectorstore.models import ChunkMetadata, VectorRecord, resolve_namespace


# ── Fake vector store for deterministic testing ─────────────────────────


class FakeVectorStore(VectorStoreBase):
    """In-memory fake that records every batch."""

    def __init__(self) -> None:
        super().__init__("test-index")
        self.batches: list[tuple[str, list[VectorRecord]]] = []

    def _upsert_batch(self, records: Sequence[VectorRecord], namespace: str) -> None:
        self.batches.append((namespace, list(records)))

    def health_check(self) -> bool:
        return True


def _records(n: int) -> list[VectorRecord]:
    return [
        VectorRecord(
            id=f"ns-doc.txt-1-{i}",
            values=[float(i), 0.0],
            metadata=ChunkMetadata(
                text=f"chunk {i}",
                file_name="doc.txt",
                file_type="txt",
                chunk_index=i,
                total_chunks=n,
                namespace="ns",
            ),
        )
        for i in range(n)
    ]


# ── Models ──────────────────────────────────────────────────────────────


class TestModels:
    def test_resolve_namespace(self) -> None:
        """Empty namespaces fall back to ``default``."""
        assert resolve_namespace("") == "default"
        assert resolve_namespace(None) == "default"
        assert resolve_namespace("team-a") == "team-a"

    def test_make_id(self) -> None:
        """IDs combine namespace, file name, timestamp and chunk index."""
        assert VectorRecord.make_id("default", "a.md", 1700000000000, 3) == "default-a.md-1700000000000-3"

    def test_metadata_to_store_uses_camel_case(self) -> None:
        """Stored metadata keys are camelCase with an ISO timestamp."""
        ts = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        meta = ChunkMetadata(
            text="hello",
            file_name="a.md",
            file_type="md",
            chunk_index=0,
            total_chunks=2,
            namespace="default",
            uploaded_at=ts,
        )
        assert meta.to_store() == {
            "text": "hello",
            "chunk": "hello",
            "fileName": "a.md",
            "fileType": "md",
            "chunkIndex": 0,
            "totalChunks": 2,
            "namespace": "default",
            "uploadedAt": "2024-05-01T12:00:00+00:00",
        }

    def test_metadata_accepts_aliases(self) -> None:
        """Models can be built from the wire (camelCase) representation."""
        meta = ChunkMetadata.model_validate(
            {"text": "t", "fileName": "f", "fileType": "txt", "chunkIndex": 1, "totalChunks": 2}
        )
        assert meta.chunk_index == 1
        assert meta.namespace == "default"


# ── Batching ────────────────────────────────────────────────────────────


class TestUpsert:
    def test_batches_of_100(self) -> None:
        """250 records are written as 100 + 100 + 50, in order."""
        store = FakeVectorStore()
        result = store.upsert(_records(250), "ns")

        assert [len(b) for _, b in store.batches] == [100, 100, 50]
        flat = [r.metadata.chunk_index for _, b in store.batches for r in b]
        assert flat == list(range(250))
        assert result.upserted == 250
        assert result.batches == 3
        assert result.namespace == "ns"

    def test_empty_namespace_resolves_to_default(self) -> None:
        """Records land in ``default`` when no namespace is supplied."""
        store = FakeVectorStore()
        store.upsert(_records(1), "")
        assert store.batches[0][0] == "default"

    def test_no_records_no_calls(self) -> None:
        """Nothing to write means no backend call."""
        store = FakeVectorStore()
        result = store.upsert([], "ns")
        assert store.batches == []
        assert result.batches == 0

    def test_invalid_batch_size(self) -> None:
        """batch_size must be positive."""
        with pytest.raises(ValueError):
            FakeVectorStore().upsert(_records(1), "ns", batch_size=0)


# ── Backends ────────────────────────────────────────────────────────────


class TestPineconeVectorStore:
    def test_upsert_sends_vectors_to_namespace(self) -> None:
        """Each batch becomes one ``index.upsert`` call with dict vectors."""
        with patch("rag_ingest.vectorstore.pinecone_store.Pinecone") as pc_cls:
            from rag_ingest.vectorstore.pinecone_store import PineconeVectorStore

            store = PineconeVectorStore("docs", api_key="pc-key")
            store.upsert(_records(3), "team-a", batch_size=2)

        pc_cls.assert_called_once_with(api_key="pc-key")
        pc_cls.return_value.Index.assert_called_once_with("docs")
        index = pc_cls.return_value.Index.return_value
        assert index.upsert.call_count == 2
        first = index.upsert.call_args_list[0].kwargs
        assert first["namespace"] == "team-a"
        assert [v["id"] for v in first["vectors"]] == ["ns-doc.txt-1-0", "ns-doc.txt-1-1"]
        assert first["vectors"][0]["metadata"]["chunkIndex"] == 0

    def test_health_check_failure(self) -> None:
        """An unreachable index reports unhealthy instead of raising."""
        with patch("rag_ingest.vectorstore.pinecone_store.Pinecone") as pc_cls:
            from rag_ingest.vectorstore.pinecone_store import PineconeVectorStore

            index = pc_cls.return_value.Index.return_value
            index.describe_index_stats.side_effect = RuntimeError("down")
            assert PineconeVectorStore("docs").health_check() is False


class TestChromaVectorStore:
    def test_upsert_keeps_namespace_in_metadata(self) -> None:
        """Chroma gets text as documents and namespace inside metadata."""
        with patch("chromadb.HttpClient") as client_cls:
            from rag_ingest.vectorstore.chroma_store import ChromaVectorStore

            store = ChromaVectorStore("docs", host="chroma", port=9000)
            store.upsert(_records(2), "")

        client_cls.assert_called_once_with(host="chroma", port=9000)
        collection = client_cls.return_value.get_or_create_collection.return_value
        kwargs = collection.upsert.call_args.kwargs
        assert kwargs["documents"] == ["chunk 0", "chunk 1"]
        assert all(m["namespace"] == "default" for m in kwargs["metadatas"])
        assert "text" not in kwargs["metadatas"][0]


class TestGetVectorStore:
    def test_missing_pinecone_index(self) -> None:
        """No index name is a configuration error with a fixed message."""
        with pytest.raises(ConfigurationError, match="Pinecone index not configured"):
            get_vector_store(Settings(vector_store_backend="pinecone", pinecone_index=""))

    def test_pinecone_backend(self) -> None:
        """``pinecone`` builds a Pinecone store for the configured index."""
        with patch("rag_ingest.vectorstore.pinecone_store.Pinecone"):
            store = get_vector_store(Settings(pinecone_index="docs", pinecone_api_key="k"))
        assert type(store).__name__ == "PineconeVectorStore"
        assert store.index_name == "docs"

    def test_chroma_backend(self) -> None:
        """``chroma`` builds a Chroma store for the configured collection."""
        with patch("chromadb.HttpClient"):
            store = get_vector_store(Settings(vector_store_backend="chroma", chroma_collection="c"))
        assert type(store).__name__ == "ChromaVectorStore"

    def test_unknown_backend(self) -> None:
        """Anything else is a configuration error."""
        with pytest.raises(ConfigurationError, match="Unsupported vector_store_backend"):
            get_vector_store(Settings(vector_store_backend="faiss", pinecone_index="x"))
