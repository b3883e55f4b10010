"""Domain models for indexed chunks."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_NAMESPACE = "default"


def resolve_namespace(namespace: str | None) -> str:
    """Return *namespace*, or ``"default"`` when it is empty."""
    return namespace or DEFAULT_NAMESPACE


class ChunkMetadata(BaseModel):
    """Metadata stored alongside every chunk vector.

    Field names are camelCase on the wire (``fileName``, ``chunkIndex`` …)
    because other readers of the index query them by those keys.

    Attributes
    ----------
    text:
        The chunk content.
    file_name:
        Original upload filename.
    file_type:
        Lower-cased extension of the upload.
    chunk_index:
        Ordinal position of the chunk within the document.
    total_chunks:
        Number of chunks the document was split into.
    namespace:
        Namespace the vector was upserted under.
    uploaded_at:
        UTC timestamp of the ingestion request.
    """

    model_config = ConfigDict(populate_by_name=True)

    text: str
    file_name: str = Field(alias="fileName")
    file_type: str = Field(alias="fileType")
    chunk_index: int = Field(alias="chunkIndex")
    total_chunks: int = Field(alias="totalChunks")
    namespace: str = DEFAULT_NAMESPACE
    uploaded_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="uploadedAt"
    )

    def to_store(self) -> dict[str, Any]:
        """Flat ``str``/``int`` dict accepted by vector-store metadata APIs.

        The chunk text is duplicated under ``"chunk"`` for readers that look
        it up by that key.
        """
        data = self.model_dump(by_alias=True)
        data["uploadedAt"] = self.uploaded_at.isoformat()
        data["chunk"] = self.text
        return data


class VectorRecord(BaseModel):
    """One embedded chunk ready for upsert."""

    id: str
    values: list[float]
    metadata: ChunkMetadata

    @staticmethod
    def make_id(namespace: str, file_name: str, timestamp_ms: int, chunk_index: int) -> str:
        """``"<namespace>-<fileName>-<epoch ms>-<chunkIndex>"``."""
        return f"{namespace}-{file_name}-{timestamp_ms}-{chunk_index}"


class UpsertResult(BaseModel):
    """Outcome of a batched upsert."""

    upserted: int = 0
    batches: int = 0
    namespace: str = DEFAULT_NAMESPACE
