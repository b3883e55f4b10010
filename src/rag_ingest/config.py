"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Embedding
    openai_api_key: str = Field(default="", description="OpenAI API key used for embeddings")
    embedding_provider: str = Field(
        default="openai",
        description="Embedding backend: 'openai' (hosted API) or 'huggingface' (local model)",
    )
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = Field(default=512, description="Must match the vector index dimension")
    huggingface_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    # Vector store
    vector_store_backend: str = Field(default="pinecone", description="'pinecone' or 'chroma'")
    pinecone_api_key: str = ""
    pinecone_index: str = ""
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection: str = "rag_ingest"

    # Ingestion
    chunk_size: int = 1000
    chunk_overlap: int = 200
    max_upload_mb: int = 4
    upsert_batch_size: int = 100
    enable_pdf: bool = Field(
        default=False,
        description="Register the PDF extractor as an accepted upload type",
    )

    # Logging
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide :class:`Settings`, built on first use."""
    return Settings()

