"""Embedding clients — single place to swap providers.

Supports two providers:

1. **OpenAI** (default) — ``text-embedding-3-small`` truncated to
   ``embedding_dimensions`` (512) so vectors match the index dimension.
   Requires ``OPENAI_API_KEY``.
2. **HuggingFace** — a local sentence-transformer, useful for development
   against a Chroma backend.

Clients are constructed explicitly (see :func:`get_embedder`) and passed to
the pipeline; nothing is created at import time.
"""

from __future__ import annotations

import asyncio
import logging
import numbers
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from langchain_core.embeddings import Embeddings

from rag_ingest.config import Settings
from rag_ingest.errors import ConfigurationError, EmbeddingError

logger = logging.getLogger(__name__)


def _validate_vector(vector: Any) -> list[float]:
    """Return *vector* as ``list[float]`` or raise on a malformed response."""
    if not isinstance(vector, Sequence) or isinstance(vector, str) or len(vector) == 0:
        raise EmbeddingError(f"Error calling embedding API: invalid response {vector!r:.200}")
    if not all(isinstance(v, numbers.Real) for v in vector):
        raise EmbeddingError("Error calling embedding API: invalid response with non-numeric values")
    return [float(v) for v in vector]


class Embedder(ABC):
    """Turns one chunk of text into a dense vector."""

    model_name: str = ""

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Return the embedding of *text*."""
        ...

    async def aembed(self, text: str) -> list[float]:
        """Async variant of :meth:`embed`; runs the sync call in a thread by default."""
        return await asyncio.to_thread(self.embed, text)

    async def aembed_many(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed all *texts* concurrently; results follow the input order.

        The first failure cancels the calls still in flight and is re-raised.
        """
        tasks = [asyncio.ensure_future(self.aembed(t)) for t in texts]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            raise


class LangChainEmbedder(Embedder):
    """Adapter over any LangChain :class:`~langchain_core.embeddings.Embeddings`.

    Provider exceptions and malformed vectors both surface as
    :class:`~rag_ingest.errors.EmbeddingError`.
    """

    def __init__(self, embeddings: Embeddings, *, model_name: str = "") -> None:
        self._embeddings = embeddings
        self.model_name = model_name

    def _prepare(self, text: str) -> str:
        return text

    def embed(self, text: str) -> list[float]:
        try:
            vector = self._embeddings.embed_query(self._prepare(text))
        except Exception as exc:
            logger.error("Error calling embedding API (model=%s)", self.model_name, exc_info=True)
            raise EmbeddingError(f"Error calling embedding API: {exc}") from exc
        return _validate_vector(vector)

    async def aembed(self, text: str) -> list[float]:
        try:
            vector = await self._embeddings.aembed_query(self._prepare(text))
        except Exception as exc:
            logger.error("Error calling embedding API (model=%s)", self.model_name, exc_info=True)
            raise EmbeddingError(f"Error calling embedding API: {exc}") from exc
        return _validate_vector(vector)


class OpenAIEmbedder(LangChainEmbedder):
    """OpenAI embeddings; newlines are flattened to spaces before the call."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "text-embedding-3-small",
        dimensions: int | None = 512,
    ) -> None:
        from langchain_openai import OpenAIEmbeddings

        super().__init__(
            OpenAIEmbeddings(model=model, dimensions=dimensions, api_key=api_key),
            model_name=model,
        )
        self.dimensions = dimensions

    def _prepare(self, text: str) -> str:
        return text.replace("\n", " ")


class HuggingFaceEmbedder(LangChainEmbedder):
    """Local sentence-transformer embeddings."""

    def __init__(self, model_name: str = "sentence-transformers/all-MiniLM-L6-v2") -> None:
        from langchain_huggingface import HuggingFaceEmbeddings

        super().__init__(HuggingFaceEmbeddings(model_name=model_name), model_name=model_name)


def get_embedder(settings: Settings) -> Embedder:
    """Build the embedder selected by ``settings.embedding_provider``.

    Raises
    ------
    ConfigurationError
        Unknown provider, or the OpenAI provider without an API key.
    """
    provider = settings.embedding_provider.lower()
    if provider == "openai":
        if not settings.openai_api_key:
            raise ConfigurationError("OpenAI API key not configured")
        logger.info(
            "Using OpenAI embeddings: model=%s dimensions=%d",
            settings.embedding_model,
            settings.embedding_dimensions,
        )
        return OpenAIEmbedder(
            settings.openai_api_key,
            model=settings.embedding_model,
            dimensions=settings.embedding_dimensions,
        )
    if provider == "huggingface":
        logger.info("Using HuggingFace embeddings: model=%s", settings.huggingface_model)
        return HuggingFaceEmbedder(settings.huggingface_model)
    raise ConfigurationError(f"Unsupported embedding_provider={settings.embedding_provider!r}")
