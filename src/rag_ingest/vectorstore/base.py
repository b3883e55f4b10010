"""Abstract base class for vector-store backends.

Adding a new backend (Weaviate, Qdrant …) only requires subclassing
:class:`VectorStoreBase` and implementing the two abstract methods.
Batching lives here so every backend upserts the same way.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from rag_ingest.vectorstore.models import UpsertResult, VectorRecord, resolve_namespace

logger = logging.getLogger(__name__)

DEFAULT_UPSERT_BATCH_SIZE = 100


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    Parameters
    ----------
    index_name:
        Logical name of the index / collection.
    """

    def __init__(self, index_name: str) -> None:
        self.index_name = index_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def _upsert_batch(self, records: Sequence[VectorRecord], namespace: str) -> None:
        """Write one batch of *records* under *namespace*."""
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- shared behaviour -----------------------------------------------------

    def upsert(
        self,
        records: Sequence[VectorRecord],
        namespace: str = "",
        *,
        batch_size: int = DEFAULT_UPSERT_BATCH_SIZE,
    ) -> UpsertResult:
        """Upsert *records* sequentially in batches of *batch_size*.

        An empty *namespace* resolves to ``"default"``.  A failing batch
        propagates immediately; earlier batches are not rolled back.
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size ({batch_size}) must be > 0")

        ns = resolve_namespace(namespace)
        batches = 0
        for start in range(0, len(records), batch_size):
            batch = records[start : start + batch_size]
            self._upsert_batch(batch, ns)
            batches += 1
            logger.info(
                "  upserted batch %d (%d-%d) into %s/%s",
                batches, start, start + len(batch), self.index_name, ns,
            )
        return UpsertResult(upserted=len(records), batches=batches, namespace=ns)
