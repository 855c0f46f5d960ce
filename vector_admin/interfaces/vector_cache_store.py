"""Abstract base class for the durable vector cache.

After a document's vectors are inserted into a backend, a snapshot of every
vector (id, values, metadata) is written under a filename derived from the
document.  The snapshot lets a document be re-inserted into another namespace
or backend without calling the embedding provider again.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from vector_admin.models.vectors import CacheEntry


class IVectorCacheStore(ABC):
    """Contract for durable, backend-independent vector snapshots."""

    @abstractmethod
    async def store_vector_result(self, entries: list[CacheEntry], filename: str) -> None:
        """Persist *entries* under *filename*, replacing any earlier snapshot.

        Parameters
        ----------
        entries:
            Every vector of one document.
        filename:
            Deterministic key from
            :meth:`~vector_admin.models.vectors.WorkspaceDocument.vector_filename`.
        """

    @abstractmethod
    async def load_vector_result(self, filename: str) -> list[CacheEntry] | None:
        """Return the snapshot stored under *filename*, or ``None`` if absent."""

    @abstractmethod
    async def delete_vector_result(self, filename: str) -> bool:
        """Remove a snapshot.  Returns ``False`` if nothing was stored."""
