"""Abstract base class for text-embedding service providers.

The ingestion pipeline does not embed text itself; it hands chunk batches to
an implementation of this contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementation:
#   OpenAIEmbeddingProvider -- vector_admin/providers/embedding/
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by the ingestion pipeline."""

    @abstractmethod
    async def embed_text_chunks(self, chunks: list[str]) -> list[list[float]] | None:
        """Generate embedding vectors for a batch of text chunks.

        Parameters
        ----------
        chunks:
            Text chunks to embed.  Implementations split the batch internally
            if the underlying API has a per-call limit.

        Returns
        -------
        list[list[float]] or None
            One vector per chunk, in order.  ``None`` or an empty list means
            the provider could not embed the batch; callers treat that as a
            total failure.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float] | None:
        """Embed one string, e.g. a search query."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this embedding provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured (e.g. has an API key)."""
