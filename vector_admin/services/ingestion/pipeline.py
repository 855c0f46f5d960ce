"""Document ingestion pipeline shared by every vector connector.

The backend-independent half of ``process_document``:

    split text -> embed once -> build records -> [backend inserts batch]
        -> record mapping rows for that batch -> ... -> write cache artifact

Connectors own only the bracketed step.  The embedding call happens before
any backend client is opened, so an embedding failure never leaves partial
data in a backend.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterator
from typing import Any

import structlog

from vector_admin.config.settings import Settings
from vector_admin.interfaces.embedding_provider import IEmbeddingProvider
from vector_admin.interfaces.persistence import IDocumentVectorRepository
from vector_admin.interfaces.vector_cache_store import IVectorCacheStore
from vector_admin.models.vectors import (
    CacheEntry,
    DocumentVector,
    VectorRecord,
    WorkspaceDocument,
)
from vector_admin.services.ingestion.text_splitter import RecursiveCharacterTextSplitter
from vector_admin.utils.batching import to_chunks
from vector_admin.utils.errors import EmbeddingError

logger = structlog.get_logger(logger_name=__name__)

# Keys of the document payload that are not copied into vector metadata.
_RESERVED_KEYS = frozenset({"pageContent", "id"})

EmbedderFactory = Callable[[str], IEmbeddingProvider]


class DocumentIngestionPipeline:
    """Turns a document payload into vector records and records their side-effects.

    Parameters
    ----------
    splitter:
        Text splitter producing the chunks to embed.
    embedder_factory:
        Called with the caller-supplied embedder key; returns the provider
        used for this document.
    document_vectors:
        Repository for the ``document_vectors`` join table.
    cache_store:
        Durable store for the post-insert vector snapshot.
    batch_size:
        Maximum records per backend insert call (default 500).
    """

    def __init__(
        self,
        splitter: RecursiveCharacterTextSplitter,
        embedder_factory: EmbedderFactory,
        document_vectors: IDocumentVectorRepository,
        cache_store: IVectorCacheStore,
        batch_size: int = 500,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._splitter = splitter
        self._embedder_factory = embedder_factory
        self._document_vectors = document_vectors
        self._cache_store = cache_store
        self._batch_size = batch_size

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        document_vectors: IDocumentVectorRepository,
        cache_store: IVectorCacheStore,
        embedder_factory: EmbedderFactory | None = None,
    ) -> DocumentIngestionPipeline:
        """Build a pipeline with the configured splitter, batch size and OpenAI embedder."""
        if embedder_factory is None:
            from vector_admin.providers.embedding.openai_embedding_provider import (
                OpenAIEmbeddingProvider,
            )

            def embedder_factory(key: str) -> IEmbeddingProvider:
                return OpenAIEmbeddingProvider(settings, api_key=key or None)

        return cls(
            splitter=RecursiveCharacterTextSplitter(
                chunk_size=settings.chunk_size,
                chunk_overlap=settings.chunk_overlap,
            ),
            embedder_factory=embedder_factory,
            document_vectors=document_vectors,
            cache_store=cache_store,
            batch_size=settings.insert_batch_size,
        )

    @property
    def batch_size(self) -> int:
        return self._batch_size

    # ------------------------------------------------------------------
    # Before the backend is touched
    # ------------------------------------------------------------------

    async def prepare_records(
        self, document: dict[str, Any], embedder_key: str
    ) -> list[VectorRecord]:
        """Split and embed *document*, returning one record per chunk.

        Raises
        ------
        EmbeddingError
            If the provider is not configured, returns nothing, or returns a
            vector count that differs from the chunk count.
        """
        text = document.get("pageContent") or ""
        chunks = self._splitter.split_text(text)
        if not chunks:
            # Nothing to embed: treated the same as a provider returning nothing.
            raise EmbeddingError("embedding failure")

        embedder = self._embedder_factory(embedder_key)
        if not embedder.is_available():
            raise EmbeddingError(
                "embedding provider is not configured",
                provider_name=embedder.get_provider_name(),
            )
        vectors = await embedder.embed_text_chunks(chunks)
        if not vectors or len(vectors) != len(chunks):
            logger.warning(
                "embedding_failed",
                doc_id=document.get("id"),
                chunks=len(chunks),
                vectors=len(vectors) if vectors else 0,
                provider=embedder.get_provider_name(),
            )
            raise EmbeddingError("embedding failure", provider_name=embedder.get_provider_name())

        base_metadata = {k: v for k, v in document.items() if k not in _RESERVED_KEYS}
        records = [
            VectorRecord(
                id=str(uuid.uuid4()),
                embedding=list(vector),
                metadata={**base_metadata, "text": chunk},
                text=chunk,
            )
            for chunk, vector in zip(chunks, vectors)
        ]
        logger.info(
            "document_embedded",
            doc_id=document.get("id"),
            chunks=len(chunks),
            dimension=len(records[0].embedding),
        )
        return records

    def batches(self, records: list[VectorRecord]) -> Iterator[list[VectorRecord]]:
        """Yield insert batches of at most :attr:`batch_size` records."""
        return to_chunks(records, self._batch_size)

    # ------------------------------------------------------------------
    # After the backend accepted data
    # ------------------------------------------------------------------

    async def record_batch(
        self, batch: list[VectorRecord], workspace_document: WorkspaceDocument
    ) -> int:
        """Write one mapping row per record of an inserted batch."""
        rows = [
            DocumentVector(
                doc_id=workspace_document.doc_id,
                vector_id=record.id,
                document_id=workspace_document.id,
                workspace_id=workspace_document.workspace_id,
                organization_id=workspace_document.organization_id,
            )
            for record in batch
        ]
        return await self._document_vectors.create_many(rows)

    async def write_cache(
        self, records: list[VectorRecord], workspace_document: WorkspaceDocument
    ) -> str:
        """Snapshot every record of the document.  Returns the artifact filename."""
        filename = workspace_document.vector_filename()
        entries = [
            CacheEntry(vector_db_id=r.id, values=r.embedding, metadata=r.metadata)
            for r in records
        ]
        await self._cache_store.store_vector_result(entries, filename)
        return filename
