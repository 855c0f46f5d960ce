"""Abstract base class for vector-database connectors.

Defines the capability set every backend binding must expose, whether it
wraps a document-oriented vector store (Chroma, Pinecone, Qdrant, Weaviate,
Milvus) or a tabular store used for browsing (ClickHouse).  Callers such as
dashboards and the ingestion workers treat all six backends identically
through this contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from vector_admin.models.results import (
    DeleteResult,
    HeartbeatResult,
    NamespaceInfo,
    ProcessResult,
    RawGetResult,
    SimilarityResponse,
    TotalVectorsResult,
)
from vector_admin.models.vectors import WorkspaceDocument


# Concrete implementations live in vector_admin/providers/vector_db/ and are
# selected by ConnectorType in vector_admin/providers/vector_db/factory.py.
class IVectorDatabaseConnector(ABC):
    """Contract for one organization's binding to one backend instance.

    **Failure policy.**  Read operations (``heartbeat`` through
    ``get_metadata``) never raise for backend problems: they log the cause
    and return an empty or zero result, so a single unreachable backend
    cannot break an aggregate view.  Mutations (``process_document``,
    ``delete_vectors``) return an explicit ``success`` flag with a typed
    ``cause`` that the caller must check.  The only exceptions that escape
    are caller errors such as a missing namespace name.
    """

    @abstractmethod
    async def connect(self) -> Any:
        """Open and health-check a backend client.

        Returns
        -------
        Any
            The backend SDK's client handle.

        Raises
        ------
        vector_admin.utils.errors.ConfigurationError
            If the connection record's type does not match this connector.
        vector_admin.utils.errors.BackendTransportError
            If the backend reports itself unhealthy.
        """

    @abstractmethod
    async def heartbeat(self) -> HeartbeatResult:
        """Report whether the backend is reachable and healthy."""

    @abstractmethod
    async def total_indicies(self) -> TotalVectorsResult:
        """Return the number of vectors (or rows) stored across all namespaces."""

    @abstractmethod
    async def namespaces(self) -> list[NamespaceInfo]:
        """List every namespace with its size and backend metadata."""

    async def collections(self) -> list[NamespaceInfo]:
        """Alias of :meth:`namespaces` for backends that call them collections."""
        return await self.namespaces()

    @abstractmethod
    async def namespace(self, name: str | None = None) -> NamespaceInfo | None:
        """Describe one namespace, or return ``None`` if the lookup fails.

        Raises
        ------
        vector_admin.utils.errors.MissingArgumentError
            If *name* is empty.
        """

    @abstractmethod
    async def namespace_exists(self, name: str | None = None) -> bool:
        """Return ``True`` only when the backend confirms the namespace exists.

        Raises
        ------
        vector_admin.utils.errors.MissingArgumentError
            If *name* is empty.
        """

    @abstractmethod
    async def raw_get(self, name: str, page_size: int = 10, offset: int = 0) -> RawGetResult:
        """Return one page of raw stored items for browsing."""

    @abstractmethod
    async def process_document(
        self,
        namespace: str,
        document: dict[str, Any],
        embedder_key: str,
        workspace_document: WorkspaceDocument,
    ) -> ProcessResult:
        """Chunk, embed and insert a document, then record its side-effects.

        Parameters
        ----------
        namespace:
            Target collection/namespace in the backend.
        document:
            Payload with ``pageContent`` (the text), ``id`` (the document's
            ``doc_id``) and any further keys, which become vector metadata.
        embedder_key:
            API key handed to the embedding provider for this call.
        workspace_document:
            The relational document record the vectors belong to.
        """

    @abstractmethod
    async def similarity_response(
        self,
        namespace: str,
        query_vector: list[float],
        top_k: int = 4,
    ) -> SimilarityResponse:
        """Return up to *top_k* nearest hits with normalized ``[0, 1]`` scores."""

    @abstractmethod
    async def get_metadata(self, namespace: str, vector_ids: list[str]) -> list[dict[str, Any]]:
        """Return stored metadata for *vector_ids*, each with ``vectorId`` and ``text``."""

    @abstractmethod
    async def delete_vectors(self, namespace: str, vector_ids: list[str]) -> DeleteResult:
        """Delete vectors by id.  Ids that do not exist are not an error."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the backend identifier, e.g. ``"qdrant"``."""
