"""Shared pytest fixtures for the vector_admin test suite."""

from __future__ import annotations

import logging
from typing import Any

import pytest
import structlog

from vector_admin.config.settings import Settings
from vector_admin.interfaces.embedding_provider import IEmbeddingProvider
from vector_admin.interfaces.persistence import IDocumentVectorRepository
from vector_admin.interfaces.vector_cache_store import IVectorCacheStore
from vector_admin.models.connector import ConnectorType, OrganizationConnection
from vector_admin.models.vectors import CacheEntry, DocumentVector, WorkspaceDocument
from vector_admin.services.ingestion.pipeline import DocumentIngestionPipeline
from vector_admin.services.ingestion.text_splitter import RecursiveCharacterTextSplitter

_UNSET = object()


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


class FakeEmbeddingProvider(IEmbeddingProvider):
    """Returns one deterministic vector per chunk, or a fixed override."""

    def __init__(self, dimension: int = 3, result: Any = _UNSET, available: bool = True) -> None:
        self._dimension = dimension
        self._result = result
        self._available = available
        self.calls: list[list[str]] = []

    async def embed_text_chunks(self, chunks: list[str]) -> list[list[float]] | None:
        self.calls.append(list(chunks))
        if self._result is not _UNSET:
            return self._result
        return [[float(i + 1)] + [0.5] * (self._dimension - 1) for i in range(len(chunks))]

    async def embed_single(self, text: str) -> list[float] | None:
        vectors = await self.embed_text_chunks([text])
        return vectors[0] if vectors else None

    def get_provider_name(self) -> str:
        return "fake_embedding"

    def is_available(self) -> bool:
        return self._available


class InMemoryDocumentVectorRepository(IDocumentVectorRepository):
    def __init__(self) -> None:
        self.rows: list[DocumentVector] = []
        self.create_calls = 0

    async def create_many(self, rows: list[DocumentVector]) -> int:
        self.create_calls += 1
        self.rows.extend(rows)
        return len(rows)

    async def for_document(self, document_id: int) -> list[DocumentVector]:
        return [r for r in self.rows if r.document_id == document_id]

    async def delete_for_document(self, document_id: int) -> int:
        before = len(self.rows)
        self.rows = [r for r in self.rows if r.document_id != document_id]
        return before - len(self.rows)

    async def count(self) -> int:
        return len(self.rows)


class InMemoryVectorCacheStore(IVectorCacheStore):
    def __init__(self) -> None:
        self.files: dict[str, list[CacheEntry]] = {}

    async def store_vector_result(self, entries: list[CacheEntry], filename: str) -> None:
        self.files[filename] = list(entries)

    async def load_vector_result(self, filename: str) -> list[CacheEntry] | None:
        return self.files.get(filename)

    async def delete_vector_result(self, filename: str) -> bool:
        return self.files.pop(filename, None) is not None


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def make_settings(**overrides: Any) -> Settings:
    """Build Settings without reading a local .env file."""
    defaults: dict[str, Any] = {
        "openai_api_key": "sk-test",
        "openai_base_url": "",
        "openai_embedding_model": "",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


def make_connection(
    connector_type: ConnectorType | str,
    settings: dict[str, Any] | None = None,
    organization_id: int = 1,
) -> OrganizationConnection:
    return OrganizationConnection(
        id=7,
        organization_id=organization_id,
        type=connector_type,
        settings=settings or {},
    )


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def embedder() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def document_vectors() -> InMemoryDocumentVectorRepository:
    return InMemoryDocumentVectorRepository()


@pytest.fixture
def cache_store() -> InMemoryVectorCacheStore:
    return InMemoryVectorCacheStore()


@pytest.fixture
def make_pipeline(document_vectors, cache_store):  # noqa: ANN001, ANN201
    """Factory fixture: build a pipeline around the in-memory collaborators."""

    def _make(
        embedder: IEmbeddingProvider | None = None,
        batch_size: int = 500,
        chunk_size: int = 1000,
        chunk_overlap: int = 20,
    ) -> DocumentIngestionPipeline:
        provider = embedder or FakeEmbeddingProvider()
        return DocumentIngestionPipeline(
            splitter=RecursiveCharacterTextSplitter(chunk_size, chunk_overlap),
            embedder_factory=lambda _key: provider,
            document_vectors=document_vectors,
            cache_store=cache_store,
            batch_size=batch_size,
        )

    return _make


@pytest.fixture
def workspace_document() -> WorkspaceDocument:
    return WorkspaceDocument(
        id=12,
        doc_id="doc-1",
        name="notes.txt",
        workspace_id=4,
        organization_id=1,
    )


@pytest.fixture
def sample_document() -> dict[str, Any]:
    return {
        "pageContent": "Vectors live in namespaces.\n\nEach chunk is embedded once.",
        "id": "doc-1",
        "title": "notes.txt",
        "published": "2024-05-01",
    }


@pytest.fixture(autouse=True)
def _reset_logging():  # noqa: ANN202
    """Undo any structlog or root-handler configuration a test applied."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)
