"""Unit tests for the aiosqlite repositories.

Each test runs against a fresh database file in a temp directory.
"""

from __future__ import annotations

import pytest

from vector_admin.models.connector import ConnectorType
from vector_admin.models.vectors import DocumentVector
from vector_admin.providers.persistence import (
    SQLiteDocumentVectorRepository,
    SQLiteOrganizationConnectionRepository,
)
from vector_admin.utils.errors import UnsupportedConnectorError


@pytest.fixture
async def document_vector_repo(tmp_path):  # noqa: ANN001, ANN201
    repo = SQLiteDocumentVectorRepository(db_path=tmp_path / "data" / "test.db")
    await repo.initialize()
    return repo


@pytest.fixture
async def connection_repo(tmp_path):  # noqa: ANN001, ANN201
    repo = SQLiteOrganizationConnectionRepository(db_path=tmp_path / "test.db")
    await repo.initialize()
    return repo


def _row(vector_id: str, document_id: int = 12) -> DocumentVector:
    return DocumentVector(
        doc_id="doc-1",
        vector_id=vector_id,
        document_id=document_id,
        workspace_id=4,
        organization_id=1,
    )


# ─── document_vectors ─────────────────────────────────────────────


class TestDocumentVectors:
    @pytest.mark.asyncio
    async def test_initialize_creates_parent_directory(
        self, document_vector_repo, tmp_path  # noqa: ANN001
    ) -> None:
        assert (tmp_path / "data" / "test.db").is_file()
        assert await document_vector_repo.count() == 0

    @pytest.mark.asyncio
    async def test_create_and_read_back(self, document_vector_repo) -> None:  # noqa: ANN001
        written = await document_vector_repo.create_many([_row("v1"), _row("v2")])

        assert written == 2
        rows = await document_vector_repo.for_document(12)
        assert [r.vector_id for r in rows] == ["v1", "v2"]
        assert rows[0] == _row("v1")

    @pytest.mark.asyncio
    async def test_create_nothing(self, document_vector_repo) -> None:  # noqa: ANN001
        assert await document_vector_repo.create_many([]) == 0
        assert await document_vector_repo.count() == 0

    @pytest.mark.asyncio
    async def test_rows_are_scoped_to_document(self, document_vector_repo) -> None:  # noqa: ANN001
        await document_vector_repo.create_many([_row("v1", 12), _row("v2", 13)])
        assert [r.vector_id for r in await document_vector_repo.for_document(13)] == ["v2"]
        assert await document_vector_repo.for_document(99) == []

    @pytest.mark.asyncio
    async def test_delete_for_document(self, document_vector_repo) -> None:  # noqa: ANN001
        await document_vector_repo.create_many([_row("v1"), _row("v2"), _row("v3", 13)])

        deleted = await document_vector_repo.delete_for_document(12)

        assert deleted == 2
        assert await document_vector_repo.count() == 1


# ─── organization_connections ─────────────────────────────────────


class TestOrganizationConnections:
    @pytest.mark.asyncio
    async def test_create_assigns_id(self, connection_repo) -> None:  # noqa: ANN001
        created = await connection_repo.create(1, "qdrant", {"clusterUrl": "http://q:6333"})

        assert created.id is not None
        assert created.type is ConnectorType.QDRANT
        fetched = await connection_repo.get(created.id)
        assert fetched == created

    @pytest.mark.asyncio
    async def test_settings_round_trip_as_json(self, connection_repo) -> None:  # noqa: ANN001
        settings = {"host": "milvus", "port": 19530, "username": None}
        created = await connection_repo.create(1, ConnectorType.MILVUS, settings)
        fetched = await connection_repo.get(created.id)
        assert fetched.settings == settings

    @pytest.mark.asyncio
    async def test_get_missing(self, connection_repo) -> None:  # noqa: ANN001
        assert await connection_repo.get(404) is None

    @pytest.mark.asyncio
    async def test_for_organization(self, connection_repo) -> None:  # noqa: ANN001
        first = await connection_repo.create(1, "chroma", {"instanceURL": "http://c"})
        await connection_repo.create(2, "pinecone", {"index": "i", "apiKey": "k"})
        second = await connection_repo.create(1, "clickhouse", {"host": "ch"})

        connections = await connection_repo.for_organization(1)

        assert [c.id for c in connections] == [first.id, second.id]
        assert [c.type for c in connections] == [ConnectorType.CHROMA, ConnectorType.CLICKHOUSE]

    @pytest.mark.asyncio
    async def test_unknown_type_is_rejected(self, connection_repo) -> None:  # noqa: ANN001
        with pytest.raises(UnsupportedConnectorError):
            await connection_repo.create(1, "redis", {})
