"""Unit tests for PineconeConnector with a mocked Pinecone client."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from tests.conftest import make_connection
from vector_admin.models.connector import ConnectorType
from vector_admin.providers.vector_db.pinecone_connector import PineconeConnector, index_ready

_SETTINGS = {"environment": "us-east-1", "index": "vectors", "apiKey": "pc-key"}


def _connector(client: MagicMock, pipeline=None) -> PineconeConnector:  # noqa: ANN001
    return PineconeConnector(
        make_connection(ConnectorType.PINECONE, _SETTINGS),
        client_factory=lambda _settings: client,
        pipeline=pipeline,
    )


@pytest.fixture()
def client() -> MagicMock:
    mock = MagicMock()
    mock.describe_index.return_value = {"status": {"ready": True}}
    return mock


@pytest.fixture()
def index(client: MagicMock) -> MagicMock:
    return client.Index.return_value


class TestIndexReady:
    def test_mapping_response(self) -> None:
        assert index_ready({"status": {"ready": True}}) is True
        assert index_ready({"status": {"ready": False}}) is False

    def test_model_response(self) -> None:
        assert index_ready(SimpleNamespace(status=SimpleNamespace(ready=True))) is True

    def test_missing_status(self) -> None:
        assert index_ready({}) is False


class TestReads:
    @pytest.mark.asyncio
    async def test_heartbeat_checks_index_status(self, client: MagicMock) -> None:
        assert (await _connector(client).heartbeat()).result is True
        client.describe_index.assert_called_with("vectors")

    @pytest.mark.asyncio
    async def test_index_not_ready(self, client: MagicMock) -> None:
        client.describe_index.return_value = {"status": {"ready": False}}
        assert (await _connector(client).heartbeat()).result is False

    @pytest.mark.asyncio
    async def test_stats(self, client: MagicMock, index: MagicMock) -> None:
        index.describe_index_stats.return_value = {
            "total_vector_count": 42,
            "namespaces": {"docs": {"vector_count": 40}, "faq": {"vector_count": 2}},
        }
        connector = _connector(client)

        assert (await connector.total_indicies()).result == 42
        namespaces = await connector.namespaces()
        assert {(n.name, n.count) for n in namespaces} == {("docs", 40), ("faq", 2)}
        assert (await connector.namespace("docs")).count == 40
        assert await connector.namespace("missing") is None
        assert await connector.namespace_exists("faq") is True
        client.Index.assert_called_with("vectors")

    @pytest.mark.asyncio
    async def test_raw_get_pages_through_listing(self, client: MagicMock, index: MagicMock) -> None:
        index.list.return_value = iter([["a", "b"], ["c", "d"], ["e"]])
        index.fetch.return_value = {
            "vectors": {
                "c": {"values": [0.1], "metadata": {"text": "c"}},
                "d": {"values": [0.2], "metadata": {"text": "d"}},
            }
        }

        result = await _connector(client).raw_get("docs", page_size=2, offset=2)

        assert result.ids == ["c", "d"]
        assert result.data[1] == {"id": "d", "values": [0.2], "metadata": {"text": "d"}}
        index.fetch.assert_called_once_with(ids=["c", "d"], namespace="docs")

    @pytest.mark.asyncio
    async def test_raw_get_past_end(self, client: MagicMock, index: MagicMock) -> None:
        index.list.return_value = iter([["a"]])
        result = await _connector(client).raw_get("docs", page_size=10, offset=5)
        assert result.ids == []
        index.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_similarity_scores_are_clamped(self, client: MagicMock, index: MagicMock) -> None:
        index.query.return_value = {
            "matches": [
                {"id": "a", "score": 0.93, "metadata": {"text": "alpha"}},
                {"id": "b", "score": 1.2, "metadata": {"text": "beta"}},
            ]
        }
        response = await _connector(client).similarity_response("docs", [0.1], top_k=2)

        assert response.vector_ids == ["a", "b"]
        assert response.context_texts == ["alpha", "beta"]
        assert response.scores == pytest.approx([0.93, 1.0])
        assert index.query.call_args.kwargs["namespace"] == "docs"

    @pytest.mark.asyncio
    async def test_get_metadata_skips_missing_ids(self, client: MagicMock, index: MagicMock) -> None:
        index.fetch.return_value = {"vectors": {"a": {"metadata": {"text": "alpha"}}}}
        items = await _connector(client).get_metadata("docs", ["a", "gone"])
        assert items == [{"text": "alpha", "vectorId": "a"}]


class TestMutations:
    @pytest.mark.asyncio
    async def test_process_document_upserts_into_namespace(
        self, client: MagicMock, index: MagicMock, make_pipeline, sample_document, workspace_document
    ) -> None:
        result = await _connector(client, make_pipeline()).process_document(
            "docs", sample_document, "", workspace_document
        )

        assert result.success is True
        kwargs = index.upsert.call_args.kwargs
        assert kwargs["namespace"] == "docs"
        vector = kwargs["vectors"][0]
        assert set(vector) == {"id", "values", "metadata"}
        assert vector["metadata"]["title"] == "notes.txt"

    @pytest.mark.asyncio
    async def test_delete(self, client: MagicMock, index: MagicMock) -> None:
        result = await _connector(client).delete_vectors("docs", ["a", "b"])
        assert result.success is True
        index.delete.assert_called_once_with(ids=["a", "b"], namespace="docs")
