"""Unit tests for pre-registration connector validation."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from vector_admin.services.connector_validator import CHROMA_MISSING_HEADER, validate_connector

_MODULE = "vector_admin.services.connector_validator"


class TestChroma:
    @pytest.mark.asyncio
    async def test_valid(self) -> None:
        with patch(f"{_MODULE}.build_chroma_client") as build:
            build.return_value.heartbeat.return_value = 1
            result = await validate_connector("chroma", {"instanceURL": "http://chroma:8000"})
        assert result.valid is True
        assert result.message is None

    @pytest.mark.asyncio
    async def test_token_without_header_is_rejected_before_connecting(self) -> None:
        with patch(f"{_MODULE}.build_chroma_client") as build:
            result = await validate_connector(
                "chroma", {"instanceURL": "http://chroma:8000", "authToken": "secret"}
            )
        assert result.valid is False
        assert result.message == CHROMA_MISSING_HEADER
        build.assert_not_called()

    @pytest.mark.asyncio
    async def test_connection_refused(self) -> None:
        with patch(f"{_MODULE}.build_chroma_client") as build:
            build.return_value.heartbeat.side_effect = ConnectionError("Connection refused")
            result = await validate_connector("chroma", {"instanceURL": "http://chroma:8000"})
        assert result.valid is False
        assert result.message == "Connection refused"

    @pytest.mark.asyncio
    async def test_empty_exception_uses_fallback_message(self) -> None:
        with patch(f"{_MODULE}.build_chroma_client") as build:
            build.return_value.heartbeat.side_effect = RuntimeError()
            result = await validate_connector("chroma", {"instanceURL": "http://chroma:8000"})
        assert result.message == "Could not connect to Chroma instance with those credentials."


class TestPinecone:
    _SETTINGS = {"environment": "us-east-1", "index": "vectors", "apiKey": "pc-key"}

    @pytest.mark.asyncio
    async def test_ready_index(self) -> None:
        with patch(f"{_MODULE}.build_pinecone_client") as build:
            build.return_value.describe_index.return_value = {"status": {"ready": True}}
            result = await validate_connector("pinecone", self._SETTINGS)
        assert result.valid is True
        build.return_value.describe_index.assert_called_once_with("vectors")

    @pytest.mark.asyncio
    async def test_index_not_ready(self) -> None:
        with patch(f"{_MODULE}.build_pinecone_client") as build:
            build.return_value.describe_index.return_value = SimpleNamespace(
                status=SimpleNamespace(ready=False)
            )
            result = await validate_connector("pinecone", self._SETTINGS)
        assert result.valid is False
        assert result.message == "Pinecone::Index not ready or found."


class TestQdrant:
    @pytest.mark.asyncio
    async def test_unreachable_cluster_keeps_transport_message(self) -> None:
        with patch(f"{_MODULE}.build_qdrant_client") as build:
            build.return_value.get_collections.side_effect = ConnectionError(
                "[Errno 111] Connection refused"
            )
            result = await validate_connector("qdrant", {"clusterUrl": "http://q:6333"})
        assert result.valid is False
        assert result.message == "[Errno 111] Connection refused"
        build.return_value.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_no_cluster_answer(self) -> None:
        with patch(f"{_MODULE}.build_qdrant_client") as build:
            build.return_value.get_collections.return_value = None
            result = await validate_connector("qdrant", {"clusterUrl": "http://q:6333"})
        assert result.valid is False
        assert result.message == "qDrant::Cluster not ready or found."

    @pytest.mark.asyncio
    async def test_valid(self) -> None:
        with patch(f"{_MODULE}.build_qdrant_client") as build:
            result = await validate_connector("qdrant", {"clusterUrl": "http://q:6333"})
        assert result.valid is True
        build.return_value.close.assert_called_once()


class TestWeaviate:
    @pytest.mark.asyncio
    async def test_not_live(self) -> None:
        with patch(f"{_MODULE}.build_weaviate_client") as build:
            build.return_value.is_live.return_value = False
            result = await validate_connector("weaviate", {"clusterUrl": "http://w:8080"})
        assert result.valid is False
        assert result.message == "Weaviate::Cluster not ready."
        build.return_value.close.assert_called_once()


class TestMilvus:
    @pytest.mark.asyncio
    async def test_unreachable_server_keeps_transport_message(self) -> None:
        with patch(f"{_MODULE}.build_milvus_client") as build:
            build.return_value.list_collections.side_effect = RuntimeError(
                "Fail connecting to server on m:19530"
            )
            result = await validate_connector("milvus", {"host": "m", "port": 19530})
        assert result.valid is False
        assert result.message == "Fail connecting to server on m:19530"
        build.return_value.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_unhealthy(self) -> None:
        with patch(f"{_MODULE}.build_milvus_client") as build:
            build.return_value.list_collections.return_value = None
            result = await validate_connector("milvus", {"host": "milvus", "port": 19530})
        assert result.valid is False
        assert result.message == "Milvus::Cluster is not healthy."

    @pytest.mark.asyncio
    async def test_client_construction_failure(self) -> None:
        with patch(f"{_MODULE}.build_milvus_client", side_effect=RuntimeError("")):
            result = await validate_connector("milvus", {"host": "milvus"})
        assert result.valid is False
        assert result.message == "Could not connect to Milvus instance."


class TestClickHouse:
    @pytest.mark.asyncio
    async def test_ping_failed(self) -> None:
        client = MagicMock()
        client.ping.return_value = False
        with patch(f"{_MODULE}.build_clickhouse_client", return_value=client):
            result = await validate_connector("clickhouse", {"host": "ch"})
        assert result.valid is False
        assert result.message == "ClickHouse::Ping failed."
        client.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_valid(self) -> None:
        client = MagicMock()
        client.ping.return_value = True
        with patch(f"{_MODULE}.build_clickhouse_client", return_value=client):
            result = await validate_connector("clickhouse", '{"host": "ch"}')
        assert result.valid is True


class TestInputs:
    @pytest.mark.asyncio
    async def test_unknown_type(self) -> None:
        result = await validate_connector("redis", {})
        assert result.valid is False
        assert result.message == "Unsupported connector for vector database."

    @pytest.mark.asyncio
    async def test_missing_required_setting(self) -> None:
        result = await validate_connector("qdrant", {})
        assert result.valid is False
        assert "clusterUrl" in result.message

    @pytest.mark.asyncio
    async def test_malformed_json(self) -> None:
        result = await validate_connector("qdrant", "{not json")
        assert result.valid is False

    @pytest.mark.asyncio
    async def test_non_mapping_settings(self) -> None:
        result = await validate_connector("qdrant", ["clusterUrl", "http://q:6333"])
        assert result.valid is False
        assert result.message == "Connector settings must be a JSON object."
