"""Unit tests for connector, vector and result models, and the error hierarchy."""

from __future__ import annotations

import pydantic
import pytest

from vector_admin.models.connector import (
    ChromaSettings,
    ClickHouseSettings,
    ConnectorType,
    MilvusSettings,
    OrganizationConnection,
    WeaviateSettings,
    parse_settings,
    resolve_connector_type,
)
from vector_admin.models.results import ProcessResult, SimilarityResponse
from vector_admin.models.vectors import CacheEntry, WorkspaceDocument
from vector_admin.utils.errors import (
    BackendTransportError,
    EmbeddingError,
    MissingArgumentError,
    UnsupportedConnectorError,
    VectorAdminError,
)


class TestConnectorType:
    def test_supported_set(self) -> None:
        assert ConnectorType.supported() == [
            "chroma",
            "pinecone",
            "qdrant",
            "weaviate",
            "milvus",
            "clickhouse",
        ]

    def test_resolve_is_case_insensitive(self) -> None:
        assert resolve_connector_type(" Qdrant ") is ConnectorType.QDRANT

    def test_resolve_unknown_raises(self) -> None:
        with pytest.raises(UnsupportedConnectorError):
            resolve_connector_type("redis")


class TestSettings:
    def test_parse_settings_decodes_json(self) -> None:
        assert parse_settings('{"host": "db"}') == {"host": "db"}
        assert parse_settings(None) == {}
        assert parse_settings("") == {}

    def test_parse_settings_rejects_non_object(self) -> None:
        with pytest.raises(ValueError):
            parse_settings("[1, 2]")

    def test_parse_settings_rejects_non_mapping(self) -> None:
        with pytest.raises(ValueError):
            parse_settings(["host", "db"])

    def test_connection_accepts_json_string(self) -> None:
        conn = OrganizationConnection(
            organization_id=1,
            type="qdrant",
            settings='{"clusterUrl": "http://q:6333"}',
        )
        assert conn.type is ConnectorType.QDRANT
        assert conn.settings == {"clusterUrl": "http://q:6333"}

    def test_chroma_camel_case_aliases(self) -> None:
        s = ChromaSettings.model_validate(
            {"instanceURL": "http://c:8000", "authToken": "t", "authTokenHeader": "X-Token"}
        )
        assert (s.instance_url, s.auth_token, s.auth_token_header) == (
            "http://c:8000",
            "t",
            "X-Token",
        )

    def test_clickhouse_falsy_values_use_defaults(self) -> None:
        s = ClickHouseSettings.model_validate(
            {"host": "ch", "port": None, "username": "", "password": None, "database": ""}
        )
        assert (s.port, s.username, s.password, s.database) == (8123, "default", "", "default")

    def test_milvus_address(self) -> None:
        assert MilvusSettings(host="m", port=19530).address == "m:19530"
        assert MilvusSettings(host="m").address == "m"

    def test_weaviate_grpc_default(self) -> None:
        assert WeaviateSettings.model_validate({"clusterUrl": "http://w"}).grpc_port == 50051

    def test_missing_required_field(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ChromaSettings.model_validate({})


class TestVectors:
    def test_vector_filename(self) -> None:
        doc = WorkspaceDocument(id=1, doc_id="doc-1", workspace_id=4, organization_id=2)
        assert doc.vector_filename() == "4-doc-1.json"

    def test_vector_filename_strips_path_characters(self) -> None:
        doc = WorkspaceDocument(id=1, doc_id="../etc/passwd", workspace_id=4, organization_id=2)
        assert "/" not in doc.vector_filename()

    def test_cache_entry_serializes_camel_case(self) -> None:
        entry = CacheEntry(vector_db_id="v1", values=[0.1], metadata={"text": "x"})
        assert entry.model_dump(by_alias=True) == {
            "vectorDbId": "v1",
            "values": [0.1],
            "metadata": {"text": "x"},
        }


class TestResults:
    def test_similarity_lists_must_be_parallel(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            SimilarityResponse(vector_ids=["a"], context_texts=[], source_documents=[], scores=[])

    def test_similarity_len(self) -> None:
        response = SimilarityResponse(
            vector_ids=["a", "b"],
            context_texts=["x", "y"],
            source_documents=[{}, {}],
            scores=[0.9, 0.1],
        )
        assert len(response) == 2
        assert len(SimilarityResponse()) == 0

    def test_process_result_keeps_typed_cause(self) -> None:
        cause = EmbeddingError()
        result = ProcessResult(success=False, message=cause.message, cause=cause)
        assert isinstance(result.cause, EmbeddingError)
        assert "cause" not in result.model_dump()


class TestErrors:
    def test_provider_prefix(self) -> None:
        err = BackendTransportError("timeout", provider_name="milvus")
        assert str(err) == "[milvus] timeout"
        assert err.message == "timeout"

    def test_default_messages(self) -> None:
        assert str(EmbeddingError()) == "embedding failure"
        assert str(MissingArgumentError()) == "No namespace value provided."
        assert str(UnsupportedConnectorError()) == "Unsupported connector for vector database."

    def test_hierarchy(self) -> None:
        assert issubclass(MissingArgumentError, VectorAdminError)
        assert issubclass(BackendTransportError, VectorAdminError)
