"""Connector data models: supported backend types and connection settings.

An :class:`OrganizationConnection` is the persisted binding between an
organization and one backend instance.  Its ``settings`` are stored as opaque
JSON using the camelCase keys the admin UI submits (``instanceURL``,
``clusterUrl``, ``apiKey`` ...); each connector parses them into one of the
typed settings models below before opening a client.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vector_admin.utils.errors import UnsupportedConnectorError


class ConnectorType(str, Enum):
    """The fixed set of backends a connection may point at."""

    CHROMA = "chroma"
    PINECONE = "pinecone"
    QDRANT = "qdrant"
    WEAVIATE = "weaviate"
    MILVUS = "milvus"
    CLICKHOUSE = "clickhouse"

    @classmethod
    def supported(cls) -> list[str]:
        return [member.value for member in cls]


def resolve_connector_type(connector_type: ConnectorType | str) -> ConnectorType:
    """Coerce a type tag such as ``"Qdrant"`` into :class:`ConnectorType`.

    Raises
    ------
    UnsupportedConnectorError
        If the tag names no supported backend.
    """
    if isinstance(connector_type, ConnectorType):
        return connector_type
    try:
        return ConnectorType(str(connector_type).strip().lower())
    except ValueError as exc:
        raise UnsupportedConnectorError(provider_name=str(connector_type)) from exc


def parse_settings(settings: dict[str, Any] | str | None) -> dict[str, Any]:
    """Return connection settings as a dict, decoding a JSON string if needed."""
    if settings is None:
        return {}
    if isinstance(settings, str):
        decoded = json.loads(settings) if settings.strip() else {}
        if not isinstance(decoded, dict):
            raise ValueError("Connector settings must decode to a JSON object.")
        return decoded
    if not isinstance(settings, Mapping):
        raise ValueError("Connector settings must be a JSON object.")
    return dict(settings)


# ---------------------------------------------------------------------------
# Per-backend settings.  Aliases match the persisted camelCase keys.
# ---------------------------------------------------------------------------


class _BackendSettings(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class ChromaSettings(_BackendSettings):
    instance_url: str = Field(alias="instanceURL", min_length=1)
    auth_token: str | None = Field(default=None, alias="authToken")
    auth_token_header: str | None = Field(default=None, alias="authTokenHeader")


class PineconeSettings(_BackendSettings):
    # Legacy pod environments; serverless indexes ignore it.
    environment: str | None = None
    index: str = Field(min_length=1)
    api_key: str = Field(alias="apiKey", min_length=1)


class QdrantSettings(_BackendSettings):
    cluster_url: str = Field(alias="clusterUrl", min_length=1)
    api_key: str | None = Field(default=None, alias="apiKey")


class WeaviateSettings(_BackendSettings):
    cluster_url: str = Field(alias="clusterUrl", min_length=1)
    api_key: str | None = Field(default=None, alias="apiKey")
    grpc_port: int = Field(default=50051, alias="grpcPort")


class MilvusSettings(_BackendSettings):
    host: str = Field(min_length=1)
    port: int | str | None = None
    username: str | None = None
    password: str | None = None
    # Zilliz Cloud API token.
    token: str | None = None
    database: str | None = None

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}" if self.port else self.host


class ClickHouseSettings(_BackendSettings):
    host: str = Field(min_length=1)
    port: int = 8123
    username: str = "default"
    password: str = ""
    database: str = "default"

    @field_validator("port", mode="before")
    @classmethod
    def _default_port(cls, value: Any) -> Any:
        return value or 8123

    @field_validator("username", "database", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> Any:
        return value or "default"

    @field_validator("password", mode="before")
    @classmethod
    def _default_password(cls, value: Any) -> Any:
        return value or ""


# ---------------------------------------------------------------------------
# OrganizationConnection
# ---------------------------------------------------------------------------


class OrganizationConnection(BaseModel):
    """A persisted organization-to-backend binding.

    ``type`` never changes after creation; ``settings`` may be edited by the
    admin surface, which lives outside this package.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    organization_id: int
    type: ConnectorType
    settings: dict[str, Any] = Field(default_factory=dict)

    @field_validator("settings", mode="before")
    @classmethod
    def _decode_settings(cls, value: Any) -> dict[str, Any]:
        return parse_settings(value)
