"""Connector selection.

Maps a :class:`~vector_admin.models.connector.ConnectorType` tag to its
connector class.  The registry is closed: adding a backend means adding a
``ConnectorType`` member and a row here.  Selection does no I/O; the returned
connector opens clients lazily per operation.
"""

from __future__ import annotations

from typing import Any

from vector_admin.models.connector import (
    ConnectorType,
    OrganizationConnection,
    resolve_connector_type,
)
from vector_admin.providers.vector_db.base import BaseVectorConnector
from vector_admin.providers.vector_db.chroma_connector import ChromaConnector
from vector_admin.providers.vector_db.clickhouse_connector import ClickHouseConnector
from vector_admin.providers.vector_db.milvus_connector import MilvusConnector
from vector_admin.providers.vector_db.pinecone_connector import PineconeConnector
from vector_admin.providers.vector_db.qdrant_connector import QdrantConnector
from vector_admin.providers.vector_db.weaviate_connector import WeaviateConnector


CONNECTOR_REGISTRY: dict[ConnectorType, type[BaseVectorConnector]] = {
    ConnectorType.CHROMA: ChromaConnector,
    ConnectorType.PINECONE: PineconeConnector,
    ConnectorType.QDRANT: QdrantConnector,
    ConnectorType.WEAVIATE: WeaviateConnector,
    ConnectorType.MILVUS: MilvusConnector,
    ConnectorType.CLICKHOUSE: ClickHouseConnector,
}


def select_connector(
    connector_type: ConnectorType | str,
    settings: dict[str, Any] | str | None = None,
    *,
    organization_id: int = 0,
    connection_id: int | None = None,
    **deps: Any,
) -> BaseVectorConnector:
    """Return a connector bound to *settings* for the given backend type.

    Parameters
    ----------
    connector_type:
        A ``ConnectorType`` or its string value, e.g. ``"qdrant"``.
    settings:
        Backend settings as a dict or a JSON string.
    **deps:
        Passed through to the connector, e.g. ``client_factory`` or
        ``pipeline``.
    """
    resolved = resolve_connector_type(connector_type)
    connection = OrganizationConnection(
        id=connection_id,
        organization_id=organization_id,
        type=resolved,
        settings=settings or {},
    )
    return CONNECTOR_REGISTRY[resolved](connection, **deps)


def connector_for(connection: OrganizationConnection, **deps: Any) -> BaseVectorConnector:
    """Return the connector for a persisted organization connection."""
    return CONNECTOR_REGISTRY[connection.type](connection, **deps)
