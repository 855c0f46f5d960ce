"""Vector database connectors, one per supported backend."""

from vector_admin.providers.vector_db.base import BaseVectorConnector
from vector_admin.providers.vector_db.chroma_connector import ChromaConnector
from vector_admin.providers.vector_db.clickhouse_connector import ClickHouseConnector
from vector_admin.providers.vector_db.factory import (
    CONNECTOR_REGISTRY,
    connector_for,
    select_connector,
)
from vector_admin.providers.vector_db.milvus_connector import MilvusConnector
from vector_admin.providers.vector_db.pinecone_connector import PineconeConnector
from vector_admin.providers.vector_db.qdrant_connector import QdrantConnector
from vector_admin.providers.vector_db.weaviate_connector import WeaviateConnector

__all__ = [
    "BaseVectorConnector",
    "CONNECTOR_REGISTRY",
    "ChromaConnector",
    "ClickHouseConnector",
    "MilvusConnector",
    "PineconeConnector",
    "QdrantConnector",
    "WeaviateConnector",
    "connector_for",
    "select_connector",
]
