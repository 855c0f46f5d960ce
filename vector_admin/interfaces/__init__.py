"""Public interface definitions for every external collaborator.

Backends, the embedding provider, the vector cache and relational persistence
are reached only through the abstract base classes in this package, so
concrete adapters can be swapped, and replaced by fakes in tests.

    Interface                          ->  Implementations (vector_admin/providers/)
    ---------------------------------------------------------------------------
    IVectorDatabaseConnector           ->  Chroma, Pinecone, Qdrant, Weaviate,
                                           Milvus, ClickHouse connectors
    IEmbeddingProvider                 ->  OpenAIEmbeddingProvider
    IVectorCacheStore                  ->  FileVectorCacheStore
    IDocumentVectorRepository          ->  SQLiteDocumentVectorRepository
    IOrganizationConnectionRepository  ->  SQLiteOrganizationConnectionRepository
"""

from vector_admin.interfaces.embedding_provider import IEmbeddingProvider
from vector_admin.interfaces.persistence import (
    IDocumentVectorRepository,
    IOrganizationConnectionRepository,
)
from vector_admin.interfaces.vector_cache_store import IVectorCacheStore
from vector_admin.interfaces.vector_database_connector import IVectorDatabaseConnector

__all__ = [
    "IDocumentVectorRepository",
    "IEmbeddingProvider",
    "IOrganizationConnectionRepository",
    "IVectorCacheStore",
    "IVectorDatabaseConnector",
]
