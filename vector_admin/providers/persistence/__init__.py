"""aiosqlite-backed repositories for the relational records the core writes."""

from vector_admin.providers.persistence.sqlite_connections import (
    SQLiteOrganizationConnectionRepository,
)
from vector_admin.providers.persistence.sqlite_document_vectors import (
    SQLiteDocumentVectorRepository,
)

__all__ = ["SQLiteDocumentVectorRepository", "SQLiteOrganizationConnectionRepository"]
