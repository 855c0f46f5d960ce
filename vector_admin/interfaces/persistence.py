"""Abstract base classes for the relational records the core writes.

The core never owns a database schema beyond these two tables: the
document-to-vector join table filled during ingestion, and the organization
connection records created after a successful validation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from vector_admin.models.connector import ConnectorType, OrganizationConnection
from vector_admin.models.vectors import DocumentVector


class IDocumentVectorRepository(ABC):
    """Contract for the ``document_vectors`` join table."""

    @abstractmethod
    async def create_many(self, rows: list[DocumentVector]) -> int:
        """Insert mapping rows.  Returns the number of rows written."""

    @abstractmethod
    async def for_document(self, document_id: int) -> list[DocumentVector]:
        """Return every mapping row of one workspace document."""

    @abstractmethod
    async def delete_for_document(self, document_id: int) -> int:
        """Delete every mapping row of one workspace document.  Returns the count."""

    @abstractmethod
    async def count(self) -> int:
        """Return the total number of mapping rows."""


class IOrganizationConnectionRepository(ABC):
    """Contract for persisted organization connections."""

    @abstractmethod
    async def create(
        self,
        organization_id: int,
        connector_type: ConnectorType | str,
        settings: dict[str, Any],
    ) -> OrganizationConnection:
        """Persist a validated connection and return it with its new id."""

    @abstractmethod
    async def get(self, connection_id: int) -> OrganizationConnection | None:
        """Return one connection, or ``None`` if it does not exist."""

    @abstractmethod
    async def for_organization(self, organization_id: int) -> list[OrganizationConnection]:
        """Return every connection of one organization, oldest first."""
