"""Pydantic v2 data models shared by connectors, services and persistence."""

from vector_admin.models.connector import ConnectorType, OrganizationConnection
from vector_admin.models.results import (
    DeleteResult,
    HeartbeatResult,
    NamespaceInfo,
    ProcessResult,
    RawGetResult,
    RegistrationResult,
    SimilarityResponse,
    TabularQueryResult,
    TotalVectorsResult,
    ValidationResult,
)
from vector_admin.models.vectors import CacheEntry, DocumentVector, VectorRecord, WorkspaceDocument

__all__ = [
    "CacheEntry",
    "ConnectorType",
    "DeleteResult",
    "DocumentVector",
    "HeartbeatResult",
    "NamespaceInfo",
    "OrganizationConnection",
    "ProcessResult",
    "RawGetResult",
    "RegistrationResult",
    "SimilarityResponse",
    "TabularQueryResult",
    "TotalVectorsResult",
    "ValidationResult",
    "VectorRecord",
    "WorkspaceDocument",
]
