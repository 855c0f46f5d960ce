"""Ingestion data models: vector records, mapping rows and cache entries.

One document produces one :class:`VectorRecord` per text chunk.  Each record
that lands in a backend gets exactly one :class:`DocumentVector` row linking
it back to the workspace document, and all of a document's records are
snapshotted as :class:`CacheEntry` items so they can be re-hydrated later
without paying for embeddings again.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class VectorRecord(BaseModel):
    """One embedded chunk, ready for insertion into a backend."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Opaque unique id (uuid4), stable for the chunk's lifetime.")
    embedding: list[float]
    metadata: dict[str, Any] = Field(default_factory=dict)
    text: str = ""


class WorkspaceDocument(BaseModel):
    """The relational record of a document being ingested into a workspace."""

    model_config = ConfigDict(frozen=True)

    id: int
    doc_id: str
    name: str = ""
    workspace_id: int
    organization_id: int

    def vector_filename(self) -> str:
        """Deterministic cache-artifact filename for this document."""
        safe_doc_id = _UNSAFE_FILENAME_CHARS.sub("_", self.doc_id)
        return f"{self.workspace_id}-{safe_doc_id}.json"


class DocumentVector(BaseModel):
    """Join row linking one inserted vector to its source document."""

    model_config = ConfigDict(frozen=True)

    doc_id: str
    vector_id: str
    document_id: int
    workspace_id: int
    organization_id: int


class CacheEntry(BaseModel):
    """Backend-independent snapshot of one vector, serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    vector_db_id: str = Field(alias="vectorDbId")
    values: list[float]
    metadata: dict[str, Any] = Field(default_factory=dict)
