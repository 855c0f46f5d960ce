"""Result models returned by connector operations.

Read operations never raise: they return one of these models with an empty
or zero payload and an ``error`` string.  Mutations return an explicit
``success`` flag and keep the typed exception that caused a failure in
``cause`` so callers can branch on the error class, not just a message.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from vector_admin.models.connector import OrganizationConnection
from vector_admin.utils.errors import VectorAdminError


class HeartbeatResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    result: bool
    error: str | None = None


class TotalVectorsResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    result: int = Field(default=0, ge=0)
    error: str | None = None


class NamespaceInfo(BaseModel):
    """A backend collection/table normalized to name, size and free-form metadata."""

    model_config = ConfigDict(frozen=True)

    name: str
    count: int = Field(default=0, ge=0)
    metadata: dict[str, Any] = Field(default_factory=dict)


class RawGetResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    ids: list[str] = Field(default_factory=list)
    data: list[dict[str, Any]] = Field(default_factory=list)
    error: str | None = None


class TabularQueryResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: list[dict[str, Any]] = Field(default_factory=list)
    error: str | None = None


class SimilarityResponse(BaseModel):
    """Ranked hits as four parallel lists, best match first."""

    model_config = ConfigDict(frozen=True)

    vector_ids: list[str] = Field(default_factory=list)
    context_texts: list[str] = Field(default_factory=list)
    source_documents: list[dict[str, Any]] = Field(default_factory=list)
    scores: list[float] = Field(default_factory=list)

    @model_validator(mode="after")
    def _parallel_lists(self) -> SimilarityResponse:
        lengths = {
            len(self.vector_ids),
            len(self.context_texts),
            len(self.source_documents),
            len(self.scores),
        }
        if len(lengths) != 1:
            raise ValueError("similarity response lists must have equal length")
        return self

    def __len__(self) -> int:
        return len(self.vector_ids)


class ProcessResult(BaseModel):
    """Outcome of ingesting one document.

    ``vector_count`` is the number of vectors the backend accepted, which can
    be non-zero on failure when a later insert batch failed.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    message: str | None = None
    vector_count: int = Field(default=0, ge=0)
    cause: VectorAdminError | None = Field(default=None, exclude=True)


class DeleteResult(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    error: str | None = None
    cause: VectorAdminError | None = Field(default=None, exclude=True)


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    message: str | None = None


class RegistrationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    connector: OrganizationConnection | None = None
    error: str | None = None
