"""Unit tests for ConnectorRegistrationService."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from vector_admin.models.connector import ConnectorType, OrganizationConnection
from vector_admin.models.results import ValidationResult
from vector_admin.services.connector_registration import (
    UNSUPPORTED_TYPE_MESSAGE,
    ConnectorRegistrationService,
)


@pytest.fixture
def repository() -> AsyncMock:
    repo = AsyncMock()
    repo.create.side_effect = lambda org_id, type_, settings: OrganizationConnection(
        id=21, organization_id=org_id, type=type_, settings=settings
    )
    return repo


class TestRegister:
    @pytest.mark.asyncio
    async def test_valid_connection_is_persisted(self, repository: AsyncMock) -> None:
        validator = AsyncMock(return_value=ValidationResult(valid=True))
        service = ConnectorRegistrationService(repository, validator=validator)

        result = await service.register(1, "Qdrant", '{"clusterUrl": "http://q:6333"}')

        assert result.error is None
        assert result.connector.id == 21
        assert result.connector.type is ConnectorType.QDRANT
        validator.assert_awaited_once_with(ConnectorType.QDRANT, {"clusterUrl": "http://q:6333"})
        repository.create.assert_awaited_once_with(
            1, ConnectorType.QDRANT, {"clusterUrl": "http://q:6333"}
        )

    @pytest.mark.asyncio
    async def test_failed_probe_persists_nothing(self, repository: AsyncMock) -> None:
        validator = AsyncMock(
            return_value=ValidationResult(valid=False, message="Milvus::Cluster is not healthy.")
        )
        service = ConnectorRegistrationService(repository, validator=validator)

        result = await service.register(1, "milvus", {"host": "milvus"})

        assert result.connector is None
        assert result.error == "Milvus::Cluster is not healthy."
        repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unsupported_type(self, repository: AsyncMock) -> None:
        validator = AsyncMock()
        service = ConnectorRegistrationService(repository, validator=validator)

        result = await service.register(1, "redis", {})

        assert result.error == UNSUPPORTED_TYPE_MESSAGE
        validator.assert_not_awaited()
        repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_settings(self, repository: AsyncMock) -> None:
        validator = AsyncMock()
        service = ConnectorRegistrationService(repository, validator=validator)

        result = await service.register(1, "chroma", "[1, 2]")

        assert result.connector is None
        assert result.error
        validator.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_default_validator_is_used(
        self, repository: AsyncMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        probe = AsyncMock(return_value=ValidationResult(valid=True))
        monkeypatch.setattr(
            "vector_admin.services.connector_registration.validate_connector", probe
        )
        service = ConnectorRegistrationService(repository)

        result = await service.register(2, "clickhouse", {"host": "ch"})

        assert result.connector.organization_id == 2
        probe.assert_awaited_once()
