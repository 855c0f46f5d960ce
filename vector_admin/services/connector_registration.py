"""Organization connection registration.

Validates a submitted backend configuration and persists it only when the
probe succeeds.  Mirrors the admin flow: unknown types and failed probes are
reported through ``RegistrationResult.error``; nothing is written for them.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from vector_admin.interfaces.persistence import IOrganizationConnectionRepository
from vector_admin.models.connector import ConnectorType, parse_settings, resolve_connector_type
from vector_admin.models.results import RegistrationResult, ValidationResult
from vector_admin.services.connector_validator import validate_connector
from vector_admin.utils.errors import UnsupportedConnectorError

logger = structlog.get_logger(logger_name=__name__)

UNSUPPORTED_TYPE_MESSAGE = "Unsupported vector database type."

Validator = Callable[[ConnectorType, dict[str, Any]], Awaitable[ValidationResult]]


class ConnectorRegistrationService:
    """Validate-then-persist workflow for new organization connections.

    Parameters
    ----------
    repository:
        Where validated connections are stored.
    validator:
        Liveness probe; defaults to :func:`validate_connector`.
    """

    def __init__(
        self,
        repository: IOrganizationConnectionRepository,
        validator: Validator | None = None,
    ) -> None:
        self._repository = repository
        self._validator = validator or validate_connector

    async def register(
        self,
        organization_id: int,
        connector_type: ConnectorType | str,
        settings: dict[str, Any] | str | None,
    ) -> RegistrationResult:
        try:
            resolved = resolve_connector_type(connector_type)
        except UnsupportedConnectorError:
            return RegistrationResult(error=UNSUPPORTED_TYPE_MESSAGE)

        try:
            raw_settings = parse_settings(settings)
        except ValueError as exc:
            return RegistrationResult(error=str(exc))

        status = await self._validator(resolved, raw_settings)
        if not status.valid:
            logger.info(
                "connector_registration_rejected",
                organization_id=organization_id,
                type=resolved.value,
                reason=status.message,
            )
            return RegistrationResult(error=status.message)

        connection = await self._repository.create(organization_id, resolved, raw_settings)
        logger.info(
            "connector_registered",
            organization_id=organization_id,
            type=resolved.value,
            connection_id=connection.id,
        )
        return RegistrationResult(connector=connection)
