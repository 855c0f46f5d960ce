"""Pre-registration liveness probes for new backend connections.

Before an organization connection is persisted, the submitted settings are
used to open a real client and run one backend-native health check.  Each
probe reports ``ValidationResult(valid, message)`` and never raises: a
malformed setting, a refused connection and an unhealthy cluster all come
back as ``valid=False`` with a human-readable message for the admin UI.

Probes reuse the connectors' client builders, so a connection that validates
here is opened the same way by the connector later on.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import structlog

from vector_admin.models.connector import (
    ChromaSettings,
    ClickHouseSettings,
    ConnectorType,
    MilvusSettings,
    PineconeSettings,
    QdrantSettings,
    WeaviateSettings,
    parse_settings,
    resolve_connector_type,
)
from vector_admin.models.results import ValidationResult
from vector_admin.providers.vector_db.base import parse_connector_settings
from vector_admin.providers.vector_db.chroma_connector import build_chroma_client
from vector_admin.providers.vector_db.clickhouse_connector import build_clickhouse_client
from vector_admin.providers.vector_db.milvus_connector import build_milvus_client
from vector_admin.providers.vector_db.pinecone_connector import build_pinecone_client, index_ready
from vector_admin.providers.vector_db.qdrant_connector import build_qdrant_client
from vector_admin.providers.vector_db.weaviate_connector import build_weaviate_client
from vector_admin.utils.errors import ValidationError, VectorAdminError

logger = structlog.get_logger(logger_name=__name__)

CHROMA_MISSING_HEADER = "Auth token set but no request header set - set a header!"

_FALLBACK_MESSAGES: dict[ConnectorType, str] = {
    ConnectorType.CHROMA: "Could not connect to Chroma instance with those credentials.",
    ConnectorType.PINECONE: "Could not connect to Pinecone index with those credentials.",
    ConnectorType.QDRANT: "Could not connect to qDrant cluster with those credentials.",
    ConnectorType.WEAVIATE: "Could not connect to Weaviate cluster with those credentials.",
    ConnectorType.MILVUS: "Could not connect to Milvus instance.",
    ConnectorType.CLICKHOUSE: "Could not connect to ClickHouse instance.",
}


def _close_quietly(client: Any) -> None:
    close = getattr(client, "close", None)
    if callable(close):
        try:
            close()
        except Exception as exc:
            logger.debug("validator_close_failed", error=str(exc))


# ------------------------------------------------------------------
# Per-backend probes.  Each raises ValidationError with the message shown
# to the operator; validate_connector turns it into a ValidationResult.
# ------------------------------------------------------------------


def validate_chroma(settings: ChromaSettings) -> None:
    client = build_chroma_client(settings)
    client.heartbeat()


def validate_pinecone(settings: PineconeSettings) -> None:
    client = build_pinecone_client(settings)
    if not index_ready(client.describe_index(settings.index)):
        raise ValidationError("Pinecone::Index not ready or found.", provider_name="pinecone")


def validate_qdrant(settings: QdrantSettings) -> None:
    client = build_qdrant_client(settings)
    try:
        response = client.get_collections()
    finally:
        _close_quietly(client)
    if response is None:
        raise ValidationError("qDrant::Cluster not ready or found.", provider_name="qdrant")


def validate_weaviate(settings: WeaviateSettings) -> None:
    client = build_weaviate_client(settings)
    try:
        if not client.is_live():
            raise ValidationError("Weaviate::Cluster not ready.", provider_name="weaviate")
    finally:
        _close_quietly(client)


def validate_milvus(settings: MilvusSettings) -> None:
    client = build_milvus_client(settings)
    try:
        collections = client.list_collections()
    finally:
        _close_quietly(client)
    if collections is None:
        raise ValidationError("Milvus::Cluster is not healthy.", provider_name="milvus")


def validate_clickhouse(settings: ClickHouseSettings) -> None:
    client = build_clickhouse_client(settings)
    try:
        healthy = client.ping()
    finally:
        _close_quietly(client)
    if not healthy:
        raise ValidationError("ClickHouse::Ping failed.", provider_name="clickhouse")


_PROBES: dict[ConnectorType, tuple[type, Callable[[Any], None]]] = {
    ConnectorType.CHROMA: (ChromaSettings, validate_chroma),
    ConnectorType.PINECONE: (PineconeSettings, validate_pinecone),
    ConnectorType.QDRANT: (QdrantSettings, validate_qdrant),
    ConnectorType.WEAVIATE: (WeaviateSettings, validate_weaviate),
    ConnectorType.MILVUS: (MilvusSettings, validate_milvus),
    ConnectorType.CLICKHOUSE: (ClickHouseSettings, validate_clickhouse),
}


async def validate_connector(
    connector_type: ConnectorType | str,
    settings: dict[str, Any] | str | None,
) -> ValidationResult:
    """Probe a prospective connection.  Performs no persistence.

    Parameters
    ----------
    connector_type:
        Backend type tag.  Unknown tags are reported as invalid.
    settings:
        Submitted backend settings as a dict or JSON string.
    """
    try:
        resolved = resolve_connector_type(connector_type)
        raw = parse_settings(settings)
        settings_model, probe = _PROBES[resolved]
        parsed = parse_connector_settings(settings_model, raw, resolved.value)
    except (VectorAdminError, ValueError) as exc:
        message = exc.message if isinstance(exc, VectorAdminError) else str(exc)
        return ValidationResult(valid=False, message=message)

    if (
        resolved is ConnectorType.CHROMA
        and parsed.auth_token
        and not parsed.auth_token_header
    ):
        return ValidationResult(valid=False, message=CHROMA_MISSING_HEADER)

    try:
        await asyncio.to_thread(probe, parsed)
    except ValidationError as exc:
        logger.info("connector_validation_failed", type=resolved.value, reason=exc.message)
        return ValidationResult(valid=False, message=exc.message)
    except Exception as exc:
        message = str(exc) or _FALLBACK_MESSAGES[resolved]
        logger.info("connector_validation_failed", type=resolved.value, reason=message)
        return ValidationResult(valid=False, message=message)

    logger.info("connector_validated", type=resolved.value)
    return ValidationResult(valid=True)
