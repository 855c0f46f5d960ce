"""Shared connector behaviour: scoped clients, fail-open reads and ingestion.

Every backend connector subclasses :class:`BaseVectorConnector` and only
implements small synchronous ``_do_*`` hooks that speak the backend SDK.  The
public async operations defined here wrap those hooks so that, for every
backend:

* each operation opens a fresh client through :meth:`connect` and closes it
  in a ``finally`` block, including on error paths;
* blocking SDK calls run in a worker thread via :func:`asyncio.to_thread`;
* read operations log failures and return empty results instead of raising;
* mutations return an explicit success flag with a typed ``cause``;
* similarity scores are mapped into ``[0, 1]`` using the connector's
  declared :class:`~vector_admin.utils.scoring.ScoreMetric`.
"""

from __future__ import annotations

import asyncio
import json
from abc import abstractmethod
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any, ClassVar, NamedTuple

import pydantic
import structlog

from vector_admin.interfaces.vector_database_connector import IVectorDatabaseConnector
from vector_admin.models.connector import ConnectorType, OrganizationConnection
from vector_admin.models.results import (
    DeleteResult,
    HeartbeatResult,
    NamespaceInfo,
    ProcessResult,
    RawGetResult,
    SimilarityResponse,
    TotalVectorsResult,
)
from vector_admin.models.vectors import VectorRecord, WorkspaceDocument
from vector_admin.services.ingestion.pipeline import DocumentIngestionPipeline
from vector_admin.utils.errors import (
    BackendTransportError,
    ConfigurationError,
    MissingArgumentError,
    VectorAdminError,
)
from vector_admin.utils.scoring import ScoreMetric, distance_to_score

logger = structlog.get_logger(logger_name=__name__)

_SettingsT = pydantic.BaseModel


class StoredVector(NamedTuple):
    """One item as read back from a backend, before metadata decoding."""

    id: str
    text: str | None
    metadata: Any
    score: float | None = None


def parse_connector_settings(
    model: type[_SettingsT], raw: dict[str, Any], provider_name: str
) -> _SettingsT:
    """Validate raw connection settings into *model*.

    Raises
    ------
    ConfigurationError
        If required keys are missing or malformed.
    """
    try:
        return model.model_validate(raw)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "settings"
        raise ConfigurationError(
            message=f"Invalid {provider_name} settings: {field} {first.get('msg', 'is invalid')}",
            provider_name=provider_name,
        ) from exc


def parse_metadata(raw: Any, text: str | None = None) -> dict[str, Any]:
    """Decode stored metadata into a dict.

    Dicts pass through, JSON strings are decoded, and anything that does not
    decode to an object degrades to ``{"text": text}``.
    """
    if raw is None or raw == "":
        return {}
    if isinstance(raw, dict):
        return dict(raw)
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            return {"text": text or ""}
        if isinstance(decoded, dict):
            return decoded
    return {"text": text or ""}


class BaseVectorConnector(IVectorDatabaseConnector):
    """Template for backend connectors.

    Parameters
    ----------
    connection:
        The organization's persisted connection record.
    client_factory:
        Builds a backend client from the parsed settings.  Defaults to the
        connector's SDK builder; tests inject fakes here.
    pipeline:
        Ingestion pipeline used by :meth:`process_document`.  Connectors
        built without one can still read, query and delete.
    """

    connector_type: ClassVar[ConnectorType]
    settings_model: ClassVar[type[pydantic.BaseModel]]
    score_metric: ClassVar[ScoreMetric] = ScoreMetric.SIMILARITY

    def __init__(
        self,
        connection: OrganizationConnection,
        *,
        client_factory: Callable[[Any], Any] | None = None,
        pipeline: DocumentIngestionPipeline | None = None,
    ) -> None:
        self._connection = connection
        self._client_factory = client_factory or self.build_client
        self._pipeline = pipeline
        self._settings: Any = None

    @property
    def connection(self) -> OrganizationConnection:
        return self._connection

    @property
    def settings(self) -> Any:
        """Typed backend settings, parsed on first access."""
        if self._settings is None:
            self._settings = parse_connector_settings(
                self.settings_model, self._connection.settings, self.get_provider_name()
            )
        return self._settings

    def get_provider_name(self) -> str:
        return self.connector_type.value

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------

    @staticmethod
    @abstractmethod
    def build_client(settings: Any) -> Any:
        """Construct the backend SDK client from parsed settings."""

    def _is_healthy(self, client: Any) -> bool:
        """Backend-native health probe, run once per :meth:`connect`."""
        return True

    def _close_client(self, client: Any) -> None:
        close = getattr(client, "close", None)
        if callable(close):
            close()

    async def connect(self) -> Any:
        if self._connection.type is not self.connector_type:
            raise ConfigurationError(
                message=(
                    f"Connection type '{self._connection.type.value}' does not match "
                    f"connector '{self.connector_type.value}'"
                ),
                provider_name=self.get_provider_name(),
            )
        settings = self.settings

        try:
            client = await asyncio.to_thread(self._client_factory, settings)
        except VectorAdminError:
            raise
        except Exception as exc:
            raise self._transport_error(exc) from exc

        try:
            healthy = await asyncio.to_thread(self._is_healthy, client)
        except Exception as exc:
            await self._release(client)
            raise self._transport_error(exc) from exc
        if not healthy:
            await self._release(client)
            raise BackendTransportError(
                message="Backend reported unhealthy status",
                provider_name=self.get_provider_name(),
            )
        return client

    async def _release(self, client: Any) -> None:
        try:
            await asyncio.to_thread(self._close_client, client)
        except Exception as exc:
            logger.debug("connector_close_failed", provider=self.get_provider_name(), error=str(exc))

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[Any]:
        client = await self.connect()
        try:
            yield client
        finally:
            await self._release(client)

    def _transport_error(self, exc: BaseException) -> VectorAdminError:
        if isinstance(exc, VectorAdminError):
            return exc
        return BackendTransportError(
            message=str(exc) or type(exc).__name__,
            provider_name=self.get_provider_name(),
        )

    async def _run(self, hook: Callable[..., Any], *args: Any) -> Any:
        async with self._session() as client:
            return await asyncio.to_thread(hook, client, *args)

    def _log_read_failure(self, operation: str, exc: BaseException, **fields: Any) -> None:
        logger.warning(
            "connector_read_failed",
            provider=self.get_provider_name(),
            operation=operation,
            error=str(exc),
            **fields,
        )

    # ------------------------------------------------------------------
    # Backend hooks (synchronous, executed in a worker thread)
    # ------------------------------------------------------------------

    @abstractmethod
    def _do_total_vectors(self, client: Any) -> int: ...

    @abstractmethod
    def _do_namespaces(self, client: Any) -> list[NamespaceInfo]: ...

    @abstractmethod
    def _do_namespace(self, client: Any, name: str) -> NamespaceInfo | None: ...

    @abstractmethod
    def _do_namespace_exists(self, client: Any, name: str) -> bool: ...

    @abstractmethod
    def _do_raw_get(self, client: Any, name: str, page_size: int, offset: int) -> RawGetResult: ...

    def _do_prepare_namespace(self, client: Any, namespace: str, dimension: int) -> None:
        """Create the target namespace if the backend needs it to exist before inserts."""

    @abstractmethod
    def _do_insert(self, client: Any, namespace: str, batch: list[VectorRecord]) -> None: ...

    @abstractmethod
    def _do_similarity(
        self, client: Any, namespace: str, query_vector: list[float], top_k: int
    ) -> list[StoredVector]: ...

    @abstractmethod
    def _do_get_metadata(self, client: Any, namespace: str, vector_ids: list[str]) -> list[StoredVector]: ...

    @abstractmethod
    def _do_delete(self, client: Any, namespace: str, vector_ids: list[str]) -> None: ...

    # ------------------------------------------------------------------
    # Read operations (fail open)
    # ------------------------------------------------------------------

    async def heartbeat(self) -> HeartbeatResult:
        try:
            async with self._session():
                return HeartbeatResult(result=True)
        except Exception as exc:
            self._log_read_failure("heartbeat", exc)
            return HeartbeatResult(result=False, error=str(exc))

    async def total_indicies(self) -> TotalVectorsResult:
        try:
            total = await self._run(self._do_total_vectors)
        except Exception as exc:
            self._log_read_failure("total_indicies", exc)
            return TotalVectorsResult(result=0, error=str(exc))
        return TotalVectorsResult(result=max(int(total or 0), 0))

    async def namespaces(self) -> list[NamespaceInfo]:
        try:
            return await self._run(self._do_namespaces)
        except Exception as exc:
            self._log_read_failure("namespaces", exc)
            return []

    async def namespace(self, name: str | None = None) -> NamespaceInfo | None:
        if not name:
            raise MissingArgumentError(provider_name=self.get_provider_name())
        try:
            return await self._run(self._do_namespace, name)
        except Exception as exc:
            self._log_read_failure("namespace", exc, namespace=name)
            return None

    async def namespace_exists(self, name: str | None = None) -> bool:
        if not name:
            raise MissingArgumentError(provider_name=self.get_provider_name())
        try:
            return bool(await self._run(self._do_namespace_exists, name))
        except Exception as exc:
            self._log_read_failure("namespace_exists", exc, namespace=name)
            return False

    async def raw_get(self, name: str, page_size: int = 10, offset: int = 0) -> RawGetResult:
        try:
            return await self._run(self._do_raw_get, name, page_size, offset)
        except Exception as exc:
            self._log_read_failure("raw_get", exc, namespace=name)
            return RawGetResult(error=str(exc))

    async def similarity_response(
        self,
        namespace: str,
        query_vector: list[float],
        top_k: int = 4,
    ) -> SimilarityResponse:
        if top_k <= 0:
            return SimilarityResponse()
        try:
            hits = await self._run(self._do_similarity, namespace, list(query_vector), top_k)
        except Exception as exc:
            self._log_read_failure("similarity_response", exc, namespace=namespace)
            return SimilarityResponse()

        vector_ids: list[str] = []
        context_texts: list[str] = []
        source_documents: list[dict[str, Any]] = []
        scores: list[float] = []
        for hit in hits[:top_k]:
            metadata = parse_metadata(hit.metadata, hit.text)
            vector_ids.append(str(hit.id))
            context_texts.append(hit.text or str(metadata.get("text", "")))
            source_documents.append(metadata)
            scores.append(distance_to_score(hit.score, self.score_metric))
        return SimilarityResponse(
            vector_ids=vector_ids,
            context_texts=context_texts,
            source_documents=source_documents,
            scores=scores,
        )

    async def get_metadata(self, namespace: str, vector_ids: list[str]) -> list[dict[str, Any]]:
        if not vector_ids:
            return []
        try:
            items = await self._run(self._do_get_metadata, namespace, list(vector_ids))
        except Exception as exc:
            self._log_read_failure("get_metadata", exc, namespace=namespace)
            return []

        results: list[dict[str, Any]] = []
        for item in items:
            metadata = parse_metadata(item.metadata, item.text)
            results.append(
                {
                    **metadata,
                    "vectorId": str(item.id),
                    "text": item.text or metadata.get("text", ""),
                }
            )
        return results

    # ------------------------------------------------------------------
    # Mutations (explicit success / typed cause)
    # ------------------------------------------------------------------

    async def process_document(
        self,
        namespace: str,
        document: dict[str, Any],
        embedder_key: str,
        workspace_document: WorkspaceDocument,
    ) -> ProcessResult:
        provider = self.get_provider_name()
        if self._pipeline is None:
            cause = ConfigurationError("No ingestion pipeline configured", provider_name=provider)
            return ProcessResult(success=False, message=cause.message, cause=cause)

        inserted = 0
        try:
            records = await self._pipeline.prepare_records(document, embedder_key)
            async with self._session() as client:
                await asyncio.to_thread(
                    self._do_prepare_namespace, client, namespace, len(records[0].embedding)
                )
                for batch in self._pipeline.batches(records):
                    await asyncio.to_thread(self._do_insert, client, namespace, batch)
                    inserted += len(batch)
                    await self._pipeline.record_batch(batch, workspace_document)
            await self._pipeline.write_cache(records, workspace_document)
        except Exception as exc:
            cause = self._transport_error(exc)
            logger.warning(
                "process_document_failed",
                provider=provider,
                namespace=namespace,
                doc_id=workspace_document.doc_id,
                vectors_inserted=inserted,
                error_type=type(cause).__name__,
                error=str(cause),
            )
            return ProcessResult(
                success=False, message=cause.message, vector_count=inserted, cause=cause
            )

        logger.info(
            "document_processed",
            provider=provider,
            namespace=namespace,
            doc_id=workspace_document.doc_id,
            vector_count=inserted,
        )
        return ProcessResult(success=True, vector_count=inserted)

    async def delete_vectors(self, namespace: str, vector_ids: list[str]) -> DeleteResult:
        if not vector_ids:
            return DeleteResult(success=True)
        try:
            await self._run(self._do_delete, namespace, list(vector_ids))
        except Exception as exc:
            cause = self._transport_error(exc)
            logger.warning(
                "delete_vectors_failed",
                provider=self.get_provider_name(),
                namespace=namespace,
                count=len(vector_ids),
                error=str(cause),
            )
            return DeleteResult(success=False, error=cause.message, cause=cause)
        return DeleteResult(success=True)
