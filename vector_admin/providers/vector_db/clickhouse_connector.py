"""ClickHouse connector.

ClickHouse is an OLAP store, not a vector database.  The connector exists so
operators can browse tables (jobs, metrics, logs) through the same interface
as the vector backends: tables are namespaces, row counts come from the
system tables, and ``raw_get`` pages through rows.  Document ingestion is
refused and similarity queries return an empty response.

All values reach the server as bound query parameters; table names are bound
with the ``Identifier`` type.
"""

from __future__ import annotations

from typing import Any

import clickhouse_connect
import structlog

from vector_admin.models.connector import ClickHouseSettings, ConnectorType
from vector_admin.models.results import (
    NamespaceInfo,
    ProcessResult,
    RawGetResult,
    SimilarityResponse,
    TabularQueryResult,
)
from vector_admin.models.vectors import VectorRecord, WorkspaceDocument
from vector_admin.providers.vector_db.base import BaseVectorConnector, StoredVector
from vector_admin.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)

NOT_A_VECTOR_DATABASE = "ClickHouse is not a vector database - document processing not supported"

_TOTAL_ROWS_SQL = (
    "SELECT sum(rows) AS total FROM system.parts WHERE database = {db:String} AND active = 1"
)
_TABLES_SQL = (
    "SELECT name, total_rows, total_bytes, engine FROM system.tables "
    "WHERE database = {db:String} ORDER BY name"
)
_TABLE_SQL = (
    "SELECT name, total_rows, total_bytes, engine, create_table_query FROM system.tables "
    "WHERE database = {db:String} AND name = {table:String}"
)
_COLUMNS_SQL = (
    "SELECT name, type, default_kind, default_expression FROM system.columns "
    "WHERE database = {db:String} AND table = {table:String}"
)
_TABLE_EXISTS_SQL = "SELECT 1 FROM system.tables WHERE database = {db:String} AND name = {table:String}"
_PAGE_SQL = "SELECT * FROM {db:Identifier}.{table:Identifier} LIMIT {limit:UInt64} OFFSET {offset:UInt64}"
_ROWS_BY_ID_SQL = "SELECT * FROM {db:Identifier}.{table:Identifier} WHERE id IN {ids:Array(String)}"
_DELETE_BY_ID_SQL = "ALTER TABLE {db:Identifier}.{table:Identifier} DELETE WHERE id IN {ids:Array(String)}"


def build_clickhouse_client(settings: ClickHouseSettings) -> Any:
    return clickhouse_connect.get_client(
        host=settings.host,
        port=settings.port,
        username=settings.username,
        password=settings.password,
        database=settings.database,
    )


def _rows(result: Any) -> list[dict[str, Any]]:
    return [dict(row) for row in result.named_results()]


class ClickHouseConnector(BaseVectorConnector):
    connector_type = ConnectorType.CLICKHOUSE
    settings_model = ClickHouseSettings

    build_client = staticmethod(build_clickhouse_client)

    def _is_healthy(self, client: Any) -> bool:
        return bool(client.ping())

    def _params(self, **extra: Any) -> dict[str, Any]:
        return {"db": self.settings.database, **extra}

    # ------------------------------------------------------------------
    # ClickHouse-only operations
    # ------------------------------------------------------------------

    async def execute_query(self, query: str) -> TabularQueryResult:
        """Run an arbitrary read query and return its rows as dicts."""
        try:
            rows = await self._run(self._do_execute_query, query)
        except Exception as exc:
            self._log_read_failure("execute_query", exc)
            return TabularQueryResult(error=str(exc))
        return TabularQueryResult(data=rows)

    def _do_execute_query(self, client: Any, query: str) -> list[dict[str, Any]]:
        return _rows(client.query(query))

    async def process_document(
        self,
        namespace: str,
        document: dict[str, Any],
        embedder_key: str,
        workspace_document: WorkspaceDocument,
    ) -> ProcessResult:
        cause = ConfigurationError(NOT_A_VECTOR_DATABASE, provider_name=self.get_provider_name())
        return ProcessResult(success=False, message=NOT_A_VECTOR_DATABASE, cause=cause)

    async def similarity_response(
        self,
        namespace: str,
        query_vector: list[float],
        top_k: int = 4,
    ) -> SimilarityResponse:
        return SimilarityResponse()

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _do_total_vectors(self, client: Any) -> int:
        rows = _rows(client.query(_TOTAL_ROWS_SQL, parameters=self._params()))
        return int(rows[0].get("total") or 0) if rows else 0

    def _do_namespaces(self, client: Any) -> list[NamespaceInfo]:
        return [
            NamespaceInfo(
                name=table["name"],
                count=int(table.get("total_rows") or 0),
                metadata={
                    "engine": table.get("engine"),
                    "bytes": int(table.get("total_bytes") or 0),
                },
            )
            for table in _rows(client.query(_TABLES_SQL, parameters=self._params()))
        ]

    def _do_namespace(self, client: Any, name: str) -> NamespaceInfo | None:
        tables = _rows(client.query(_TABLE_SQL, parameters=self._params(table=name)))
        if not tables:
            return None
        table = tables[0]
        columns = _rows(client.query(_COLUMNS_SQL, parameters=self._params(table=name)))
        return NamespaceInfo(
            name=name,
            count=int(table.get("total_rows") or 0),
            metadata={
                "engine": table.get("engine"),
                "bytes": int(table.get("total_bytes") or 0),
                "columns": columns,
                "createQuery": table.get("create_table_query"),
            },
        )

    def _do_namespace_exists(self, client: Any, name: str) -> bool:
        return bool(_rows(client.query(_TABLE_EXISTS_SQL, parameters=self._params(table=name))))

    def _do_raw_get(self, client: Any, name: str, page_size: int, offset: int) -> RawGetResult:
        rows = _rows(
            client.query(
                _PAGE_SQL,
                parameters=self._params(table=name, limit=page_size, offset=offset),
            )
        )
        ids = [
            str(row.get("id") or row.get("_id") or f"row_{offset + i}")
            for i, row in enumerate(rows)
        ]
        return RawGetResult(ids=ids, data=rows)

    def _do_insert(self, client: Any, namespace: str, batch: list[VectorRecord]) -> None:
        raise ConfigurationError(NOT_A_VECTOR_DATABASE, provider_name=self.get_provider_name())

    def _do_similarity(
        self, client: Any, namespace: str, query_vector: list[float], top_k: int
    ) -> list[StoredVector]:
        return []

    def _do_get_metadata(self, client: Any, namespace: str, vector_ids: list[str]) -> list[StoredVector]:
        rows = _rows(
            client.query(_ROWS_BY_ID_SQL, parameters=self._params(table=namespace, ids=vector_ids))
        )
        return [StoredVector(id=str(row.get("id")), text=row.get("text"), metadata=row) for row in rows]

    def _do_delete(self, client: Any, namespace: str, vector_ids: list[str]) -> None:
        client.command(_DELETE_BY_ID_SQL, parameters=self._params(table=namespace, ids=vector_ids))
