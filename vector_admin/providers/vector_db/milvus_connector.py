"""Milvus connector.

Namespaces are Milvus collections.  Collections created here use the quick
setup schema: a string primary key ``id``, a float vector field ``vector``
with the COSINE metric, and dynamic fields holding ``text`` and a
JSON-encoded ``metadata`` string.  COSINE search results are similarities,
so scores are only clamped.

Milvus only serves reads from collections loaded into memory, so every
query path loads the collection first.
"""

from __future__ import annotations

import json
from typing import Any

import structlog
from pymilvus import DataType, MilvusClient

from vector_admin.models.connector import ConnectorType, MilvusSettings
from vector_admin.models.results import NamespaceInfo, RawGetResult
from vector_admin.models.vectors import VectorRecord
from vector_admin.providers.vector_db.base import BaseVectorConnector, StoredVector
from vector_admin.utils.scoring import ScoreMetric

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_INDEX_DIMENSIONS = 1536
_ID_MAX_LENGTH = 64
_OUTPUT_FIELDS = ["text", "metadata"]


def build_milvus_client(settings: MilvusSettings) -> MilvusClient:
    address = settings.address
    uri = address if "://" in address else f"http://{address}"
    kwargs: dict[str, Any] = {"uri": uri}
    if settings.username and settings.password:
        kwargs["user"] = settings.username
        kwargs["password"] = settings.password
    if settings.token:
        kwargs["token"] = settings.token
    if settings.database:
        kwargs["db_name"] = settings.database
    return MilvusClient(**kwargs)


def _row_count(stats: dict[str, Any]) -> int:
    return int(stats.get("row_count", 0) or 0)


def _is_float_vector(field: dict[str, Any]) -> bool:
    field_type = field.get("type")
    return field_type == DataType.FLOAT_VECTOR or field_type == 101


class MilvusConnector(BaseVectorConnector):
    connector_type = ConnectorType.MILVUS
    settings_model = MilvusSettings
    score_metric = ScoreMetric.SIMILARITY

    build_client = staticmethod(build_milvus_client)

    def _is_healthy(self, client: Any) -> bool:
        client.list_collections()
        return True

    # ------------------------------------------------------------------
    # Milvus-only operations
    # ------------------------------------------------------------------

    async def index_dimensions(self, namespace: str) -> int:
        """Return the vector field dimension of *namespace*, or 1536 if unknown."""
        try:
            return await self._run(self._do_index_dimensions, namespace)
        except Exception as exc:
            self._log_read_failure("index_dimensions", exc, namespace=namespace)
            return DEFAULT_INDEX_DIMENSIONS

    def _do_index_dimensions(self, client: Any, namespace: str) -> int:
        description = client.describe_collection(collection_name=namespace)
        for field in description.get("fields", []):
            if _is_float_vector(field):
                dim = (field.get("params") or {}).get("dim")
                if dim:
                    return int(dim)
        return DEFAULT_INDEX_DIMENSIONS

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _do_total_vectors(self, client: Any) -> int:
        total = 0
        for name in client.list_collections():
            try:
                total += _row_count(client.get_collection_stats(collection_name=name))
            except Exception as exc:
                logger.warning("milvus_collection_stats_failed", namespace=name, error=str(exc))
        return total

    def _do_namespaces(self, client: Any) -> list[NamespaceInfo]:
        namespaces = []
        for name in client.list_collections():
            try:
                namespaces.append(self._describe(client, name))
            except Exception as exc:
                logger.warning("milvus_collection_describe_failed", namespace=name, error=str(exc))
                namespaces.append(NamespaceInfo(name=name))
        return namespaces

    @staticmethod
    def _describe(client: Any, name: str) -> NamespaceInfo:
        stats = client.get_collection_stats(collection_name=name)
        description = client.describe_collection(collection_name=name)
        return NamespaceInfo(
            name=name,
            count=_row_count(stats),
            metadata={
                "description": description.get("description", ""),
                "fields": len(description.get("fields", [])),
            },
        )

    def _do_namespace(self, client: Any, name: str) -> NamespaceInfo | None:
        return self._describe(client, name)

    def _do_namespace_exists(self, client: Any, name: str) -> bool:
        return bool(client.has_collection(collection_name=name))

    def _do_raw_get(self, client: Any, name: str, page_size: int, offset: int) -> RawGetResult:
        client.load_collection(collection_name=name)
        rows = client.query(
            collection_name=name,
            filter="",
            output_fields=["*"],
            limit=page_size,
            offset=offset,
        )
        data = [dict(row) for row in rows]
        return RawGetResult(ids=[str(row.get("id", "")) for row in data], data=data)

    def _do_prepare_namespace(self, client: Any, namespace: str, dimension: int) -> None:
        if not client.has_collection(collection_name=namespace):
            client.create_collection(
                collection_name=namespace,
                dimension=dimension,
                primary_field_name="id",
                id_type="string",
                max_length=_ID_MAX_LENGTH,
                vector_field_name="vector",
                metric_type="COSINE",
                auto_id=False,
                enable_dynamic_field=True,
            )
            logger.info("milvus_collection_created", namespace=namespace, dimension=dimension)
        client.load_collection(collection_name=namespace)

    def _do_insert(self, client: Any, namespace: str, batch: list[VectorRecord]) -> None:
        client.insert(
            collection_name=namespace,
            data=[
                {
                    "id": r.id,
                    "vector": r.embedding,
                    "text": r.metadata.get("text", r.text) or "",
                    "metadata": json.dumps(r.metadata, default=str),
                }
                for r in batch
            ],
        )

    def _do_similarity(
        self, client: Any, namespace: str, query_vector: list[float], top_k: int
    ) -> list[StoredVector]:
        client.load_collection(collection_name=namespace)
        results = client.search(
            collection_name=namespace,
            data=[query_vector],
            limit=top_k,
            output_fields=_OUTPUT_FIELDS,
        )
        hits = results[0] if results else []
        stored = []
        for hit in hits:
            entity = hit.get("entity") or {}
            stored.append(
                StoredVector(
                    id=str(hit.get("id")),
                    text=entity.get("text"),
                    metadata=entity.get("metadata"),
                    score=hit.get("distance"),
                )
            )
        return stored

    def _do_get_metadata(self, client: Any, namespace: str, vector_ids: list[str]) -> list[StoredVector]:
        client.load_collection(collection_name=namespace)
        rows = client.get(collection_name=namespace, ids=vector_ids, output_fields=_OUTPUT_FIELDS)
        return [
            StoredVector(id=str(row.get("id")), text=row.get("text"), metadata=row.get("metadata"))
            for row in rows
        ]

    def _do_delete(self, client: Any, namespace: str, vector_ids: list[str]) -> None:
        client.delete(collection_name=namespace, ids=vector_ids)
