"""Qdrant connector.

Namespaces are Qdrant collections.  Collections created here use cosine
similarity, which Qdrant reports as a higher-is-better score.
"""

from __future__ import annotations

from typing import Any

import structlog
from qdrant_client import QdrantClient
from qdrant_client.models import Distance, PointIdsList, PointStruct, VectorParams

from vector_admin.models.connector import ConnectorType, QdrantSettings
from vector_admin.models.results import NamespaceInfo, RawGetResult
from vector_admin.models.vectors import VectorRecord
from vector_admin.providers.vector_db.base import BaseVectorConnector, StoredVector
from vector_admin.utils.scoring import ScoreMetric

logger = structlog.get_logger(logger_name=__name__)


def build_qdrant_client(settings: QdrantSettings) -> QdrantClient:
    return QdrantClient(url=settings.cluster_url, api_key=settings.api_key or None)


class QdrantConnector(BaseVectorConnector):
    connector_type = ConnectorType.QDRANT
    settings_model = QdrantSettings
    score_metric = ScoreMetric.SIMILARITY

    build_client = staticmethod(build_qdrant_client)

    def _is_healthy(self, client: Any) -> bool:
        client.get_collections()
        return True

    @staticmethod
    def _collection_names(client: Any) -> list[str]:
        return [c.name for c in client.get_collections().collections]

    @staticmethod
    def _describe(client: Any, name: str) -> NamespaceInfo:
        info = client.get_collection(collection_name=name)
        status = getattr(info, "status", None)
        return NamespaceInfo(
            name=name,
            count=int(getattr(info, "points_count", 0) or 0),
            metadata={
                "status": getattr(status, "value", status),
                "indexed_vectors_count": getattr(info, "indexed_vectors_count", None),
            },
        )

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _do_total_vectors(self, client: Any) -> int:
        return sum(
            int(client.count(collection_name=name, exact=True).count or 0)
            for name in self._collection_names(client)
        )

    def _do_namespaces(self, client: Any) -> list[NamespaceInfo]:
        return [self._describe(client, name) for name in self._collection_names(client)]

    def _do_namespace(self, client: Any, name: str) -> NamespaceInfo | None:
        return self._describe(client, name)

    def _do_namespace_exists(self, client: Any, name: str) -> bool:
        return bool(client.collection_exists(collection_name=name))

    def _do_raw_get(self, client: Any, name: str, page_size: int, offset: int) -> RawGetResult:
        # Scroll offsets are point ids, not positions; fetch through the page and slice.
        points, _next = client.scroll(
            collection_name=name,
            limit=offset + page_size,
            with_payload=True,
            with_vectors=True,
        )
        data = [
            {
                "id": str(point.id),
                "payload": dict(point.payload or {}),
                "vector": point.vector,
            }
            for point in points[offset : offset + page_size]
        ]
        return RawGetResult(ids=[d["id"] for d in data], data=data)

    def _do_prepare_namespace(self, client: Any, namespace: str, dimension: int) -> None:
        if client.collection_exists(collection_name=namespace):
            return
        client.create_collection(
            collection_name=namespace,
            vectors_config=VectorParams(size=dimension, distance=Distance.COSINE),
        )
        logger.info("qdrant_collection_created", namespace=namespace, dimension=dimension)

    def _do_insert(self, client: Any, namespace: str, batch: list[VectorRecord]) -> None:
        client.upsert(
            collection_name=namespace,
            points=[
                PointStruct(id=r.id, vector=r.embedding, payload=dict(r.metadata)) for r in batch
            ],
            wait=True,
        )

    def _do_similarity(
        self, client: Any, namespace: str, query_vector: list[float], top_k: int
    ) -> list[StoredVector]:
        response = client.query_points(
            collection_name=namespace,
            query=query_vector,
            limit=top_k,
            with_payload=True,
        )
        return [
            StoredVector(
                id=str(point.id),
                text=(point.payload or {}).get("text"),
                metadata=dict(point.payload or {}),
                score=point.score,
            )
            for point in response.points
        ]

    def _do_get_metadata(self, client: Any, namespace: str, vector_ids: list[str]) -> list[StoredVector]:
        points = client.retrieve(collection_name=namespace, ids=vector_ids, with_payload=True)
        return [
            StoredVector(
                id=str(point.id),
                text=(point.payload or {}).get("text"),
                metadata=dict(point.payload or {}),
            )
            for point in points
        ]

    def _do_delete(self, client: Any, namespace: str, vector_ids: list[str]) -> None:
        client.delete(
            collection_name=namespace,
            points_selector=PointIdsList(points=vector_ids),
            wait=True,
        )
