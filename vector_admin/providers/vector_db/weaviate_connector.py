"""Weaviate connector (v4 client).

Namespaces are Weaviate collections.  Weaviate requires collection names to
start with an upper-case letter, so namespace names are capitalized on the
way in.  Objects carry two properties: ``text`` and a JSON-encoded
``metadata`` blob.  Near-vector queries return cosine distances, which are
inverted before clamping.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlparse

import structlog
import weaviate
from weaviate.classes.config import Configure, DataType, Property, VectorDistances
from weaviate.classes.data import DataObject
from weaviate.classes.init import Auth
from weaviate.classes.query import Filter, MetadataQuery

from vector_admin.models.connector import ConnectorType, WeaviateSettings
from vector_admin.models.results import NamespaceInfo, RawGetResult
from vector_admin.models.vectors import VectorRecord
from vector_admin.providers.vector_db.base import BaseVectorConnector, StoredVector
from vector_admin.utils.errors import BackendTransportError
from vector_admin.utils.scoring import ScoreMetric

logger = structlog.get_logger(logger_name=__name__)


def build_weaviate_client(settings: WeaviateSettings) -> Any:
    """Connect to Weaviate Cloud when an API key is given over HTTPS, else a custom host."""
    raw_url = settings.cluster_url
    url = urlparse(raw_url if "://" in raw_url else f"http://{raw_url}")
    secure = url.scheme == "https"
    auth = Auth.api_key(settings.api_key) if settings.api_key else None
    if secure and auth is not None:
        return weaviate.connect_to_weaviate_cloud(
            cluster_url=settings.cluster_url,
            auth_credentials=auth,
        )
    host = url.hostname or settings.cluster_url
    return weaviate.connect_to_custom(
        http_host=host,
        http_port=url.port or (443 if secure else 8080),
        http_secure=secure,
        grpc_host=host,
        grpc_port=settings.grpc_port,
        grpc_secure=secure,
        auth_credentials=auth,
    )


def collection_name(namespace: str) -> str:
    return namespace[:1].upper() + namespace[1:]


def _default_vector(vector: Any) -> list[float]:
    if isinstance(vector, dict):
        vector = vector.get("default") or next(iter(vector.values()), None)
    return list(vector or [])


class WeaviateConnector(BaseVectorConnector):
    connector_type = ConnectorType.WEAVIATE
    settings_model = WeaviateSettings
    score_metric = ScoreMetric.DISTANCE

    build_client = staticmethod(build_weaviate_client)

    def _is_healthy(self, client: Any) -> bool:
        return bool(client.is_live())

    @staticmethod
    def _count(client: Any, name: str) -> int:
        aggregate = client.collections.get(name).aggregate.over_all(total_count=True)
        return int(aggregate.total_count or 0)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _do_total_vectors(self, client: Any) -> int:
        return sum(self._count(client, name) for name in client.collections.list_all(simple=True))

    def _do_namespaces(self, client: Any) -> list[NamespaceInfo]:
        return [
            NamespaceInfo(name=name, count=self._count(client, name))
            for name in client.collections.list_all(simple=True)
        ]

    def _do_namespace(self, client: Any, name: str) -> NamespaceInfo | None:
        target = collection_name(name)
        if not client.collections.exists(target):
            return None
        return NamespaceInfo(name=target, count=self._count(client, target))

    def _do_namespace_exists(self, client: Any, name: str) -> bool:
        return bool(client.collections.exists(collection_name(name)))

    def _do_raw_get(self, client: Any, name: str, page_size: int, offset: int) -> RawGetResult:
        collection = client.collections.get(collection_name(name))
        response = collection.query.fetch_objects(
            limit=page_size,
            offset=offset,
            include_vector=True,
        )
        data = [
            {
                "id": str(obj.uuid),
                "properties": dict(obj.properties or {}),
                "vector": _default_vector(obj.vector),
            }
            for obj in response.objects
        ]
        return RawGetResult(ids=[d["id"] for d in data], data=data)

    def _do_prepare_namespace(self, client: Any, namespace: str, dimension: int) -> None:
        target = collection_name(namespace)
        if client.collections.exists(target):
            return
        client.collections.create(
            name=target,
            vectorizer_config=Configure.Vectorizer.none(),
            vector_index_config=Configure.VectorIndex.hnsw(
                distance_metric=VectorDistances.COSINE,
            ),
            properties=[
                Property(name="text", data_type=DataType.TEXT),
                Property(name="metadata", data_type=DataType.TEXT),
            ],
        )
        logger.info("weaviate_collection_created", namespace=target, dimension=dimension)

    def _do_insert(self, client: Any, namespace: str, batch: list[VectorRecord]) -> None:
        collection = client.collections.get(collection_name(namespace))
        result = collection.data.insert_many(
            [
                DataObject(
                    uuid=r.id,
                    vector=r.embedding,
                    properties={
                        "text": r.text,
                        "metadata": json.dumps(r.metadata, default=str),
                    },
                )
                for r in batch
            ]
        )
        if result.has_errors:
            first = next(iter(result.errors.values()))
            raise BackendTransportError(
                message=f"Weaviate rejected {len(result.errors)} objects: {getattr(first, 'message', first)}",
                provider_name=self.get_provider_name(),
            )

    def _do_similarity(
        self, client: Any, namespace: str, query_vector: list[float], top_k: int
    ) -> list[StoredVector]:
        collection = client.collections.get(collection_name(namespace))
        response = collection.query.near_vector(
            near_vector=query_vector,
            limit=top_k,
            return_metadata=MetadataQuery(distance=True),
        )
        hits = []
        for obj in response.objects:
            properties = obj.properties or {}
            hits.append(
                StoredVector(
                    id=str(obj.uuid),
                    text=properties.get("text"),
                    metadata=properties.get("metadata"),
                    score=obj.metadata.distance if obj.metadata is not None else None,
                )
            )
        return hits

    def _do_get_metadata(self, client: Any, namespace: str, vector_ids: list[str]) -> list[StoredVector]:
        collection = client.collections.get(collection_name(namespace))
        response = collection.query.fetch_objects(
            filters=Filter.by_id().contains_any(vector_ids),
            limit=len(vector_ids),
        )
        return [
            StoredVector(
                id=str(obj.uuid),
                text=(obj.properties or {}).get("text"),
                metadata=(obj.properties or {}).get("metadata"),
            )
            for obj in response.objects
        ]

    def _do_delete(self, client: Any, namespace: str, vector_ids: list[str]) -> None:
        collection = client.collections.get(collection_name(namespace))
        collection.data.delete_many(where=Filter.by_id().contains_any(vector_ids))
