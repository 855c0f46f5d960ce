"""ChromaDB connector.

Talks to a remote Chroma server through ``chromadb.HttpClient``.  Collections
are created with cosine distance, so query results come back as distances
and are inverted before clamping.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlparse

import chromadb
import structlog
from chromadb.config import Settings as ChromaClientSettings

from vector_admin.models.connector import ChromaSettings, ConnectorType
from vector_admin.models.results import NamespaceInfo, RawGetResult
from vector_admin.models.vectors import VectorRecord
from vector_admin.providers.vector_db.base import BaseVectorConnector, StoredVector
from vector_admin.utils.scoring import ScoreMetric

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_HTTP_PORT = 8000
_DEFAULT_HTTPS_PORT = 443


def build_chroma_client(settings: ChromaSettings) -> Any:
    """Create an HTTP client for the configured instance URL."""
    url = urlparse(settings.instance_url)
    ssl = url.scheme == "https"
    host = url.hostname or settings.instance_url
    port = url.port or (_DEFAULT_HTTPS_PORT if ssl else _DEFAULT_HTTP_PORT)
    headers = None
    if settings.auth_token and settings.auth_token_header:
        headers = {settings.auth_token_header: settings.auth_token}
    return chromadb.HttpClient(
        host=host,
        port=port,
        ssl=ssl,
        headers=headers,
        settings=ChromaClientSettings(anonymized_telemetry=False),
    )


def _flatten_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """Chroma accepts only scalar metadata values; encode the rest as JSON."""
    flat: dict[str, Any] = {}
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, (str, int, float, bool)):
            flat[key] = value
        else:
            flat[key] = json.dumps(value, default=str)
    return flat


def _first_row(result: dict[str, Any], key: str) -> list[Any]:
    rows = result.get(key)
    if rows is None or len(rows) == 0:
        return []
    row = rows[0]
    return list(row) if row is not None else []


class ChromaConnector(BaseVectorConnector):
    connector_type = ConnectorType.CHROMA
    settings_model = ChromaSettings
    score_metric = ScoreMetric.DISTANCE

    build_client = staticmethod(build_chroma_client)

    def _is_healthy(self, client: Any) -> bool:
        return bool(client.heartbeat())

    def _close_client(self, client: Any) -> None:
        # HttpClient keeps no connection open between calls.
        return None

    @staticmethod
    def _collection_names(client: Any) -> list[str]:
        return [
            item if isinstance(item, str) else item.name for item in client.list_collections()
        ]

    @staticmethod
    def _describe(collection: Any) -> NamespaceInfo:
        return NamespaceInfo(
            name=collection.name,
            count=collection.count(),
            metadata=dict(collection.metadata or {}),
        )

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _do_total_vectors(self, client: Any) -> int:
        return sum(client.get_collection(name).count() for name in self._collection_names(client))

    def _do_namespaces(self, client: Any) -> list[NamespaceInfo]:
        return [
            self._describe(client.get_collection(name)) for name in self._collection_names(client)
        ]

    def _do_namespace(self, client: Any, name: str) -> NamespaceInfo | None:
        return self._describe(client.get_collection(name))

    def _do_namespace_exists(self, client: Any, name: str) -> bool:
        return name in self._collection_names(client)

    def _do_raw_get(self, client: Any, name: str, page_size: int, offset: int) -> RawGetResult:
        collection = client.get_collection(name)
        result = collection.get(
            limit=page_size,
            offset=offset,
            include=["documents", "metadatas", "embeddings"],
        )
        ids = [str(i) for i in result.get("ids") or []]
        documents = result.get("documents") or [None] * len(ids)
        metadatas = result.get("metadatas") or [None] * len(ids)
        embeddings = result.get("embeddings")
        if embeddings is None:
            embeddings = [None] * len(ids)

        data = []
        for vector_id, document, metadata, embedding in zip(ids, documents, metadatas, embeddings):
            data.append(
                {
                    "id": vector_id,
                    "document": document,
                    "metadata": dict(metadata or {}),
                    "values": [float(v) for v in embedding] if embedding is not None else [],
                }
            )
        return RawGetResult(ids=ids, data=data)

    def _do_prepare_namespace(self, client: Any, namespace: str, dimension: int) -> None:
        client.get_or_create_collection(
            name=namespace,
            metadata={"hnsw:space": "cosine"},
            embedding_function=None,
        )

    def _do_insert(self, client: Any, namespace: str, batch: list[VectorRecord]) -> None:
        collection = client.get_collection(namespace, embedding_function=None)
        collection.add(
            ids=[r.id for r in batch],
            embeddings=[r.embedding for r in batch],
            metadatas=[_flatten_metadata(r.metadata) for r in batch],
            documents=[r.text for r in batch],
        )
        logger.debug("chroma_batch_inserted", namespace=namespace, count=len(batch))

    def _do_similarity(
        self, client: Any, namespace: str, query_vector: list[float], top_k: int
    ) -> list[StoredVector]:
        collection = client.get_collection(namespace, embedding_function=None)
        result = collection.query(
            query_embeddings=[query_vector],
            n_results=top_k,
            include=["documents", "metadatas", "distances"],
        )
        ids = _first_row(result, "ids")
        documents = _first_row(result, "documents") or [None] * len(ids)
        metadatas = _first_row(result, "metadatas") or [None] * len(ids)
        distances = _first_row(result, "distances") or [None] * len(ids)
        return [
            StoredVector(id=str(i), text=doc, metadata=meta, score=dist)
            for i, doc, meta, dist in zip(ids, documents, metadatas, distances)
        ]

    def _do_get_metadata(self, client: Any, namespace: str, vector_ids: list[str]) -> list[StoredVector]:
        collection = client.get_collection(namespace, embedding_function=None)
        result = collection.get(ids=vector_ids, include=["documents", "metadatas"])
        ids = result.get("ids") or []
        documents = result.get("documents") or [None] * len(ids)
        metadatas = result.get("metadatas") or [None] * len(ids)
        return [
            StoredVector(id=str(i), text=doc, metadata=meta)
            for i, doc, meta in zip(ids, documents, metadatas)
        ]

    def _do_delete(self, client: Any, namespace: str, vector_ids: list[str]) -> None:
        client.get_collection(namespace, embedding_function=None).delete(ids=vector_ids)
