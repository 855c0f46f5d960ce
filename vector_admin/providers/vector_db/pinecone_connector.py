"""Pinecone connector.

A connection points at a single Pinecone index; namespaces are Pinecone
namespaces inside that index.  Queries return similarity scores, which are
only clamped.
"""

from __future__ import annotations

import json
from typing import Any

import structlog
from pinecone import Pinecone

from vector_admin.models.connector import ConnectorType, PineconeSettings
from vector_admin.models.results import NamespaceInfo, RawGetResult
from vector_admin.models.vectors import VectorRecord
from vector_admin.providers.vector_db.base import BaseVectorConnector, StoredVector
from vector_admin.utils.scoring import ScoreMetric

logger = structlog.get_logger(logger_name=__name__)

# Pinecone caps fetch requests by id count.
_FETCH_LIMIT = 1000


def build_pinecone_client(settings: PineconeSettings) -> Any:
    return Pinecone(api_key=settings.api_key)


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read *name* from an SDK response that may be a mapping or a model."""
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def index_ready(description: Any) -> bool:
    """Return the ``status.ready`` flag of a ``describe_index`` response."""
    return bool(_field(_field(description, "status"), "ready", False))


def _sanitize_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """Pinecone metadata values must be scalars or lists of strings."""
    clean: dict[str, Any] = {}
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, (str, int, float, bool)):
            clean[key] = value
        elif isinstance(value, list) and all(isinstance(v, str) for v in value):
            clean[key] = value
        else:
            clean[key] = json.dumps(value, default=str)
    return clean


class PineconeConnector(BaseVectorConnector):
    connector_type = ConnectorType.PINECONE
    settings_model = PineconeSettings
    score_metric = ScoreMetric.SIMILARITY

    build_client = staticmethod(build_pinecone_client)

    def _is_healthy(self, client: Any) -> bool:
        return index_ready(client.describe_index(self.settings.index))

    def _close_client(self, client: Any) -> None:
        # The REST client holds no session that needs closing.
        return None

    def _index(self, client: Any) -> Any:
        return client.Index(self.settings.index)

    def _namespace_stats(self, client: Any) -> dict[str, Any]:
        stats = self._index(client).describe_index_stats()
        return dict(_field(stats, "namespaces", None) or {})

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _do_total_vectors(self, client: Any) -> int:
        stats = self._index(client).describe_index_stats()
        return int(_field(stats, "total_vector_count", 0) or 0)

    def _do_namespaces(self, client: Any) -> list[NamespaceInfo]:
        return [
            NamespaceInfo(name=name, count=int(_field(summary, "vector_count", 0) or 0))
            for name, summary in self._namespace_stats(client).items()
        ]

    def _do_namespace(self, client: Any, name: str) -> NamespaceInfo | None:
        summary = self._namespace_stats(client).get(name)
        if summary is None:
            return None
        return NamespaceInfo(name=name, count=int(_field(summary, "vector_count", 0) or 0))

    def _do_namespace_exists(self, client: Any, name: str) -> bool:
        return name in self._namespace_stats(client)

    def _do_raw_get(self, client: Any, name: str, page_size: int, offset: int) -> RawGetResult:
        index = self._index(client)
        wanted = offset + page_size
        collected: list[str] = []
        for page in index.list(namespace=name):
            collected.extend(page)
            if len(collected) >= wanted:
                break
        ids = [str(i) for i in collected[offset:wanted]]
        if not ids:
            return RawGetResult()

        fetched = _field(index.fetch(ids=ids, namespace=name), "vectors", None) or {}
        data = []
        for vector_id in ids:
            vector = fetched.get(vector_id)
            if vector is None:
                continue
            data.append(
                {
                    "id": vector_id,
                    "values": list(_field(vector, "values", None) or []),
                    "metadata": dict(_field(vector, "metadata", None) or {}),
                }
            )
        return RawGetResult(ids=[d["id"] for d in data], data=data)

    def _do_insert(self, client: Any, namespace: str, batch: list[VectorRecord]) -> None:
        self._index(client).upsert(
            vectors=[
                {
                    "id": r.id,
                    "values": r.embedding,
                    "metadata": _sanitize_metadata(r.metadata),
                }
                for r in batch
            ],
            namespace=namespace,
        )
        logger.debug("pinecone_batch_upserted", namespace=namespace, count=len(batch))

    def _do_similarity(
        self, client: Any, namespace: str, query_vector: list[float], top_k: int
    ) -> list[StoredVector]:
        response = self._index(client).query(
            vector=query_vector,
            top_k=top_k,
            namespace=namespace,
            include_metadata=True,
        )
        hits = []
        for match in _field(response, "matches", None) or []:
            metadata = dict(_field(match, "metadata", None) or {})
            hits.append(
                StoredVector(
                    id=str(_field(match, "id")),
                    text=metadata.get("text"),
                    metadata=metadata,
                    score=_field(match, "score"),
                )
            )
        return hits

    def _do_get_metadata(self, client: Any, namespace: str, vector_ids: list[str]) -> list[StoredVector]:
        index = self._index(client)
        items: list[StoredVector] = []
        for start in range(0, len(vector_ids), _FETCH_LIMIT):
            ids = vector_ids[start : start + _FETCH_LIMIT]
            fetched = _field(index.fetch(ids=ids, namespace=namespace), "vectors", None) or {}
            for vector_id in ids:
                vector = fetched.get(vector_id)
                if vector is None:
                    continue
                metadata = dict(_field(vector, "metadata", None) or {})
                items.append(StoredVector(id=vector_id, text=metadata.get("text"), metadata=metadata))
        return items

    def _do_delete(self, client: Any, namespace: str, vector_ids: list[str]) -> None:
        self._index(client).delete(ids=vector_ids, namespace=namespace)
