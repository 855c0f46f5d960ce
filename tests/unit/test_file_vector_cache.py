"""Unit tests for FileVectorCacheStore."""

from __future__ import annotations

import json

import pytest

from vector_admin.models.vectors import CacheEntry
from vector_admin.providers.cache.file_vector_cache import FileVectorCacheStore


@pytest.fixture
def store(tmp_path) -> FileVectorCacheStore:  # noqa: ANN001
    return FileVectorCacheStore(directory=tmp_path / "vector-cache")


def _entries() -> list[CacheEntry]:
    return [
        CacheEntry(vector_db_id="v1", values=[0.1, 0.2], metadata={"text": "a"}),
        CacheEntry(vector_db_id="v2", values=[0.3, 0.4], metadata={"text": "b"}),
    ]


class TestFileVectorCacheStore:
    @pytest.mark.asyncio
    async def test_store_writes_camel_case_json(self, store, tmp_path) -> None:  # noqa: ANN001
        await store.store_vector_result(_entries(), "4-doc-1.json")

        path = tmp_path / "vector-cache" / "4-doc-1.json"
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload[0] == {"vectorDbId": "v1", "values": [0.1, 0.2], "metadata": {"text": "a"}}
        assert not (tmp_path / "vector-cache" / "4-doc-1.json.tmp").exists()

    @pytest.mark.asyncio
    async def test_load(self, store) -> None:  # noqa: ANN001
        await store.store_vector_result(_entries(), "4-doc-1.json")
        assert await store.load_vector_result("4-doc-1.json") == _entries()

    @pytest.mark.asyncio
    async def test_load_missing(self, store) -> None:  # noqa: ANN001
        assert await store.load_vector_result("nope.json") is None

    @pytest.mark.asyncio
    async def test_store_overwrites(self, store) -> None:  # noqa: ANN001
        await store.store_vector_result(_entries(), "4-doc-1.json")
        await store.store_vector_result(_entries()[:1], "4-doc-1.json")
        assert len(await store.load_vector_result("4-doc-1.json")) == 1

    @pytest.mark.asyncio
    async def test_delete(self, store) -> None:  # noqa: ANN001
        await store.store_vector_result(_entries(), "4-doc-1.json")
        assert await store.delete_vector_result("4-doc-1.json") is True
        assert await store.delete_vector_result("4-doc-1.json") is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("filename", ["../escape.json", "a/b.json", "", ".."])
    async def test_rejects_paths(self, store, filename: str) -> None:  # noqa: ANN001
        with pytest.raises(ValueError):
            await store.store_vector_result(_entries(), filename)
