"""File-system vector cache.

Writes each document's vector snapshot as one JSON file under a cache
directory.  File I/O runs in a worker thread so it never blocks the event
loop.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import structlog

from vector_admin.interfaces.vector_cache_store import IVectorCacheStore
from vector_admin.models.vectors import CacheEntry

logger = structlog.get_logger(logger_name=__name__)


class FileVectorCacheStore(IVectorCacheStore):
    """JSON-file snapshots keyed by document filename."""

    def __init__(self, directory: str | Path = "data/vector-cache") -> None:
        self._directory = Path(directory)

    def _path_for(self, filename: str) -> Path:
        if not filename or Path(filename).name != filename or filename in (".", ".."):
            raise ValueError(f"Cache filename must be a bare file name, got {filename!r}")
        return self._directory / filename

    async def store_vector_result(self, entries: list[CacheEntry], filename: str) -> None:
        path = self._path_for(filename)
        payload = json.dumps([e.model_dump(by_alias=True) for e in entries])

        def _write() -> None:
            self._directory.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(path.suffix + ".tmp")
            tmp.write_text(payload, encoding="utf-8")
            tmp.replace(path)

        await asyncio.to_thread(_write)
        logger.info("vector_cache_stored", filename=filename, entries=len(entries))

    async def load_vector_result(self, filename: str) -> list[CacheEntry] | None:
        path = self._path_for(filename)
        if not path.exists():
            return None
        raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
        return [CacheEntry.model_validate(item) for item in json.loads(raw)]

    async def delete_vector_result(self, filename: str) -> bool:
        path = self._path_for(filename)
        if not path.exists():
            return False
        await asyncio.to_thread(path.unlink)
        logger.info("vector_cache_deleted", filename=filename)
        return True
