"""SQLite-backed ``document_vectors`` repository.

Stores one row per vector inserted into a backend, linking it to the
workspace document it came from.  Uses ``aiosqlite`` for async I/O.
"""

from __future__ import annotations

from pathlib import Path

import aiosqlite
import structlog

from vector_admin.interfaces.persistence import IDocumentVectorRepository
from vector_admin.models.vectors import DocumentVector

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/vector_admin.db")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS document_vectors (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    doc_id           TEXT    NOT NULL,
    vector_id        TEXT    NOT NULL,
    document_id      INTEGER NOT NULL,
    workspace_id     INTEGER NOT NULL,
    organization_id  INTEGER NOT NULL,
    created_at       TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_document_vectors_document ON document_vectors(document_id);",
    "CREATE INDEX IF NOT EXISTS idx_document_vectors_vector ON document_vectors(vector_id);",
]

_INSERT_SQL = """\
INSERT INTO document_vectors (doc_id, vector_id, document_id, workspace_id, organization_id)
VALUES (?, ?, ?, ?, ?);
"""

_SELECT_FOR_DOCUMENT_SQL = """\
SELECT doc_id, vector_id, document_id, workspace_id, organization_id
FROM document_vectors
WHERE document_id = ?
ORDER BY id;
"""


class SQLiteDocumentVectorRepository(IDocumentVectorRepository):
    """SQLite persistence for document-to-vector mapping rows."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the table and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_CREATE_TABLE_SQL)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("document_vectors_db_initialized", path=str(self._db_path))

    async def create_many(self, rows: list[DocumentVector]) -> int:
        if not rows:
            return 0
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.executemany(
                _INSERT_SQL,
                [
                    (r.doc_id, r.vector_id, r.document_id, r.workspace_id, r.organization_id)
                    for r in rows
                ],
            )
            await db.commit()
        logger.debug("document_vectors_created", count=len(rows), document_id=rows[0].document_id)
        return len(rows)

    async def for_document(self, document_id: int) -> list[DocumentVector]:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(_SELECT_FOR_DOCUMENT_SQL, (document_id,))
            rows = await cursor.fetchall()
        return [DocumentVector(**dict(r)) for r in rows]

    async def delete_for_document(self, document_id: int) -> int:
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(
                "DELETE FROM document_vectors WHERE document_id = ?", (document_id,)
            )
            await db.commit()
            deleted = cursor.rowcount
        logger.info("document_vectors_deleted", document_id=document_id, count=deleted)
        return deleted

    async def count(self) -> int:
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute("SELECT COUNT(*) FROM document_vectors")
            row = await cursor.fetchone()
        return int(row[0]) if row else 0
