"""SQLite-backed organization connection repository.

Persists validated organization-to-backend connections.  Settings are stored
as JSON text, exactly as submitted.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from vector_admin.interfaces.persistence import IOrganizationConnectionRepository
from vector_admin.models.connector import (
    ConnectorType,
    OrganizationConnection,
    resolve_connector_type,
)

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/vector_admin.db")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS organization_connections (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    organization_id  INTEGER NOT NULL,
    type             TEXT    NOT NULL,
    settings         TEXT    NOT NULL DEFAULT '{}',
    created_at       TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_INDEX_SQL = (
    "CREATE INDEX IF NOT EXISTS idx_organization_connections_org "
    "ON organization_connections(organization_id);"
)

_SELECT_COLUMNS = "SELECT id, organization_id, type, settings FROM organization_connections"


class SQLiteOrganizationConnectionRepository(IOrganizationConnectionRepository):
    """SQLite persistence for organization connections."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the table and index if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_CREATE_TABLE_SQL)
            await db.execute(_CREATE_INDEX_SQL)
            await db.commit()
        logger.info("organization_connections_db_initialized", path=str(self._db_path))

    async def create(
        self,
        organization_id: int,
        connector_type: ConnectorType | str,
        settings: dict[str, Any],
    ) -> OrganizationConnection:
        resolved = resolve_connector_type(connector_type)
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(
                "INSERT INTO organization_connections (organization_id, type, settings) "
                "VALUES (?, ?, ?)",
                (organization_id, resolved.value, json.dumps(settings)),
            )
            await db.commit()
            new_id = cursor.lastrowid

        logger.info(
            "organization_connection_created",
            connection_id=new_id,
            organization_id=organization_id,
            type=resolved.value,
        )
        return OrganizationConnection(
            id=new_id,
            organization_id=organization_id,
            type=resolved,
            settings=settings,
        )

    async def get(self, connection_id: int) -> OrganizationConnection | None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(f"{_SELECT_COLUMNS} WHERE id = ?", (connection_id,))
            row = await cursor.fetchone()
        return OrganizationConnection(**dict(row)) if row else None

    async def for_organization(self, organization_id: int) -> list[OrganizationConnection]:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"{_SELECT_COLUMNS} WHERE organization_id = ? ORDER BY id",
                (organization_id,),
            )
            rows = await cursor.fetchall()
        return [OrganizationConnection(**dict(r)) for r in rows]
