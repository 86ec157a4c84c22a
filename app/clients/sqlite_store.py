"""SQLite-backed document store with collection-scoped equality filters."""

from __future__ import annotations

import json
import logging
import re
import sqlite3
from pathlib import Path
from typing import Any, Dict, Optional

from app.core.errors import StorageError

logger = logging.getLogger(__name__)

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _where(collection: str, filters: Dict[str, Any]) -> tuple[str, list[Any]]:
    clauses = ["collection = ?"]
    params: list[Any] = [collection]
    for field, value in filters.items():
        if not _FIELD_NAME.match(field):
            raise ValueError(f"Unsupported filter field: {field!r}")
        clauses.append(f"json_extract(data, '$.{field}') = ?")
        params.append(value)
    return " AND ".join(clauses), params


class SQLiteStore:
    """Stores JSON documents in a single table partitioned by collection name."""

    def __init__(self, db_path: str) -> None:
        self._db_path = Path(db_path)
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    collection TEXT NOT NULL,
                    data TEXT NOT NULL
                )
                """
            )

    def insert_one(self, collection: str, document: Dict[str, Any]) -> None:
        data_json = json.dumps(document)
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO documents (collection, data) VALUES (?, ?)",
                    (collection, data_json),
                )
        except sqlite3.Error as exc:
            raise StorageError(f"insert into {collection} failed: {exc}") from exc

    def find_one(
        self, collection: str, filters: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        where, params = _where(collection, filters)
        try:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT data FROM documents WHERE {where} LIMIT 1",
                    params,
                ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"lookup in {collection} failed: {exc}") from exc
        if not row:
            return None
        return json.loads(row["data"])

    def delete_one(self, collection: str, filters: Dict[str, Any]) -> int:
        where, params = _where(collection, filters)
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    f"DELETE FROM documents WHERE id = "
                    f"(SELECT id FROM documents WHERE {where} LIMIT 1)",
                    params,
                )
        except sqlite3.Error as exc:
            raise StorageError(f"delete from {collection} failed: {exc}") from exc
        return cursor.rowcount

    def delete_many(self, collection: str, filters: Dict[str, Any]) -> int:
        where, params = _where(collection, filters)
        try:
            with self._connect() as conn:
                cursor = conn.execute(f"DELETE FROM documents WHERE {where}", params)
        except sqlite3.Error as exc:
            raise StorageError(f"delete from {collection} failed: {exc}") from exc
        logger.debug("Deleted %s documents from %s", cursor.rowcount, collection)
        return cursor.rowcount


__all__ = ["SQLiteStore"]
