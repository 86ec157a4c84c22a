"""Expose document store backends."""

from typing import Any, Dict, Optional, Protocol

from .dynamodb import DynamoDBClient
from .sqlite_store import SQLiteStore


class DocumentStore(Protocol):
    """Collection-scoped document operations the services rely on."""

    def insert_one(self, collection: str, document: Dict[str, Any]) -> None: ...

    def find_one(
        self, collection: str, filters: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]: ...

    def delete_one(self, collection: str, filters: Dict[str, Any]) -> int: ...

    def delete_many(self, collection: str, filters: Dict[str, Any]) -> int: ...


__all__ = [
    "DocumentStore",
    "DynamoDBClient",
    "SQLiteStore",
]
