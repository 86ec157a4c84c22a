"""
Persistence for exchange codes, access tokens and refresh tokens.

No credential is cached in process memory; every call is a round trip to the
document store so validation survives restarts.
"""

from __future__ import annotations

import logging
from typing import Optional

from app.clients import DocumentStore
from app.models.oauth import CredentialKind, CredentialRecord

logger = logging.getLogger(__name__)


class CredentialStore:
    """Insert, look up and revoke credential records in their owning set."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def insert(self, kind: CredentialKind, record: CredentialRecord) -> None:
        self._store.insert_one(kind.collection, record.to_document())

    def find_by_token(self, kind: CredentialKind, token: str) -> Optional[CredentialRecord]:
        """Exact-match lookup. Expired records are returned as stored."""
        document = self._store.find_one(kind.collection, {"token": token})
        if document is None:
            return None
        return CredentialRecord.model_validate(document)

    def delete_by_token(self, kind: CredentialKind, token: str) -> bool:
        return self._store.delete_one(kind.collection, {"token": token}) == 1

    def delete_all_by_owner(self, account_id: str) -> int:
        """Revoke the owner's whole session tree across every set."""
        deleted = 0
        for kind in CredentialKind:
            deleted += self._store.delete_many(kind.collection, {"account_id": account_id})
        logger.info("Revoked %s credentials for account %s", deleted, account_id)
        return deleted


__all__ = ["CredentialStore"]
