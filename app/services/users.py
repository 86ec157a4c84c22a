"""
Minimal user directory backed by the document store.
"""

from __future__ import annotations

import logging
from typing import Optional

from app.clients import DocumentStore
from app.models.user import USERS_COLLECTION, User
from app.services.identifiers import allocate_account_id

logger = logging.getLogger(__name__)


class UserDirectory:
    """Creates and resolves game accounts."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def _account_exists(self, account_id: str) -> bool:
        return self._store.find_one(USERS_COLLECTION, {"account_id": account_id}) is not None

    def create_user(self, external_id: str, display_name: str) -> User:
        """Create an account for ``external_id`` with a freshly allocated id."""
        account_id = allocate_account_id(self._account_exists)
        user = User(
            account_id=account_id,
            display_name=display_name,
            external_id=str(external_id),
        )
        self._store.insert_one(USERS_COLLECTION, user.to_document())
        logger.info("Created account %s for %s", account_id, display_name)
        return user

    def get_user(self, account_id: str) -> Optional[User]:
        document = self._store.find_one(USERS_COLLECTION, {"account_id": account_id})
        if document is None:
            return None
        return User.model_validate(document)


__all__ = ["USERS_COLLECTION", "UserDirectory"]
