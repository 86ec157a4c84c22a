"""
Minting and revocation of persisted OAuth credentials.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from app.models.oauth import CredentialKind, CredentialRecord, GrantType
from app.models.user import User
from app.services.credential_store import CredentialStore
from app.services.token_signer import SignedToken, TokenSigner

logger = logging.getLogger(__name__)


class OAuthTokenService:
    """Signs tokens and stores the matching credential records."""

    def __init__(self, signer: TokenSigner, credentials: CredentialStore) -> None:
        self._signer = signer
        self._credentials = credentials

    @property
    def signer(self) -> TokenSigner:
        return self._signer

    @property
    def credentials(self) -> CredentialStore:
        return self._credentials

    def _persist(self, kind: CredentialKind, user: User, signed: SignedToken) -> CredentialRecord:
        record = CredentialRecord.issue(signed.token, user.account_id, signed.expires_at)
        self._credentials.insert(kind, record)
        return record

    def make_exchange_code(
        self, user: User, lifetime: Optional[timedelta] = None
    ) -> CredentialRecord:
        """Exchange codes let users sign in from the launcher without a password."""
        signed = self._signer.exchange_code(user.account_id, lifetime)
        return self._persist(CredentialKind.EXCHANGE_CODE, user, signed)

    def make_access_token(
        self,
        user: User,
        client_id: str,
        device_id: str,
        grant_type: GrantType,
        lifetime: Optional[timedelta] = None,
    ) -> CredentialRecord:
        signed = self._signer.access_token(
            user.account_id, user.display_name, client_id, device_id, grant_type, lifetime
        )
        return self._persist(CredentialKind.ACCESS, user, signed)

    def make_refresh_token(
        self,
        user: User,
        client_id: str,
        device_id: str,
        grant_type: GrantType,
        lifetime: Optional[timedelta] = None,
    ) -> CredentialRecord:
        signed = self._signer.refresh_token(
            user.account_id, client_id, device_id, grant_type, lifetime
        )
        return self._persist(CredentialKind.REFRESH, user, signed)

    def get_exchange_code(self, token: str) -> Optional[CredentialRecord]:
        return self._credentials.find_by_token(CredentialKind.EXCHANGE_CODE, token)

    def get_access_token(self, token: str) -> Optional[CredentialRecord]:
        return self._credentials.find_by_token(CredentialKind.ACCESS, token)

    def get_refresh_token(self, token: str) -> Optional[CredentialRecord]:
        return self._credentials.find_by_token(CredentialKind.REFRESH, token)

    def kill_exchange_code(self, token: str) -> bool:
        return self._credentials.delete_by_token(CredentialKind.EXCHANGE_CODE, token)

    def kill_access_token(self, token: str) -> bool:
        return self._credentials.delete_by_token(CredentialKind.ACCESS, token)

    def kill_refresh_token(self, token: str) -> bool:
        return self._credentials.delete_by_token(CredentialKind.REFRESH, token)

    def kill_user_tokens(self, account_id: str) -> int:
        """Kill every exchange code, access token and refresh token for the account."""
        return self._credentials.delete_all_by_owner(account_id)


__all__ = ["OAuthTokenService"]
