"""
Grant dispatch for the token endpoint.

Each request selects exactly one grant branch and ends in a response model or
an ``EpicError``. Store and signing failures are logged here and converted to
the generic internal error so no backend detail reaches the client.
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, Type

from app.core import errors
from app.core.errors import SigningError, StorageError
from app.models.oauth import CredentialRecord, GrantType
from app.models.user import User
from app.schemas.oauth import (
    ClientCredentialsResponse,
    ExchangeCodeResponse,
    OAuthResponse,
    OAuthTokenForm,
    RefreshTokenResponse,
    TokenPairResponse,
)
from app.services.oauth_tokens import OAuthTokenService
from app.services.users import UserDirectory
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

_BACKEND_ERRORS = (StorageError, SigningError)


def _seconds_until(record: CredentialRecord) -> int:
    return int((record.expires_at - utcnow()).total_seconds())


class GrantDispatcher:
    """Maps a token request to the client_credentials, exchange_code, refresh_token or password flow."""

    def __init__(self, tokens: OAuthTokenService, users: UserDirectory) -> None:
        self._tokens = tokens
        self._users = users
        self._settings = tokens.signer.settings

    def dispatch(self, form: OAuthTokenForm, client_id: str) -> OAuthResponse:
        if form.token_type != "eg1":
            logger.warning("Auth token type was not `eg1`: %r", form.token_type)

        if not form.grant_type:
            raise errors.invalid_request("Grant type is required.")
        try:
            grant_type = GrantType(form.grant_type)
        except ValueError:
            raise errors.unsupported_grant_type(form.grant_type) from None

        handlers: dict[GrantType, Callable[[OAuthTokenForm, str], OAuthResponse]] = {
            GrantType.CLIENT_CREDENTIALS: self._client_credentials,
            GrantType.EXCHANGE_CODE: self._exchange_code,
            GrantType.REFRESH_TOKEN: self._refresh_token,
            GrantType.PASSWORD: self._password,
        }
        return handlers[grant_type](form, client_id)

    def _strip_prefix(self, value: str) -> str:
        return value.removeprefix(self._settings.token_prefix)

    def _client_credentials(self, form: OAuthTokenForm, client_id: str) -> ClientCredentialsResponse:
        try:
            signed = self._tokens.signer.client_token(client_id)
        except SigningError:
            logger.exception("Failed to make a client token")
            raise errors.internal_server_error() from None

        return ClientCredentialsResponse(
            access_token=f"{self._settings.token_prefix}{signed.token}",
            expires_in=self._settings.client_token_ttl_seconds,
            expires_at=signed.expires_at,
            client_id=client_id,
            client_service=self._settings.client_service,
        )

    def _exchange_code(self, form: OAuthTokenForm, client_id: str) -> ExchangeCodeResponse:
        if not form.exchange_code:
            raise errors.invalid_request("Exchange code is required.")

        try:
            record = self._tokens.get_exchange_code(self._strip_prefix(form.exchange_code))
        except _BACKEND_ERRORS:
            logger.exception("Failed to check exchange code validity")
            raise errors.internal_server_error() from None

        if record is None or record.is_expired(utcnow()):
            raise errors.exchange_code_not_found()

        # The exchange code stays redeemable until its own expiry.
        user = self._resolve_owner(record)
        return self._issue_pair(ExchangeCodeResponse, user, client_id, GrantType.EXCHANGE_CODE)

    def _refresh_token(self, form: OAuthTokenForm, client_id: str) -> RefreshTokenResponse:
        if not form.refresh_token:
            raise errors.invalid_request("Refresh token is required.")

        supplied = self._strip_prefix(form.refresh_token)
        try:
            record = self._tokens.get_refresh_token(supplied)
        except _BACKEND_ERRORS:
            logger.exception("Failed to check refresh token validity")
            raise errors.internal_server_error() from None

        if record is None or record.is_expired(utcnow()):
            raise errors.invalid_refresh_token(supplied)

        # Rotation without revocation: the presented token keeps working until it expires.
        user = self._resolve_owner(record)
        return self._issue_pair(RefreshTokenResponse, user, client_id, GrantType.REFRESH_TOKEN)

    def _password(self, form: OAuthTokenForm, client_id: str) -> OAuthResponse:
        raise errors.password_grant_unsupported()

    def _resolve_owner(self, record: CredentialRecord) -> User:
        try:
            user = self._users.get_user(record.account_id)
        except _BACKEND_ERRORS:
            logger.exception("Failed to get a user")
            raise errors.internal_server_error() from None
        if user is None:
            raise errors.CredentialOwnerMissingError(
                f"Account {record.account_id} should exist while it owns a credential"
            )
        return user

    def _issue_pair(
        self,
        response_cls: Type[TokenPairResponse],
        user: User,
        client_id: str,
        grant_type: GrantType,
    ) -> TokenPairResponse:
        device_id = uuid.uuid4().hex
        try:
            access = self._tokens.make_access_token(user, client_id, device_id, grant_type)
        except _BACKEND_ERRORS:
            logger.exception("Failed to make an access token")
            raise errors.internal_server_error() from None

        try:
            refresh = self._tokens.make_refresh_token(user, client_id, device_id, grant_type)
        except _BACKEND_ERRORS:
            logger.exception("Failed to make a refresh token")
            self._discard_orphan(access)
            raise errors.internal_server_error() from None

        prefix = self._settings.token_prefix
        return response_cls(
            access_token=f"{prefix}{access.token}",
            expires_in=_seconds_until(access),
            expires_at=access.expires_at,
            refresh_token=f"{prefix}{refresh.token}",
            refresh_expires=_seconds_until(refresh),
            refresh_expires_at=refresh.expires_at,
            account_id=user.account_id,
            client_id=client_id,
            client_service=self._settings.client_service,
            display_name=user.display_name,
            app=self._settings.app_name,
            in_app_id=user.account_id,
            device_id=device_id,
        )

    def _discard_orphan(self, access: CredentialRecord) -> None:
        """Best-effort removal of an access token whose refresh token was never stored."""
        try:
            self._tokens.kill_access_token(access.token)
        except StorageError:
            logger.warning(
                "Orphaned access token left for account %s until %s",
                access.account_id,
                access.expires_at.isoformat(),
                exc_info=True,
            )


__all__ = ["GrantDispatcher"]
