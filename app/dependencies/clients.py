"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache

from app.clients import DocumentStore, DynamoDBClient, SQLiteStore
from app.core.config import AppSettings, get_settings
from app.services import (
    CredentialStore,
    GrantDispatcher,
    OAuthTokenService,
    SigningKey,
    TokenSigner,
    UserDirectory,
)


@lru_cache()
def get_app_settings() -> AppSettings:
    """Settings shared by the routes and every factory below."""
    return get_settings()


@lru_cache()
def get_document_store() -> DocumentStore:
    """Provide the configured document store backend."""
    settings = get_app_settings()
    if settings.storage.backend == "dynamodb":
        return DynamoDBClient(settings.aws)
    return SQLiteStore(settings.storage.sqlite_path)


@lru_cache()
def get_user_directory() -> UserDirectory:
    """Provide the account directory."""
    return UserDirectory(get_document_store())


@lru_cache()
def get_signing_key() -> SigningKey:
    """Derive the signing key once per process."""
    return SigningKey.from_settings(get_app_settings().tokens)


@lru_cache()
def get_token_signer() -> TokenSigner:
    """Provide the token signer bound to the process signing key."""
    return TokenSigner(get_signing_key(), get_app_settings().tokens)


@lru_cache()
def get_credential_store() -> CredentialStore:
    """Provide the credential record store."""
    return CredentialStore(get_document_store())


@lru_cache()
def get_oauth_token_service() -> OAuthTokenService:
    """Provide the service that mints and revokes credentials."""
    return OAuthTokenService(get_token_signer(), get_credential_store())


@lru_cache()
def get_grant_dispatcher() -> GrantDispatcher:
    """Provide the token endpoint's grant dispatcher."""
    return GrantDispatcher(get_oauth_token_service(), get_user_directory())


__all__ = [
    "get_app_settings",
    "get_credential_store",
    "get_document_store",
    "get_grant_dispatcher",
    "get_oauth_token_service",
    "get_signing_key",
    "get_token_signer",
    "get_user_directory",
]
