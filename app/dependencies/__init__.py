"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_app_settings,
    get_credential_store,
    get_document_store,
    get_grant_dispatcher,
    get_oauth_token_service,
    get_signing_key,
    get_token_signer,
    get_user_directory,
)

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
