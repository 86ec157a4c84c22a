"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from app.clients import SQLiteStore
from app.core.config import TokenSettings
from app.models.user import User
from app.services import (
    CredentialStore,
    GrantDispatcher,
    OAuthTokenService,
    SigningKey,
    TokenSigner,
    UserDirectory,
)

@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def document_store(tmp_path) -> SQLiteStore:
    return SQLiteStore(str(tmp_path / "glyph.db"))


@pytest.fixture
def signing_secret() -> bytes:
    return b"unit-test-signing-key-0123456789ab"


@pytest.fixture
def token_settings() -> TokenSettings:
    return TokenSettings()


@pytest.fixture
def signer(signing_secret: bytes, token_settings: TokenSettings) -> TokenSigner:
    return TokenSigner(SigningKey(signing_secret), token_settings)


@pytest.fixture
def credential_store(document_store: SQLiteStore) -> CredentialStore:
    return CredentialStore(document_store)


@pytest.fixture
def token_service(signer: TokenSigner, credential_store: CredentialStore) -> OAuthTokenService:
    return OAuthTokenService(signer, credential_store)


@pytest.fixture
def user_directory(document_store: SQLiteStore) -> UserDirectory:
    return UserDirectory(document_store)


@pytest.fixture
def dispatcher(token_service: OAuthTokenService, user_directory: UserDirectory) -> GrantDispatcher:
    return GrantDispatcher(token_service, user_directory)


@pytest.fixture
def player(user_directory: UserDirectory) -> User:
    return user_directory.create_user("123456789", "PlayerOne")
