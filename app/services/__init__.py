"""Service layer exports."""

from .credential_store import CredentialStore
from .grants import GrantDispatcher
from .identifiers import allocate_account_id
from .oauth_tokens import OAuthTokenService
from .token_signer import SignedToken, SigningKey, TokenSigner
from .users import UserDirectory

__all__ = [
    "CredentialStore",
    "GrantDispatcher",
    "OAuthTokenService",
    "SignedToken",
    "SigningKey",
    "TokenSigner",
    "UserDirectory",
    "allocate_account_id",
]
