"""Public schema exports."""

from .oauth import (
    ClientCredentialsResponse,
    ExchangeCodeResponse,
    OAuthResponse,
    OAuthTokenForm,
    RefreshTokenResponse,
    TokenPairResponse,
)

__all__ = [
    "ClientCredentialsResponse",
    "ExchangeCodeResponse",
    "OAuthResponse",
    "OAuthTokenForm",
    "RefreshTokenResponse",
    "TokenPairResponse",
]
