"""
Domain models for OAuth credential persistence.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from app.utils.timestamps import unix_seconds


class GrantType(str, Enum):
    """Strategies a client may declare on the token endpoint."""

    CLIENT_CREDENTIALS = "client_credentials"
    EXCHANGE_CODE = "exchange_code"
    REFRESH_TOKEN = "refresh_token"
    PASSWORD = "password"

    def __str__(self) -> str:
        return self.value


class CredentialKind(str, Enum):
    """The three record sets owned by the credential store."""

    EXCHANGE_CODE = "exchange"
    ACCESS = "access"
    REFRESH = "refresh"

    @property
    def collection(self) -> str:
        return f"auth.{self.value}"


class CredentialRecord(BaseModel):
    """Represents a credential stored in one of the auth collections."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    token: str = Field(..., description="Signed token string; the lookup key.")
    account_id: str = Field(..., description="Owning account identifier.")
    expires_at: datetime = Field(..., alias="expireAt")
    ttl: int = Field(
        ...,
        description="Unix seconds of expires_at, used as the backend TTL attribute.",
    )

    @classmethod
    def issue(cls, token: str, account_id: str, expires_at: datetime) -> "CredentialRecord":
        return cls(
            token=token,
            account_id=account_id,
            expires_at=expires_at,
            ttl=unix_seconds(expires_at),
        )

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["CredentialKind", "CredentialRecord", "GrantType"]
