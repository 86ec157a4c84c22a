"""Schemas for the token endpoint."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from app.models.oauth import GrantType
from app.utils.timestamps import isoformat_millis


class OAuthTokenForm(BaseModel):
    """Form fields accepted by ``POST /account/api/oauth/token``."""

    grant_type: Optional[str] = None
    exchange_code: Optional[str] = None
    refresh_token: Optional[str] = None
    token_type: Optional[str] = None
    # Accepted as sent and never interpreted.
    include_perms: Optional[str] = None


class ClientCredentialsResponse(BaseModel):
    """Body returned for the client_credentials grant."""

    flow: ClassVar[GrantType] = GrantType.CLIENT_CREDENTIALS

    access_token: str
    expires_in: int
    expires_at: datetime
    token_type: str = "bearer"
    client_id: str
    internal_client: bool = True
    client_service: str

    @field_serializer("expires_at")
    def _serialize_expires_at(self, value: datetime) -> str:
        return isoformat_millis(value)


class TokenPairResponse(BaseModel):
    """Body returned when an access and refresh token pair is issued."""

    model_config = ConfigDict(populate_by_name=True)

    flow: ClassVar[GrantType]

    access_token: str
    expires_in: int
    expires_at: datetime
    token_type: str = "bearer"
    refresh_token: str
    refresh_expires: int
    refresh_expires_at: datetime
    account_id: str
    client_id: str
    internal_client: bool = True
    client_service: str
    display_name: str = Field(..., alias="displayName")
    app: str
    in_app_id: str
    device_id: str

    @field_serializer("expires_at", "refresh_expires_at")
    def _serialize_timestamps(self, value: datetime) -> str:
        return isoformat_millis(value)


class ExchangeCodeResponse(TokenPairResponse):
    flow: ClassVar[GrantType] = GrantType.EXCHANGE_CODE


class RefreshTokenResponse(TokenPairResponse):
    flow: ClassVar[GrantType] = GrantType.REFRESH_TOKEN


OAuthResponse = Union[ClientCredentialsResponse, ExchangeCodeResponse, RefreshTokenResponse]


__all__ = [
    "ClientCredentialsResponse",
    "ExchangeCodeResponse",
    "OAuthResponse",
    "OAuthTokenForm",
    "RefreshTokenResponse",
    "TokenPairResponse",
]
