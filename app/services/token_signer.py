"""
Signing key handling and claim recipes for every token the service mints.

Claim dictionaries are built in the exact key order the game client sees on
the wire; PyJWT serializes the payload in insertion order.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, Mapping, Optional

import jwt

from app.core.config import TokenSettings
from app.core.errors import SigningError
from app.utils.timestamps import isoformat_millis, unix_seconds, utcnow

JWT_ALGORITHM = "HS256"

# Opaque platform blob embedded in client and access tokens.
P_CLAIM = (
    "eNqtk8lOAzEMht+nQkhlO1iaA0tBnEBC4joyiWdqNeNUiVPo2+NhGShLBxCnbF7+/0vSxKTCSuBCLD5rTNgS5HVW6uCcUEsif5kDij/Y5aexmh7tND9P2x9NK5kSuCgNt9Xe9tK3i5lnPSPPDpX8DaUVpQvsaJeFR4XdLq4DrrdkY9NwYDuDZbkL7GDYGBE2pvtfFc+kZRnyAxZxcyPo472EiB4CrwgmJilHxxhACbsMkqGR6mjHCmGILeQ52h1BbBpK2YI/15nA+Yu20yhKoieFg+9j0blYRAdKz8tq+isImzZeS0YsOgd60Pppck+tsYKEHOpMOXOUWtktSKvD7d16AFQCakK3YBkM2w5lxTYRdebps5u2YPKMks3P10Z7eZQEw7FJvJKwtsgPWCfv6r6M2YB2pOgtEubLun/2Nft6maL/07vfBPiLLzl99yVNxIodsRgTcfQNtAHX3doa97cwpniz495bx0dUELK5"
)


def new_nonce() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class SigningKey:
    """HMAC-SHA256 key material held for the lifetime of the process."""

    secret: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if not self.secret:
            raise SigningError("Signing key material is empty")

    @classmethod
    def from_runner_id(cls, runner_id: Optional[uuid.UUID] = None) -> "SigningKey":
        """Derive the key from a process-scoped id with its separators stripped."""
        runner_id = runner_id or uuid.uuid4()
        return cls(runner_id.hex.encode("utf-8"))

    @classmethod
    def from_settings(cls, settings: TokenSettings) -> "SigningKey":
        if settings.signing_secret:
            return cls(settings.signing_secret.encode("utf-8"))
        return cls.from_runner_id()


@dataclass(frozen=True)
class SignedToken:
    token: str
    expires_at: datetime
    claims: Dict[str, str]


class TokenSigner:
    """Builds ordered claim sets and signs them with the process key."""

    def __init__(
        self,
        key: SigningKey,
        settings: TokenSettings,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._key = key
        self._settings = settings
        self._clock = clock

    @property
    def settings(self) -> TokenSettings:
        return self._settings

    def sign(self, claims: Mapping[str, str]) -> str:
        """Serialize ``claims`` as a compact HS256 JWS."""
        try:
            return jwt.encode(dict(claims), self._key.secret, algorithm=JWT_ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise SigningError(f"Failed to sign token: {exc}") from exc

    def _expiry(self, lifetime: timedelta) -> tuple[datetime, datetime]:
        now = self._clock()
        return now, now + lifetime

    def client_token(
        self, client_id: str, lifetime: Optional[timedelta] = None
    ) -> SignedToken:
        if lifetime is None:
            lifetime = timedelta(seconds=self._settings.client_token_ttl_seconds)
        now, expires_at = self._expiry(lifetime)
        claims = {
            "p": P_CLAIM,
            "clsvc": self._settings.client_service,
            "t": "s",
            "mver": "false",
            "clid": client_id,
            "ic": "true",
            "exp": str(unix_seconds(expires_at)),
            "am": "client_credentials",
            "iat": str(unix_seconds(now)),
            "jti": new_nonce(),
            "pfpid": self._settings.client_service,
        }
        return SignedToken(self.sign(claims), expires_at, claims)

    def access_token(
        self,
        account_id: str,
        display_name: str,
        client_id: str,
        device_id: str,
        grant_type: str,
        lifetime: Optional[timedelta] = None,
    ) -> SignedToken:
        if lifetime is None:
            lifetime = timedelta(seconds=self._settings.access_token_ttl_seconds)
        now, expires_at = self._expiry(lifetime)
        claims = {
            "app": self._settings.app_name,
            "sub": account_id,
            "dvid": device_id,
            "mver": "false",
            "clid": client_id,
            "dn": display_name,
            "am": str(grant_type),
            "p": P_CLAIM,
            "iai": account_id,
            "sec": "1",
            "clsvc": self._settings.client_service,
            "t": "s",
            "ic": "true",
            "jti": new_nonce(),
            "creation_date": isoformat_millis(now),
            "hours_expire": str(int(lifetime.total_seconds() // 3600)),
            "exp": str(unix_seconds(expires_at)),
        }
        return SignedToken(self.sign(claims), expires_at, claims)

    def refresh_token(
        self,
        account_id: str,
        client_id: str,
        device_id: str,
        grant_type: str,
        lifetime: Optional[timedelta] = None,
    ) -> SignedToken:
        if lifetime is None:
            lifetime = timedelta(seconds=self._settings.refresh_token_ttl_seconds)
        now, expires_at = self._expiry(lifetime)
        claims = {
            "sub": account_id,
            "dvid": device_id,
            "t": "s",
            "clid": client_id,
            "am": str(grant_type),
            "jti": new_nonce(),
            "creation_date": isoformat_millis(now),
            "hours_expire": str(int(lifetime.total_seconds() // 3600)),
            "exp": str(unix_seconds(expires_at)),
        }
        return SignedToken(self.sign(claims), expires_at, claims)

    def exchange_code(
        self, account_id: str, lifetime: Optional[timedelta] = None
    ) -> SignedToken:
        if lifetime is None:
            lifetime = timedelta(seconds=self._settings.exchange_code_ttl_seconds)
        _, expires_at = self._expiry(lifetime)
        claims = {
            "srvc": self._settings.issuer_service,
            "userId": account_id,
            "jti": new_nonce(),
            "exp": str(unix_seconds(expires_at)),
        }
        return SignedToken(self.sign(claims), expires_at, claims)


__all__ = ["JWT_ALGORITHM", "P_CLAIM", "SignedToken", "SigningKey", "TokenSigner"]
