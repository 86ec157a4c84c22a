from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app.core.config import TokenSettings
from app.core.errors import SigningError
from app.services.token_signer import P_CLAIM, SigningKey, TokenSigner

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)


def _decode(token: str, secret: bytes) -> dict:
    return jwt.decode(
        token,
        secret,
        algorithms=["HS256"],
        options={"verify_exp": False, "verify_iat": False},
    )


@pytest.fixture
def frozen_signer(signing_secret: bytes, token_settings: TokenSettings) -> TokenSigner:
    return TokenSigner(SigningKey(signing_secret), token_settings, clock=lambda: FIXED_NOW)


def test_signing_key_rejects_empty_material() -> None:
    with pytest.raises(SigningError):
        SigningKey(b"")


def test_signing_key_from_runner_id_strips_separators() -> None:
    runner_id = uuid.UUID("12345678-1234-5678-1234-567812345678")
    key = SigningKey.from_runner_id(runner_id)

    assert key.secret == b"12345678123456781234567812345678"


def test_signing_key_prefers_configured_secret() -> None:
    settings = TokenSettings(signing_secret="configured-secret")

    assert SigningKey.from_settings(settings).secret == b"configured-secret"


def test_sign_is_deterministic_for_identical_claims(signer: TokenSigner) -> None:
    claims = {"sub": "abc", "jti": "fixed", "exp": "1700000000"}

    assert signer.sign(claims) == signer.sign(dict(claims))


def test_sign_depends_on_key(token_settings: TokenSettings) -> None:
    claims = {"sub": "abc"}
    first = TokenSigner(SigningKey(b"first-key-0123456789abcdef012345"), token_settings)
    second = TokenSigner(SigningKey(b"second-key-0123456789abcdef01234"), token_settings)

    assert first.sign(claims) != second.sign(claims)


def test_client_token_claim_order(frozen_signer: TokenSigner, signing_secret: bytes) -> None:
    signed = frozen_signer.client_token("ec684b8c687f479fadea3cb2ad83f5c6")
    payload = _decode(signed.token, signing_secret)

    assert list(payload) == [
        "p", "clsvc", "t", "mver", "clid", "ic", "exp", "am", "iat", "jti", "pfpid",
    ]
    assert payload["p"] == P_CLAIM
    assert payload["am"] == "client_credentials"
    assert payload["clid"] == "ec684b8c687f479fadea3cb2ad83f5c6"
    assert signed.expires_at == FIXED_NOW + timedelta(hours=4)
    assert payload["exp"] == str(int(signed.expires_at.timestamp()))


def test_access_token_claim_order(frozen_signer: TokenSigner, signing_secret: bytes) -> None:
    signed = frozen_signer.access_token(
        "acct", "PlayerOne", "client", "device", "exchange_code"
    )
    payload = _decode(signed.token, signing_secret)

    assert list(payload) == [
        "app", "sub", "dvid", "mver", "clid", "dn", "am", "p", "iai", "sec",
        "clsvc", "t", "ic", "jti", "creation_date", "hours_expire", "exp",
    ]
    assert payload["sub"] == payload["iai"] == "acct"
    assert payload["dn"] == "PlayerOne"
    assert payload["am"] == "exchange_code"
    assert payload["creation_date"] == "2024-05-01T12:00:00.123Z"
    assert payload["hours_expire"] == "2"
    assert signed.expires_at == FIXED_NOW + timedelta(seconds=7200)


def test_refresh_token_claim_order(frozen_signer: TokenSigner, signing_secret: bytes) -> None:
    signed = frozen_signer.refresh_token("acct", "client", "device", "refresh_token")
    payload = _decode(signed.token, signing_secret)

    assert list(payload) == [
        "sub", "dvid", "t", "clid", "am", "jti", "creation_date", "hours_expire", "exp",
    ]
    assert payload["am"] == "refresh_token"
    assert payload["hours_expire"] == "8"
    assert signed.expires_at == FIXED_NOW + timedelta(seconds=28800)


def test_exchange_code_claim_order(frozen_signer: TokenSigner, signing_secret: bytes) -> None:
    signed = frozen_signer.exchange_code("acct", lifetime=timedelta(minutes=5))
    payload = _decode(signed.token, signing_secret)

    assert list(payload) == ["srvc", "userId", "jti", "exp"]
    assert payload["srvc"] == "glyph"
    assert payload["userId"] == "acct"
    assert signed.expires_at == FIXED_NOW + timedelta(minutes=5)


def test_each_token_gets_a_fresh_nonce(frozen_signer: TokenSigner) -> None:
    first = frozen_signer.exchange_code("acct")
    second = frozen_signer.exchange_code("acct")

    assert first.claims["jti"] != second.claims["jti"]
    assert first.token != second.token


def test_zero_lifetime_override_is_honoured(frozen_signer: TokenSigner) -> None:
    zero = timedelta(0)

    issued = [
        frozen_signer.client_token("client", lifetime=zero),
        frozen_signer.access_token("acct", "PlayerOne", "client", "device", "exchange_code", zero),
        frozen_signer.refresh_token("acct", "client", "device", "refresh_token", zero),
        frozen_signer.exchange_code("acct", lifetime=zero),
    ]

    for signed in issued:
        assert signed.expires_at == FIXED_NOW
        assert signed.claims["exp"] == str(int(FIXED_NOW.timestamp()))
    assert issued[1].claims["hours_expire"] == "0"
