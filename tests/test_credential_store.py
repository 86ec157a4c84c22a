from __future__ import annotations

from datetime import timedelta

from app.models.oauth import CredentialKind, GrantType
from app.models.user import User
from app.services import CredentialStore, OAuthTokenService
from app.utils.timestamps import utcnow


def test_access_token_round_trip(token_service: OAuthTokenService, player: User) -> None:
    minted_at = utcnow()
    record = token_service.make_access_token(
        player, "client", "device", GrantType.EXCHANGE_CODE
    )

    found = token_service.get_access_token(record.token)

    assert found is not None
    assert found.account_id == player.account_id
    expected = minted_at + timedelta(seconds=7200)
    assert abs((found.expires_at - expected).total_seconds()) <= 1
    assert found.ttl == int(found.expires_at.timestamp())


def test_records_are_scoped_to_their_set(token_service: OAuthTokenService, player: User) -> None:
    record = token_service.make_refresh_token(
        player, "client", "device", GrantType.REFRESH_TOKEN
    )

    assert token_service.get_refresh_token(record.token) is not None
    assert token_service.get_access_token(record.token) is None
    assert token_service.get_exchange_code(record.token) is None


def test_lookup_of_unknown_token_returns_none(credential_store: CredentialStore) -> None:
    for kind in CredentialKind:
        assert credential_store.find_by_token(kind, "unknown") is None


def test_kill_refresh_token_deletes_from_refresh_set(
    token_service: OAuthTokenService, player: User
) -> None:
    refresh = token_service.make_refresh_token(
        player, "client", "device", GrantType.REFRESH_TOKEN
    )
    access = token_service.make_access_token(
        player, "client", "device", GrantType.REFRESH_TOKEN
    )

    assert token_service.kill_refresh_token(refresh.token) is True
    assert token_service.get_refresh_token(refresh.token) is None
    assert token_service.get_access_token(access.token) is not None
    assert token_service.kill_refresh_token(refresh.token) is False


def test_kill_single_tokens(token_service: OAuthTokenService, player: User) -> None:
    code = token_service.make_exchange_code(player)
    access = token_service.make_access_token(
        player, "client", "device", GrantType.EXCHANGE_CODE
    )

    assert token_service.kill_exchange_code(code.token) is True
    assert token_service.kill_access_token(access.token) is True
    assert token_service.get_exchange_code(code.token) is None
    assert token_service.get_access_token(access.token) is None


def test_kill_user_tokens_revokes_every_set(
    token_service: OAuthTokenService, user_directory, player: User
) -> None:
    other = user_directory.create_user("987", "Other")
    code = token_service.make_exchange_code(player)
    access = token_service.make_access_token(player, "c", "d", GrantType.EXCHANGE_CODE)
    refresh = token_service.make_refresh_token(player, "c", "d", GrantType.EXCHANGE_CODE)
    survivor = token_service.make_access_token(other, "c", "d", GrantType.EXCHANGE_CODE)

    deleted = token_service.kill_user_tokens(player.account_id)

    assert deleted == 3
    assert token_service.get_exchange_code(code.token) is None
    assert token_service.get_access_token(access.token) is None
    assert token_service.get_refresh_token(refresh.token) is None
    assert token_service.get_access_token(survivor.token) is not None
