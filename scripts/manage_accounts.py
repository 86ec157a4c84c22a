"""Operator commands for accounts and their credentials.

Example usages::

    # Create an account and print an exchange code for the launcher.
    python -m scripts.manage_accounts create-user 123456789 "Display Name"

    # Issue a fresh exchange code for an existing account.
    python -m scripts.manage_accounts exchange-code 0f1e2d3c...

    # Revoke every exchange code, access token and refresh token (e.g. on ban).
    python -m scripts.manage_accounts revoke 0f1e2d3c...

Exchange codes are signed with the process key, so they are only redeemable
by a service sharing the same ``OAUTH_SIGNING_SECRET``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable

from app.core.config import get_settings
from app.core.errors import IdentifierAllocationError, SigningError, StorageError
from app.core.logging import configure_logging
from app.dependencies import get_oauth_token_service, get_user_directory
from app.models.user import User

EXIT_OK = 0
EXIT_NOT_FOUND = 4
EXIT_RUNTIME_ERROR = 5

logger = logging.getLogger(__name__)


def _print_exchange_code(user: User) -> None:
    record = get_oauth_token_service().make_exchange_code(user)
    print(f"Account ID:    {user.account_id}")
    print(f"Display name:  {user.display_name}")
    print(f"Exchange code: {record.token}")
    print(f"Expires at:    {record.expires_at.isoformat()}")


def _create_user(args: argparse.Namespace) -> int:
    user = get_user_directory().create_user(args.external_id, args.display_name)
    _print_exchange_code(user)
    return EXIT_OK


def _exchange_code(args: argparse.Namespace) -> int:
    user = get_user_directory().get_user(args.account_id)
    if user is None:
        print(f"No account {args.account_id}", file=sys.stderr)
        return EXIT_NOT_FOUND
    _print_exchange_code(user)
    return EXIT_OK


def _revoke(args: argparse.Namespace) -> int:
    deleted = get_oauth_token_service().kill_user_tokens(args.account_id)
    print(f"Revoked {deleted} credentials for {args.account_id}")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage accounts and credentials.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_parser = subparsers.add_parser("create-user", help="Create an account.")
    create_parser.add_argument("external_id", help="Chat identity owning the account.")
    create_parser.add_argument("display_name", help="In-game display name.")

    code_parser = subparsers.add_parser(
        "exchange-code", help="Issue an exchange code for an existing account."
    )
    code_parser.add_argument("account_id")

    revoke_parser = subparsers.add_parser(
        "revoke", help="Revoke every credential owned by an account."
    )
    revoke_parser.add_argument("account_id")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(get_settings().log_level)

    handlers: dict[str, Callable[[argparse.Namespace], int]] = {
        "create-user": _create_user,
        "exchange-code": _exchange_code,
        "revoke": _revoke,
    }
    try:
        return handlers[args.command](args)
    except (StorageError, SigningError, IdentifierAllocationError):
        logger.exception("Command %s failed", args.command)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
