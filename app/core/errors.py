"""
Error types raised by the token service.

``EpicError`` values are client-facing and carry the exact wire shape the game
client expects. Everything else is internal and must be converted to
``internal_server_error`` before it reaches the wire.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Sequence

from fastapi.responses import JSONResponse

ORIGINATING_SERVICE = "any"
INTENT = "prod"


class StorageError(Exception):
    """Raised when the backing document store fails."""


class SigningError(Exception):
    """Raised when a token cannot be signed with the process key."""


class InvalidAuthorizationHeader(Exception):
    """Raised for any missing or malformed client Authorization header."""


class IdentifierAllocationError(Exception):
    """Raised when no unused identifier was found within the attempt budget."""


class CredentialOwnerMissingError(RuntimeError):
    """A stored credential points at an account that no longer exists."""


class EpicError(Exception):
    """An error rendered to the client in the platform's error envelope."""

    def __init__(
        self,
        error_code: str,
        message: str,
        numeric_code: int,
        status_code: int,
        message_vars: Sequence[str] = (),
    ) -> None:
        super().__init__(f"{error_code}: {message}")
        self.error_code = error_code
        self.message = message
        self.numeric_code = numeric_code
        self.status_code = status_code
        self.message_vars = list(message_vars)

    def to_body(self) -> dict:
        return {
            "errorCode": self.error_code,
            "errorMessage": self.message,
            "messageVars": self.message_vars,
            "numericErrorCode": self.numeric_code,
            "originatingService": ORIGINATING_SERVICE,
            "intent": INTENT,
        }

    def headers(self) -> dict[str, str]:
        return {
            "X-Epic-Error-Name": self.error_code,
            "X-Epic-Error-Code": str(self.numeric_code),
        }

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content=self.to_body(),
            headers=self.headers(),
        )


def invalid_client() -> EpicError:
    return EpicError(
        "errors.com.epicgames.common.oauth.invalid_client",
        "It appears that your Authorization header may be invalid or not present, "
        "please verify that you are sending the correct headers.",
        1011,
        HTTPStatus.BAD_REQUEST,
    )


def invalid_request(message: str) -> EpicError:
    return EpicError(
        "errors.com.epicgames.common.oauth.invalid_request",
        message,
        1013,
        HTTPStatus.BAD_REQUEST,
    )


def exchange_code_not_found() -> EpicError:
    return EpicError(
        "errors.com.epicgames.account.oauth.exchange_code_not_found",
        "Sorry the exchange code you supplied was not found. "
        "It is possible that it was no longer valid",
        18057,
        HTTPStatus.UNAUTHORIZED,
    )


def invalid_refresh_token(refresh_token: str) -> EpicError:
    return EpicError(
        "errors.com.epicgames.account.auth_token.invalid_refresh_token",
        f"Sorry the refresh token '{refresh_token}' is invalid",
        18036,
        HTTPStatus.BAD_REQUEST,
        message_vars=[refresh_token],
    )


def password_grant_unsupported() -> EpicError:
    return EpicError(
        "errors.com.epicgames.common.oauth.unsupported_grant_type",
        "Sorry password auth is not supported. "
        "Try logging in again from the Glyph launcher.",
        1016,
        HTTPStatus.UNAUTHORIZED,
    )


def unsupported_grant_type(grant_type: str) -> EpicError:
    return EpicError(
        "errors.com.epicgames.common.oauth.unsupported_grant_type",
        f"Unsupported grant type: {grant_type}",
        1016,
        HTTPStatus.BAD_REQUEST,
        message_vars=[grant_type],
    )


def internal_server_error() -> EpicError:
    return EpicError(
        "errors.com.epicgames.common.internal_server_error",
        "Something went wrong",
        -1,
        HTTPStatus.INTERNAL_SERVER_ERROR,
    )


__all__ = [
    "CredentialOwnerMissingError",
    "EpicError",
    "IdentifierAllocationError",
    "InvalidAuthorizationHeader",
    "SigningError",
    "StorageError",
    "exchange_code_not_found",
    "internal_server_error",
    "invalid_client",
    "invalid_refresh_token",
    "invalid_request",
    "password_grant_unsupported",
    "unsupported_grant_type",
]
