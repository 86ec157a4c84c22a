"""Client credential extraction from the ``Authorization`` header."""

from __future__ import annotations

import base64
import binascii
from typing import Mapping

from app.core.errors import InvalidAuthorizationHeader

_BASIC_SCHEME = "basic "


def extract_client_id(headers: Mapping[str, str]) -> str:
    """
    Return the client id from a Basic-style ``Authorization`` header.

    The decoded credentials must be exactly ``client_id:secret``. Every failure
    raises ``InvalidAuthorizationHeader`` without saying which check failed.
    """
    raw = headers.get("authorization") or headers.get("Authorization")
    if not raw:
        raise InvalidAuthorizationHeader("Authorization header is missing")

    encoded = raw.strip()
    if encoded[: len(_BASIC_SCHEME)].lower() == _BASIC_SCHEME:
        encoded = encoded[len(_BASIC_SCHEME) :].strip()

    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        raise InvalidAuthorizationHeader("Authorization header is not base64") from exc

    parts = decoded.split(":")
    if len(parts) != 2:
        raise InvalidAuthorizationHeader("Authorization header has wrong segment count")
    return parts[0]


__all__ = ["extract_client_id"]
