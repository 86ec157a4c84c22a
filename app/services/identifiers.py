"""Allocation of account identifiers that are unused in the user directory."""

from __future__ import annotations

import logging
import uuid
from typing import Callable

from app.core.errors import IdentifierAllocationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 16


def allocate_account_id(
    is_taken: Callable[[str], bool],
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    generate: Callable[[], str] = lambda: uuid.uuid4().hex,
) -> str:
    """
    Draw random 128-bit identifiers until one is unused.

    ``is_taken`` queries the directory; its storage errors propagate on the
    first failure instead of being retried. Collisions are practically
    impossible, so running out of attempts signals a broken generator.
    """
    for attempt in range(1, max_attempts + 1):
        candidate = generate()
        if not is_taken(candidate):
            return candidate
        logger.warning("Account id collision on attempt %s", attempt)
    raise IdentifierAllocationError(
        f"No unused account id found after {max_attempts} attempts"
    )


__all__ = ["DEFAULT_MAX_ATTEMPTS", "allocate_account_id"]
