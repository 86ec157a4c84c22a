"""
Logging utilities for the token service and operator scripts.

Records pass through a filter that masks anything shaped like an issued
token, so a stray ``%s`` of a form value never writes a bearer credential to
the log stream.
"""

import logging
import re
import sys

_NOISY_LOGGERS = ("botocore", "boto3", "urllib3")

# Compact JWS: base64url JSON header and payload (both start with `{"`, i.e.
# `eyJ`) plus a signature, optionally behind the wire prefix.
_TOKEN_PATTERN = re.compile(
    r"(?:eg1~)?eyJ[A-Za-z0-9_-]*\.eyJ[A-Za-z0-9_-]*\.[A-Za-z0-9_-]+"
)


class TokenRedactingFilter(logging.Filter):
    """Replace signed tokens in the rendered message with a short marker."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _TOKEN_PATTERN.sub(_mask, message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def _mask(match: "re.Match[str]") -> str:
    return f"<token …{match.group(0)[-6:]}>"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with the service format and token redaction."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    root = logging.getLogger()
    for handler in root.handlers:
        if not any(isinstance(f, TokenRedactingFilter) for f in handler.filters):
            handler.addFilter(TokenRedactingFilter())
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["TokenRedactingFilter", "configure_logging"]
