"""
FastAPI application entrypoint for the account token service.
"""

from __future__ import annotations

from email.utils import format_datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.routes import router as api_router
from app.core import errors
from app.core.config import get_settings
from app.core.errors import EpicError
from app.core.logging import configure_logging
from app.utils.timestamps import utcnow


async def _epic_error_handler(request: Request, exc: EpicError) -> JSONResponse:
    return exc.to_response()


def _http_date() -> str:
    return format_datetime(utcnow(), usegmt=True)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Runs in ServerErrorMiddleware, outside the http middleware below; the
    # exception is re-raised to the server once this response is sent.
    response = errors.internal_server_error().to_response()
    response.headers["Date"] = _http_date()
    return response


async def _stamp_date_header(request: Request, call_next):
    response = await call_next(request)
    response.headers["Date"] = _http_date()
    return response


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Glyph Account Service",
        version="0.1.0",
        description="OAuth token issuance for game clients.",
    )
    app.add_exception_handler(EpicError, _epic_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
    app.middleware("http")(_stamp_date_header)
    app.include_router(api_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
