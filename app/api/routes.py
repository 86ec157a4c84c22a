"""
FastAPI routes for the account token service.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.core import errors
from app.core.config import AppSettings
from app.core.errors import InvalidAuthorizationHeader
from app.dependencies import get_app_settings, get_grant_dispatcher
from app.schemas import OAuthTokenForm
from app.services import GrantDispatcher
from app.utils.auth_header import extract_client_id

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck(settings: Annotated[AppSettings, Depends(get_app_settings)]) -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok", "environment": settings.environment}


@router.post("/account/api/oauth/token", status_code=HTTPStatus.OK)
async def issue_oauth_token(
    request: Request,
    dispatcher: Annotated[GrantDispatcher, Depends(get_grant_dispatcher)],
    grant_type: Annotated[Optional[str], Form()] = None,
    exchange_code: Annotated[Optional[str], Form()] = None,
    refresh_token: Annotated[Optional[str], Form()] = None,
    token_type: Annotated[Optional[str], Form()] = None,
    include_perms: Annotated[Optional[str], Form()] = None,
) -> JSONResponse:
    """Issue client or account tokens for the requested grant type."""
    try:
        client_id = extract_client_id(request.headers)
    except InvalidAuthorizationHeader as exc:
        logger.info("Rejected token request: %s", exc)
        raise errors.invalid_client() from None

    form = OAuthTokenForm(
        grant_type=grant_type,
        exchange_code=exchange_code,
        refresh_token=refresh_token,
        token_type=token_type,
        include_perms=include_perms,
    )
    response = await run_in_threadpool(dispatcher.dispatch, form, client_id)
    return JSONResponse(content=response.model_dump(mode="json", by_alias=True))


__all__ = ["router"]
