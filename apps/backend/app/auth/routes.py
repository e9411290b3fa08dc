"""API routes for authentication endpoints."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from ..config import get_settings
from .dependencies import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE, get_current_profile
from .models import Profile, RefreshRequest, TokenPair
from .service import SESSION_COOKIE_MAX_AGE, SupabaseAuthError, auth_service

LOGGER = logging.getLogger("pdfsuit.backend.auth")

router = APIRouter(prefix="/auth", tags=["auth"])

DEFAULT_NEXT = "/dashboard"


def _safe_next(value: str | None) -> str:
    """Only same-site relative paths are accepted as post-login destinations."""

    if not value or not value.startswith("/") or value.startswith("//"):
        return DEFAULT_NEXT
    return value


def set_session_cookies(response: Response, tokens: TokenPair) -> None:
    secure = get_settings().cookie_secure
    for name, value in (
        (ACCESS_TOKEN_COOKIE, tokens.access_token),
        (REFRESH_TOKEN_COOKIE, tokens.refresh_token),
    ):
        response.set_cookie(
            name,
            value,
            max_age=SESSION_COOKIE_MAX_AGE,
            path="/",
            samesite="lax",
            secure=secure,
        )


@router.get("/callback")
async def callback(
    code: str | None = None,
    next_path: str | None = Query(None, alias="next"),
) -> RedirectResponse:
    """Complete an OAuth sign-in by exchanging ``code`` for a session."""

    if not code:
        LOGGER.info("OAuth callback without a code; redirecting to login")
        return RedirectResponse("/login", status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    try:
        tokens = await auth_service.exchange_code(code)
    except SupabaseAuthError as exc:
        LOGGER.warning("OAuth code exchange failed: %s", exc)
        return RedirectResponse("/login?error=auth_failed", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    except httpx.HTTPError as exc:
        LOGGER.error("OAuth code exchange could not reach Supabase: %s", exc)
        return RedirectResponse("/login?error=server_error", status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    response = RedirectResponse(_safe_next(next_path), status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    set_session_cookies(response, tokens)
    return response


@router.post("/refresh", response_model=TokenPair, response_model_by_alias=True)
async def refresh(request: Request, payload: RefreshRequest | None = None) -> JSONResponse:
    """Exchange a refresh token for a new set of credentials."""

    refresh_token = (payload.refresh_token if payload else None) or request.cookies.get(REFRESH_TOKEN_COOKIE)
    if not refresh_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token.")

    try:
        tokens = await auth_service.refresh(refresh_token)
    except SupabaseAuthError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token.") from exc
    except httpx.HTTPError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Authentication service unavailable.") from exc

    response = JSONResponse(tokens.model_dump(by_alias=True))
    set_session_cookies(response, tokens)
    return response


@router.get("/me", response_model=Profile)
async def me(profile: Profile = Depends(get_current_profile)) -> Profile:
    """Return the profile of the currently authenticated user."""

    return profile


__all__ = ["router", "set_session_cookies"]
