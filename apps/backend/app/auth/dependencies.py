"""FastAPI dependencies for authentication."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .models import AuthenticatedUser, Profile, SessionContext
from .service import auth_service

ACCESS_TOKEN_COOKIE = "sb-access-token"
REFRESH_TOKEN_COOKIE = "sb-refresh-token"

bearer_scheme = HTTPBearer(auto_error=False)


def _bearer_token(request: Request) -> str | None:
    scheme, _, value = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def build_session(request: Request) -> SessionContext:
    """Build the :class:`SessionContext` for ``request`` without raising."""

    token = _bearer_token(request) or request.cookies.get(ACCESS_TOKEN_COOKIE)
    return SessionContext(access_token=token, user=auth_service.try_validate(token))


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthenticatedUser:
    """Resolve the current user from a bearer token or the session cookie."""

    token = credentials.credentials if credentials is not None else None
    token = token or request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth_service.validate_access_token(token)


def get_current_profile(user: AuthenticatedUser = Depends(get_current_user)) -> Profile:
    """Return the profile of the authenticated caller."""

    return auth_service.profile_for(user)


__all__ = [
    "ACCESS_TOKEN_COOKIE",
    "REFRESH_TOKEN_COOKIE",
    "bearer_scheme",
    "build_session",
    "get_current_profile",
    "get_current_user",
]
