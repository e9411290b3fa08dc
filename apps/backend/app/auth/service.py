"""Supabase session validation and token exchange."""

from __future__ import annotations

import logging

import httpx
import jwt
from fastapi import HTTPException, status

from ..config import Settings, get_settings
from .models import AuthenticatedUser, Profile, TokenPair, TokenPayload
from .store import ProfileStore, profile_store

LOGGER = logging.getLogger("pdfsuit.backend.auth")

ALGORITHM = "HS256"
AUDIENCE = "authenticated"
SESSION_COOKIE_MAX_AGE = 7 * 24 * 60 * 60


class SupabaseAuthError(Exception):
    """Raised when Supabase rejects a token exchange."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthService:
    """Validates Supabase access tokens and relays token exchanges to Supabase."""

    def __init__(
        self,
        settings: Settings,
        store: ProfileStore,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._store = store
        self.transport = transport

    def decode(self, token: str) -> TokenPayload:
        """Decode ``token`` or raise a 401."""

        try:
            claims = jwt.decode(
                token,
                self._settings.supabase_jwt_secret,
                algorithms=[ALGORITHM],
                audience=AUDIENCE,
            )
            return TokenPayload(**claims)
        except (jwt.PyJWTError, ValueError) as exc:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token.") from exc

    def validate_access_token(self, token: str) -> AuthenticatedUser:
        """Decode and validate an access token, returning the associated user."""

        payload = self.decode(token)
        self._store.ensure(payload.sub, payload.email)
        return AuthenticatedUser(id=payload.sub, email=payload.email, role=payload.role or AUDIENCE)

    def try_validate(self, token: str | None) -> AuthenticatedUser | None:
        """Like :meth:`validate_access_token` but returns ``None`` for bad tokens."""

        if not token:
            return None
        try:
            return self.validate_access_token(token)
        except HTTPException:
            LOGGER.debug("Ignoring invalid session token")
            return None

    def profile_for(self, user: AuthenticatedUser) -> Profile:
        return self._store.ensure(user.id, user.email)

    async def exchange_code(self, code: str, *, code_verifier: str | None = None) -> TokenPair:
        """Exchange an OAuth authorisation ``code`` for a Supabase session."""

        payload = {"auth_code": code}
        if code_verifier:
            payload["code_verifier"] = code_verifier
        return await self._request_tokens("pkce", payload)

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new Supabase session."""

        return await self._request_tokens("refresh_token", {"refresh_token": refresh_token})

    async def _request_tokens(self, grant_type: str, payload: dict[str, str]) -> TokenPair:
        if not self._settings.supabase_url:
            raise SupabaseAuthError("SUPABASE_URL is not configured")

        async with httpx.AsyncClient(
            base_url=self._settings.supabase_url,
            transport=self.transport,
            timeout=30,
        ) as client:
            response = await client.post(
                "/auth/v1/token",
                params={"grant_type": grant_type},
                json=payload,
                headers={"apikey": self._settings.supabase_anon_key},
            )

        if response.status_code >= 400:
            LOGGER.warning("Supabase %s exchange failed with %s", grant_type, response.status_code)
            raise SupabaseAuthError(
                f"Supabase rejected the {grant_type} grant",
                status_code=response.status_code,
            )

        body = response.json()
        return TokenPair(
            accessToken=body["access_token"],
            refreshToken=body["refresh_token"],
            tokenType=body.get("token_type", "bearer"),
            expiresIn=body.get("expires_in"),
        )


def build_default_auth_service() -> AuthService:
    """Create the process wide :class:`AuthService` from environment settings."""

    return AuthService(get_settings(), profile_store)


auth_service = build_default_auth_service()

__all__ = [
    "AuthService",
    "SESSION_COOKIE_MAX_AGE",
    "SupabaseAuthError",
    "auth_service",
    "build_default_auth_service",
]
