"""Pydantic models and dataclasses used by the authentication layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..plans import PlanType


class Profile(BaseModel):
    """Application profile attached to a Supabase user."""

    id: str
    email: str | None = None
    full_name: str | None = None
    plan_type: PlanType = "free"
    credits_remaining: int
    credits_used: int = 0
    created_at: datetime
    updated_at: datetime | None = None
    subscription_id: str | None = None

    model_config = ConfigDict(frozen=True)


class AuthenticatedUser(BaseModel):
    """Identity extracted from a validated Supabase access token."""

    id: str
    email: str | None = None
    role: str = "authenticated"


class RefreshRequest(BaseModel):
    """Payload used to exchange a refresh token for new credentials."""

    refresh_token: str | None = Field(None, alias="refreshToken")

    model_config = ConfigDict(populate_by_name=True)


class TokenPair(BaseModel):
    """Session tokens issued by Supabase and relayed to a client."""

    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")
    token_type: str = Field("bearer", alias="tokenType")
    expires_in: int | None = Field(None, alias="expiresIn")

    model_config = ConfigDict(populate_by_name=True)


class TokenPayload(BaseModel):
    """Decoded claims of a Supabase access token."""

    sub: str
    exp: int
    aud: str | list[str] | None = None
    email: str | None = None
    role: str | None = None
    iat: int | None = None

    model_config = ConfigDict(from_attributes=True)


@dataclass(frozen=True)
class UsageLogEntry:
    """One metered tool invocation."""

    user_id: str
    tool_name: str
    file_size: int
    success: bool
    error_message: str | None
    created_at: datetime


@dataclass(frozen=True)
class SessionContext:
    """Request-scoped view of who is calling, built fresh for every request."""

    access_token: str | None = None
    user: AuthenticatedUser | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


__all__ = [
    "AuthenticatedUser",
    "Profile",
    "RefreshRequest",
    "SessionContext",
    "TokenPair",
    "TokenPayload",
    "UsageLogEntry",
]
