"""Environment driven settings for the PDFSuit backend."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from pdfsuit.core.utils import env_flag

DEFAULT_FROM_EMAIL = "onboarding@resend.dev"

# Secrets shipped in Supabase quick-start material.
INSECURE_JWT_SECRETS = frozenset(
    {
        "super-secret-jwt-token-with-at-least-32-characters-long",
        "your-super-secret-jwt-token",
    }
)


@dataclass(frozen=True)
class Settings:
    """Runtime configuration resolved once per process."""

    supabase_url: str
    supabase_anon_key: str
    supabase_jwt_secret: str
    razorpay_key_id: str | None
    razorpay_key_secret: str | None
    resend_api_key: str | None
    contact_email_to: str | None
    resend_from_email: str
    cookie_secure: bool


def _load_jwt_secret() -> str:
    """Load the Supabase JWT signing secret from the environment."""

    secret = os.getenv("SUPABASE_JWT_SECRET")
    if not secret:
        raise RuntimeError(
            "SUPABASE_JWT_SECRET must be set to a non-empty value before starting the service."
        )

    if secret in INSECURE_JWT_SECRETS:
        raise RuntimeError(
            "SUPABASE_JWT_SECRET is using an insecure default value; please provide the project's secret."
        )

    return secret


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        supabase_url=os.getenv("SUPABASE_URL", "").rstrip("/"),
        supabase_anon_key=os.getenv("SUPABASE_ANON_KEY", ""),
        supabase_jwt_secret=_load_jwt_secret(),
        razorpay_key_id=os.getenv("RAZORPAY_KEY_ID") or None,
        razorpay_key_secret=os.getenv("RAZORPAY_KEY_SECRET") or None,
        resend_api_key=os.getenv("RESEND_API_KEY") or None,
        contact_email_to=os.getenv("CONTACT_EMAIL_TO") or None,
        resend_from_email=os.getenv("RESEND_FROM_EMAIL") or DEFAULT_FROM_EMAIL,
        cookie_secure=env_flag("PDFSUIT_COOKIE_SECURE", False),
    )


__all__ = ["Settings", "get_settings", "DEFAULT_FROM_EMAIL"]
