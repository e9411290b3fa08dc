"""Contact form endpoint."""

from __future__ import annotations

import logging
from json import JSONDecodeError

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..config import get_settings
from .service import (
    ContactConfigurationError,
    ContactValidationError,
    EmailDeliveryError,
    RateLimiter,
    ResendClient,
    validate_contact_form,
)

LOGGER = logging.getLogger("pdfsuit.backend.contact")

router = APIRouter(prefix="/api", tags=["contact"])

rate_limiter = RateLimiter()
# Replaced in tests with an ``httpx.MockTransport``.
resend_transport: httpx.AsyncBaseTransport | None = None


def client_address(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("x-real-ip") or "unknown"


def _failure(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse({"success": False, "error": error, "message": message}, status_code=status_code)


@router.post("/contact")
async def submit_contact(request: Request) -> JSONResponse:
    """Validate a contact submission and email it to the site owners."""

    decision = rate_limiter.check(client_address(request))
    if not decision.allowed:
        return _failure(
            429,
            "Rate limit exceeded. Please try again later.",
            "You have sent too many messages. Please wait an hour before sending another message.",
        )

    try:
        payload = await request.json()
    except JSONDecodeError:
        payload = None
    if not isinstance(payload, dict):
        payload = {}

    try:
        form = validate_contact_form(payload)
    except ContactValidationError as exc:
        return _failure(400, exc.error, exc.message)

    settings = get_settings()
    client = ResendClient(
        settings.resend_api_key,
        settings.resend_from_email,
        settings.contact_email_to,
        transport=resend_transport,
    )
    try:
        await client.send_contact_form(form)
    except ContactConfigurationError as exc:
        LOGGER.error("Contact form is not configured: %s", exc)
        return _failure(
            500,
            "Configuration error",
            "Email service is not configured. Please contact the administrator.",
        )
    except EmailDeliveryError as exc:
        LOGGER.error("Failed to send contact email: %s", exc)
        return _failure(
            500,
            "Failed to send email",
            "We could not send your message at this time. Please try again later or contact us directly.",
        )

    return JSONResponse(
        {
            "success": True,
            "message": "Your message has been sent successfully! We will get back to you soon.",
            "remaining": decision.remaining,
        }
    )


@router.get("/contact")
async def contact_method_not_allowed() -> JSONResponse:
    return _failure(405, "Method not allowed", "This endpoint only accepts POST requests.")


__all__ = ["router", "rate_limiter"]
