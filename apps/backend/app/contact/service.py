"""Validation, rate limiting and Resend delivery for the contact form."""

from __future__ import annotations

import html
import logging
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Dict, Mapping

import httpx

LOGGER = logging.getLogger("pdfsuit.backend.contact")

RATE_LIMIT_MAX = 5
RATE_LIMIT_WINDOW_SECONDS = 60 * 60
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
FIELD_LIMITS = (("name", 100, "Name"), ("subject", 200, "Subject"), ("message", 5000, "Message"))
RESEND_API_URL = "https://api.resend.com"


class ContactValidationError(Exception):
    """A submission the form should bounce back to the visitor."""

    def __init__(self, error: str, message: str) -> None:
        super().__init__(message)
        self.error = error
        self.message = message


class ContactConfigurationError(Exception):
    """The email service is missing required settings."""


class EmailDeliveryError(Exception):
    """Resend refused or could not be reached."""


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Fixed window limiter keyed by client address."""

    def __init__(
        self,
        max_requests: int = RATE_LIMIT_MAX,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = Lock()

    def check(self, key: str) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or now > window.reset_at:
                self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
                return RateLimitDecision(True, self.max_requests - 1)
            if window.count >= self.max_requests:
                return RateLimitDecision(False, 0)
            window.count += 1
            return RateLimitDecision(True, self.max_requests - window.count)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


@dataclass(frozen=True)
class ContactForm:
    name: str
    email: str
    subject: str
    message: str


def sanitize(value: str) -> str:
    return value.replace("<", "&lt;").replace(">", "&gt;").strip()


def validate_contact_form(payload: Mapping[str, Any]) -> ContactForm:
    """Check a raw submission and return its sanitised form."""

    values = {key: payload.get(key) for key in ("name", "email", "subject", "message")}
    if not all(isinstance(value, str) and value for value in values.values()):
        raise ContactValidationError(
            "Missing required fields",
            "Please fill in all required fields (name, email, subject, message).",
        )
    if not EMAIL_PATTERN.match(values["email"]):
        raise ContactValidationError("Invalid email address", "Please provide a valid email address.")
    for key, limit, label in FIELD_LIMITS:
        if len(values[key]) > limit:
            raise ContactValidationError(
                f"{label} too long",
                f"{label} must be less than {limit} characters.",
            )
    return ContactForm(**{key: sanitize(value) for key, value in values.items()})


def parse_recipients(raw: str | None) -> list[str]:
    if not raw:
        raise ContactConfigurationError("CONTACT_EMAIL_TO environment variable is not set.")
    recipients = [address.strip() for address in raw.split(",") if address.strip()]
    if not recipients:
        raise ContactConfigurationError("CONTACT_EMAIL_TO environment variable is empty.")
    return recipients


def render_text(form: ContactForm, submitted_at: datetime) -> str:
    return (
        "New contact form submission - PDFSuit\n\n"
        f"Name: {form.name}\n"
        f"Email: {form.email}\n"
        f"Subject: {form.subject}\n"
        f"Submitted: {submitted_at:%A, %d %B %Y %H:%M} UTC\n\n"
        f"Message:\n{form.message}\n"
    )


def render_html(form: ContactForm, submitted_at: datetime) -> str:
    # Fields are already escaped for angle brackets; quotes are escaped here for attributes.
    email = html.escape(form.email, quote=True)
    message = form.message.replace("\n", "<br>")
    return (
        "<!DOCTYPE html><html lang=\"en\"><body style=\"font-family: Arial, sans-serif;\">"
        "<h1 style=\"color: #DC2626;\">PDFSuit</h1>"
        "<h2>New Contact Form Submission</h2>"
        f"<p><strong>Name:</strong> {form.name}</p>"
        f"<p><strong>Email:</strong> <a href=\"mailto:{email}\">{form.email}</a></p>"
        f"<p><strong>Subject:</strong> {form.subject}</p>"
        f"<p><strong>Submitted:</strong> {submitted_at:%A, %d %B %Y %H:%M} UTC</p>"
        f"<div style=\"white-space: pre-wrap;\">{message}</div>"
        "</body></html>"
    )


class ResendClient:
    """Sends contact form submissions through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str | None,
        from_email: str,
        recipients: str | None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._from_email = from_email
        self._recipients = recipients
        self._transport = transport

    async def send_contact_form(self, form: ContactForm) -> dict[str, Any]:
        if not self._api_key:
            raise ContactConfigurationError("RESEND_API_KEY environment variable is not set.")
        recipients = parse_recipients(self._recipients)

        submitted_at = datetime.now(timezone.utc)
        payload = {
            "from": f"PDFSuit Contact Form <{self._from_email}>",
            "to": recipients,
            "reply_to": form.email,
            "subject": f"New Contact: {form.subject}",
            "html": render_html(form, submitted_at),
            "text": render_text(form, submitted_at),
        }
        async with httpx.AsyncClient(
            base_url=RESEND_API_URL,
            transport=self._transport,
            timeout=30,
        ) as client:
            try:
                response = await client.post(
                    "/emails",
                    json=payload,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
            except httpx.HTTPError as exc:
                raise EmailDeliveryError(f"Unable to reach Resend: {exc}") from exc

        if response.status_code >= 400:
            LOGGER.error("Resend rejected contact email with %s: %s", response.status_code, response.text)
            raise EmailDeliveryError(f"Resend API error {response.status_code}")
        return response.json()


__all__ = [
    "ContactConfigurationError",
    "ContactForm",
    "ContactValidationError",
    "EmailDeliveryError",
    "RateLimiter",
    "ResendClient",
    "parse_recipients",
    "sanitize",
    "validate_contact_form",
]
