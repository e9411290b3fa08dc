"""Razorpay order creation and payment signature checks."""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
from typing import Any, Mapping

import httpx

LOGGER = logging.getLogger("pdfsuit.backend.payments")

RAZORPAY_API_URL = "https://api.razorpay.com"
CURRENCY = "GBP"


class PaymentGatewayError(Exception):
    """Raised when Razorpay refuses or cannot serve a request."""


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Return the hex HMAC-SHA256 of ``"{order_id}|{payment_id}"`` keyed by ``secret``."""

    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    expected = compute_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected, signature)


def build_receipt() -> str:
    return f"receipt_{int(time.time() * 1000)}"


class RazorpayClient:
    """Minimal async client for the Razorpay Orders API."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._auth = (key_id, key_secret)
        self._transport = transport

    async def create_order(
        self,
        amount: int,
        *,
        currency: str = CURRENCY,
        receipt: str | None = None,
        notes: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """Create an order for ``amount`` in the currency's smallest unit."""

        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt or build_receipt(),
            "notes": dict(notes or {}),
        }
        async with httpx.AsyncClient(
            base_url=RAZORPAY_API_URL,
            auth=self._auth,
            transport=self._transport,
            timeout=30,
        ) as client:
            try:
                response = await client.post("/v1/orders", json=payload)
            except httpx.HTTPError as exc:
                raise PaymentGatewayError(f"Unable to reach Razorpay: {exc}") from exc

        if response.status_code >= 400:
            try:
                description = response.json()["error"]["description"]
            except (ValueError, KeyError, TypeError):
                description = response.text or "Failed to create order"
            LOGGER.error("Razorpay order creation failed with %s: %s", response.status_code, description)
            raise PaymentGatewayError(description)

        order = response.json()
        LOGGER.info("Created Razorpay order %s for %s %s", order.get("id"), amount, currency)
        return order


__all__ = [
    "CURRENCY",
    "PaymentGatewayError",
    "RazorpayClient",
    "build_receipt",
    "compute_signature",
    "verify_signature",
]
