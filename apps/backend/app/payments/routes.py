"""Payment endpoints used by the checkout page."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..auth.models import Profile
from ..auth.dependencies import get_current_profile
from ..auth.store import OrderOwnershipError, PaymentReplayError, UnknownOrderError, profile_store
from ..config import get_settings
from ..plans import get_plan
from .models import CreateOrderRequest, VerifyPaymentRequest
from .service import CURRENCY, PaymentGatewayError, RazorpayClient, verify_signature

LOGGER = logging.getLogger("pdfsuit.backend.payments")

router = APIRouter(prefix="/api", tags=["payments"])

# Replaced in tests with an ``httpx.MockTransport``.
razorpay_transport: httpx.AsyncBaseTransport | None = None


def _not_configured() -> JSONResponse:
    return JSONResponse({"error": "Payment gateway is not configured"}, status_code=500)


@router.post("/create-order")
async def create_order(
    payload: CreateOrderRequest,
    profile: Profile = Depends(get_current_profile),
) -> JSONResponse:
    """Create a Razorpay order priced from the server-side plan table."""

    plan = get_plan(payload.plan_type)
    if plan.price_gbp <= 0:
        return JSONResponse({"error": "The free plan does not require payment"}, status_code=400)

    settings = get_settings()
    if not settings.razorpay_key_id or not settings.razorpay_key_secret:
        return _not_configured()

    client = RazorpayClient(settings.razorpay_key_id, settings.razorpay_key_secret, transport=razorpay_transport)
    try:
        order = await client.create_order(
            plan.price_gbp * 100,
            currency=CURRENCY,
            notes={"planType": plan.key, "userId": profile.id},
        )
    except PaymentGatewayError as exc:
        return JSONResponse({"error": str(exc) or "Failed to create order"}, status_code=500)

    order_id = order.get("id")
    if not order_id:
        LOGGER.error("Razorpay returned an order without an id: %s", order)
        return JSONResponse({"error": "Failed to create order"}, status_code=500)
    profile_store.record_order(order_id, profile.id, plan.key)
    return JSONResponse(order)


@router.post("/verify-payment")
async def verify_payment(
    payload: VerifyPaymentRequest,
    profile: Profile = Depends(get_current_profile),
) -> JSONResponse:
    """Check the checkout signature and move the caller onto the plan the order was priced for."""

    secret = get_settings().razorpay_key_secret
    if not secret:
        return JSONResponse({"success": False, "error": "Payment gateway is not configured"}, status_code=500)

    if not verify_signature(
        payload.razorpay_order_id,
        payload.razorpay_payment_id,
        payload.razorpay_signature,
        secret,
    ):
        LOGGER.warning("Rejected payment %s with an invalid signature", payload.razorpay_payment_id)
        return JSONResponse({"success": False, "error": "Invalid signature"}, status_code=400)

    try:
        order = profile_store.settle_order(
            payload.razorpay_order_id,
            payload.razorpay_payment_id,
            profile.id,
        )
    except UnknownOrderError:
        return JSONResponse({"success": False, "error": "Unknown order"}, status_code=400)
    except OrderOwnershipError:
        LOGGER.warning("%s tried to claim order %s of another user", profile.id, payload.razorpay_order_id)
        return JSONResponse({"success": False, "error": "Order does not belong to this account"}, status_code=403)
    except PaymentReplayError:
        LOGGER.warning("Rejected replay of payment %s", payload.razorpay_payment_id)
        return JSONResponse({"success": False, "error": "Payment already applied"}, status_code=409)

    updated = profile_store.apply_plan(
        profile.id,
        get_plan(order.plan_type),
        subscription_id=payload.razorpay_payment_id,
    )
    LOGGER.info("Upgraded %s to the %s plan", updated.id, updated.plan_type)
    return JSONResponse({"success": True, "planType": updated.plan_type})


__all__ = ["router"]
