"""Request bodies for the payment endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..plans import PlanType


class CreateOrderRequest(BaseModel):
    plan_type: PlanType = Field(..., alias="planType")

    model_config = ConfigDict(populate_by_name=True)


class VerifyPaymentRequest(BaseModel):
    """Fields returned by Razorpay Checkout after a successful payment.

    The plan is not taken from the client; it is the one the order was
    created for.
    """

    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str


__all__ = ["CreateOrderRequest", "VerifyPaymentRequest"]
