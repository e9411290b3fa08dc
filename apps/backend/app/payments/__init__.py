"""Razorpay payment glue."""

from .routes import router as payments_router
from .service import compute_signature, verify_signature

__all__ = ["compute_signature", "payments_router", "verify_signature"]
