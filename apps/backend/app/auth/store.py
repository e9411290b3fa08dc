"""In-memory persistence for profiles, usage logs and checkout orders."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional, Set

from ..plans import Plan, get_plan
from .models import Profile, UsageLogEntry


def _now() -> datetime:
    return datetime.now(timezone.utc)


class OrderClaimError(Exception):
    """A payment cannot be applied to the order it names."""


class UnknownOrderError(OrderClaimError):
    pass


class OrderOwnershipError(OrderClaimError):
    pass


class PaymentReplayError(OrderClaimError):
    pass


@dataclass(frozen=True)
class PaymentOrder:
    """A checkout order and the plan it was priced for."""

    order_id: str
    user_id: str
    plan_type: str
    payment_id: Optional[str] = None


class ProfileStore:
    """A small in-memory profile repository keyed by Supabase user id."""

    def __init__(self) -> None:
        self._profiles: Dict[str, Profile] = {}
        self._usage: List[UsageLogEntry] = []
        self._orders: Dict[str, PaymentOrder] = {}
        self._payments: Set[str] = set()
        self._lock = Lock()

    def get(self, user_id: str) -> Optional[Profile]:
        return self._profiles.get(user_id)

    def ensure(self, user_id: str, email: str | None = None) -> Profile:
        """Return the profile for ``user_id``, creating a free one on first sight."""

        with self._lock:
            profile = self._profiles.get(user_id)
            if profile is None:
                profile = Profile(
                    id=user_id,
                    email=email,
                    plan_type="free",
                    credits_remaining=get_plan("free").initial_credits,
                    created_at=_now(),
                )
                self._profiles[user_id] = profile
            return profile

    def save(self, profile: Profile) -> None:
        with self._lock:
            self._profiles[profile.id] = profile

    def reserve_credit(self, user_id: str) -> Optional[Profile]:
        """Take one credit from ``user_id``, or return ``None`` when none are left.

        The check and the decrement happen under one lock so concurrent calls
        cannot spend the same credit twice.
        """

        with self._lock:
            profile = self._profiles[user_id]
            if profile.credits_remaining <= 0:
                return None
            updated = profile.model_copy(
                update={
                    "credits_remaining": profile.credits_remaining - 1,
                    "credits_used": profile.credits_used + 1,
                    "updated_at": _now(),
                }
            )
            self._profiles[user_id] = updated
            return updated

    def refund_credit(self, user_id: str) -> Profile:
        """Give back a credit taken by :meth:`reserve_credit`."""

        with self._lock:
            profile = self._profiles[user_id]
            updated = profile.model_copy(
                update={
                    "credits_remaining": profile.credits_remaining + 1,
                    "credits_used": max(0, profile.credits_used - 1),
                    "updated_at": _now(),
                }
            )
            self._profiles[user_id] = updated
            return updated

    def apply_plan(self, user_id: str, plan: Plan, *, subscription_id: str | None = None) -> Profile:
        """Move ``user_id`` onto ``plan`` and reset the credit allowance."""

        with self._lock:
            profile = self._profiles[user_id]
            updated = profile.model_copy(
                update={
                    "plan_type": plan.key,
                    "credits_remaining": plan.initial_credits,
                    "subscription_id": subscription_id,
                    "updated_at": _now(),
                }
            )
            self._profiles[user_id] = updated
            return updated

    def record_order(self, order_id: str, user_id: str, plan_type: str) -> PaymentOrder:
        order = PaymentOrder(order_id=order_id, user_id=user_id, plan_type=plan_type)
        with self._lock:
            self._orders[order_id] = order
        return order

    def settle_order(self, order_id: str, payment_id: str, user_id: str) -> PaymentOrder:
        """Mark ``order_id`` as paid by ``payment_id`` and return it.

        An order is settled once, only by the user it was created for, and a
        payment id can settle at most one order.
        """

        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                raise UnknownOrderError(f"Unknown order {order_id}")
            if order.user_id != user_id:
                raise OrderOwnershipError(f"Order {order_id} belongs to another user")
            if order.payment_id is not None or payment_id in self._payments:
                raise PaymentReplayError(f"Payment {payment_id} was already applied")
            settled = replace(order, payment_id=payment_id)
            self._orders[order_id] = settled
            self._payments.add(payment_id)
            return settled

    def log_usage(self, entry: UsageLogEntry) -> None:
        with self._lock:
            self._usage.append(entry)

    def recent_usage(self, user_id: str, limit: int = 10) -> List[UsageLogEntry]:
        """Return the newest ``limit`` usage entries of ``user_id``, newest first."""

        with self._lock:
            entries = [entry for entry in self._usage if entry.user_id == user_id]
        return list(reversed(entries))[:limit]

    def clear(self) -> None:
        with self._lock:
            self._profiles.clear()
            self._usage.clear()
            self._orders.clear()
            self._payments.clear()


profile_store = ProfileStore()

__all__ = [
    "OrderClaimError",
    "OrderOwnershipError",
    "PaymentOrder",
    "PaymentReplayError",
    "ProfileStore",
    "UnknownOrderError",
    "profile_store",
]
