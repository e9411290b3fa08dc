"""Subscription plans and their limits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

PlanType = Literal["free", "pro", "enterprise"]

MEGABYTE = 1024 * 1024
# Stored for plans without a credit limit.
UNLIMITED_CREDITS = 999_999


@dataclass(frozen=True)
class Plan:
    key: PlanType
    name: str
    price_gbp: int
    credits: int | None
    max_file_size: int

    @property
    def unlimited(self) -> bool:
        return self.credits is None

    @property
    def initial_credits(self) -> int:
        return UNLIMITED_CREDITS if self.credits is None else self.credits


PLANS: dict[str, Plan] = {
    "free": Plan("free", "Free", price_gbp=0, credits=10, max_file_size=10 * MEGABYTE),
    "pro": Plan("pro", "Pro", price_gbp=9, credits=500, max_file_size=50 * MEGABYTE),
    "enterprise": Plan(
        "enterprise", "Enterprise", price_gbp=29, credits=None, max_file_size=200 * MEGABYTE
    ),
}


def get_plan(key: str | None) -> Plan:
    """Return the plan for ``key``; profiles without a plan are on ``free``."""

    return PLANS.get(key or "free", PLANS["free"])


__all__ = ["MEGABYTE", "PLANS", "Plan", "PlanType", "UNLIMITED_CREDITS", "get_plan"]
