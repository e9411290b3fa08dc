"""Per-plan access checks and usage metering for tool calls."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Sequence

from fastapi import HTTPException, status

from .auth.models import Profile, UsageLogEntry
from .auth.store import ProfileStore, profile_store
from .plans import MEGABYTE, get_plan

LOGGER = logging.getLogger("pdfsuit.backend.usage")


class ToolAccessService:
    """Gatekeeper run around every metered tool invocation."""

    def __init__(self, store: ProfileStore) -> None:
        self._store = store

    def reserve_credit(self, profile: Profile) -> bool:
        """Take the credit a call will cost up front.

        Returns ``True`` when a credit was taken and ``False`` for unlimited
        plans. Raises 403 when the caller has nothing left to spend.
        """

        if get_plan(profile.plan_type).unlimited:
            return False
        if self._store.reserve_credit(profile.id) is None:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=(
                    "You have no credits remaining. Please upgrade your plan "
                    "or wait for the next billing cycle."
                ),
            )
        return True

    def check_file_sizes(self, profile: Profile, sizes: Sequence[int]) -> None:
        plan = get_plan(profile.plan_type)
        for size in sizes:
            if size > plan.max_file_size:
                limit = round(plan.max_file_size / MEGABYTE)
                raise HTTPException(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    detail=(
                        f"File size exceeds {limit}MB limit for {plan.key} plan. "
                        "Please upgrade to increase file size limit."
                    ),
                )

    def record(
        self,
        profile: Profile,
        tool_name: str,
        total_size: int,
        *,
        success: bool,
        error_message: str | None = None,
    ) -> None:
        self._store.log_usage(
            UsageLogEntry(
                user_id=profile.id,
                tool_name=tool_name,
                file_size=total_size,
                success=success,
                error_message=error_message,
                created_at=datetime.now(timezone.utc),
            )
        )

    def _refund(self, profile: Profile, charged: bool) -> None:
        if charged:
            updated = self._store.refund_credit(profile.id)
            LOGGER.debug("Refunded %s, %d credit(s) left", profile.id, updated.credits_remaining)

    @asynccontextmanager
    async def track(self, profile: Profile, tool_name: str, sizes: Sequence[int]) -> AsyncIterator[None]:
        """Reserve a credit, run the wrapped block and log its outcome.

        Refused calls are not logged; calls that fail inside the block are
        logged as failures and get their credit back.
        """

        charged = self.reserve_credit(profile)
        try:
            self.check_file_sizes(profile, sizes)
        except HTTPException:
            self._refund(profile, charged)
            raise
        total_size = sum(sizes)
        try:
            yield
        except HTTPException as exc:
            self._refund(profile, charged)
            self.record(profile, tool_name, total_size, success=False, error_message=str(exc.detail))
            raise
        except Exception as exc:
            self._refund(profile, charged)
            self.record(profile, tool_name, total_size, success=False, error_message=str(exc) or "Processing failed")
            raise
        self.record(profile, tool_name, total_size, success=True)
        LOGGER.info("%s used %s on %d byte(s)", profile.id, tool_name, total_size)


tool_access = ToolAccessService(profile_store)

__all__ = ["ToolAccessService", "tool_access"]
