"""Service protocols (ports) for billing."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from billing.domain import PlanInfo


@runtime_checkable
class PlanInfoProvider(Protocol):
    async def get_plan_info(self, tenant_id: str) -> PlanInfo:
        """Return plan expiration status and promotional pricing of a tenant."""
        ...


@runtime_checkable
class PaymentSettingsQuery(Protocol):
    async def has_missing_payment_info(self, user_id: str, tenant_id: str) -> bool:
        """Whether the user has open listings but no way to get paid."""
        ...
