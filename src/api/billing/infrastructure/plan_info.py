"""Plan info adapters backed by settings and in-process state."""

from __future__ import annotations

from typing import Iterable

from billing.domain import PlanInfo, PlanOffer
from infrastructure.settings import PlanSettings


def offers_from_settings(settings: PlanSettings) -> tuple[PlanOffer, ...]:
    """Promotional offers configured for the deployment.

    An offer is listed only when both its link and price are set.
    """
    candidates = (
        ("pro_monthly", settings.pro_monthly_link, settings.pro_monthly_price),
        ("pro_biannual", settings.pro_biannual_link, settings.pro_biannual_price),
    )
    return tuple(
        PlanOffer(name=name, link=link, price=price)
        for name, link, price in candidates
        if link and price
    )


class SettingsPlanInfoProvider:
    """Plan info from configured offers and a set of expired tenants."""

    def __init__(self, settings: PlanSettings, expired_tenant_ids: Iterable[str] = ()):
        self._offers = offers_from_settings(settings)
        self._expired_tenant_ids = frozenset(expired_tenant_ids)

    async def get_plan_info(self, tenant_id: str) -> PlanInfo:
        return PlanInfo(
            expired=tenant_id in self._expired_tenant_ids,
            offers=self._offers,
        )


class InMemoryPaymentSettingsQuery:
    def __init__(self, missing: Iterable[tuple[str, str]] = ()):
        self._missing = frozenset(missing)

    async def has_missing_payment_info(self, user_id: str, tenant_id: str) -> bool:
        return (user_id, tenant_id) in self._missing
