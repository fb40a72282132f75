"""Infrastructure adapters for billing."""

from billing.infrastructure.plan_info import (
    InMemoryPaymentSettingsQuery,
    SettingsPlanInfoProvider,
)

__all__ = ["InMemoryPaymentSettingsQuery", "SettingsPlanInfoProvider"]
