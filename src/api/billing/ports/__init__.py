"""Ports (interfaces) for the billing bounded context."""

from billing.ports.services import PaymentSettingsQuery, PlanInfoProvider

__all__ = ["PaymentSettingsQuery", "PlanInfoProvider"]
