"""Domain layer for billing."""

from billing.domain.value_objects import PlanInfo, PlanOffer

__all__ = ["PlanInfo", "PlanOffer"]
