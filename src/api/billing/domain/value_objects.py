"""Value objects for billing."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PlanOffer:
    """A promotional plan offer shown to tenant admins."""

    name: str
    link: str
    price: str


@dataclass(frozen=True)
class PlanInfo:
    """Plan status of a tenant."""

    expired: bool = False
    offers: tuple[PlanOffer, ...] = ()
