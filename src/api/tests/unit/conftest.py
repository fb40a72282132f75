"""Unit test fixtures with in-memory collaborators."""

from __future__ import annotations

from datetime import date
from types import MappingProxyType

import pytest

from identity.domain import Membership, MembershipStatus, User
from tenancy.domain import Tenant, TenantCustomization
from tenancy.infrastructure import InMemoryTenantDirectory

ROOT_DOMAIN = "example.com"
TODAY = date(2024, 5, 17)


def make_tenant(
    id: str = "t-1",
    ident: str = "sub",
    default_locale: str = "en",
    locales: tuple[str, ...] = ("en", "es"),
    **kwargs,
) -> Tenant:
    """Build a tenant with sensible test defaults."""
    return Tenant(
        id=id,
        ident=ident,
        default_locale=default_locale,
        locales=locales,
        **kwargs,
    )


def make_membership(
    user_id: str = "u-1",
    tenant_id: str = "t-1",
    status: MembershipStatus = MembershipStatus.ACCEPTED,
    **kwargs,
) -> Membership:
    return Membership(
        id=f"m-{user_id}-{tenant_id}",
        user_id=user_id,
        tenant_id=tenant_id,
        status=status,
        **kwargs,
    )


@pytest.fixture
def tenant() -> Tenant:
    """Provide a tenant reachable as sub.example.com."""
    return make_tenant(
        customizations=MappingProxyType(
            {
                "en": TenantCustomization(locale="en", name="Sub Market"),
                "es": TenantCustomization(locale="es", name="Mercado Sub"),
            }
        )
    )


@pytest.fixture
def user() -> User:
    """Provide a signed-in user with a French preference."""
    return User(id="u-1", locale="fr")


@pytest.fixture
def directory(tenant: Tenant) -> InMemoryTenantDirectory:
    """Provide a directory holding the tenant and one other."""
    return InMemoryTenantDirectory(
        [tenant, make_tenant(id="t-2", ident="other", domains=("market.test",))]
    )
