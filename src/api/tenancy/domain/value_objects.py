"""Value objects for the tenancy domain.

Tenants are read from an external directory and are immutable for the
duration of a request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class TenantCustomization:
    """Locale-specific presentation overrides of a tenant."""

    locale: str
    name: str
    slogan: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class Tenant:
    """A tenant ("community") of the marketplace.

    Attributes:
        id: Stable tenant identifier.
        ident: Slug used as the subdomain under the application's root domain.
        domains: Custom domains registered for the tenant.
        canonical_domain: Domain requests must be served on, if declared.
        locales: Locales the tenant supports, in preference order.
        default_locale: Locale used when no better match exists.
        only_organizations: Whether only organization accounts may use it.
        customizations: Per-locale customization records.
    """

    id: str
    ident: str
    default_locale: str
    locales: tuple[str, ...] = ()
    domains: tuple[str, ...] = ()
    canonical_domain: str | None = None
    only_organizations: bool = False
    customizations: Mapping[str, TenantCustomization] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def supports_locale(self, locale: str | None) -> bool:
        return locale is not None and locale in self.locales

    def customization_for(self, locale: str) -> TenantCustomization | None:
        return self.customizations.get(locale)

    def full_domain(self, app_domain: str) -> str:
        """Domain the tenant is reachable on, preferring its canonical domain."""
        if self.canonical_domain:
            return self.canonical_domain
        return f"{self.ident}.{app_domain}"
