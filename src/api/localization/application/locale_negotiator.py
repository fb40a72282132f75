"""Locale negotiation for a tenant, user and request."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Mapping

from localization.application.bundle_cache import LocaleBundleCache
from localization.application.observability import DefaultLocaleProbe, LocaleProbe
from localization.domain import LocaleNotAvailableError, select_locale
from tenancy.domain import Tenant, TenantCustomization


@dataclass(frozen=True)
class NegotiatedLocale:
    """The working locale of a request and what comes with it."""

    locale: str
    translations: Mapping[str, str]
    customization: TenantCustomization | None = None


class LocaleNegotiator:
    """Chooses the request locale and loads the tenant's translations.

    Loading the tenant bundle is a side effect of negotiation: the first
    negotiation for a tenant (or the first after invalidation) fetches its
    overrides, later ones reuse the cached bundle.
    """

    def __init__(
        self,
        bundle_cache: LocaleBundleCache,
        available_locales: Collection[str],
        fallback_locale: str,
        probe: LocaleProbe | None = None,
    ):
        """Initialize the negotiator.

        Args:
            bundle_cache: Process-wide bundle cache
            available_locales: Global list of locales the system serves
            fallback_locale: Default locale when there is no tenant
            probe: Optional domain probe for observability
        """
        self._bundle_cache = bundle_cache
        self._available_locales = frozenset(available_locales)
        self._fallback_locale = fallback_locale
        self._probe = probe or DefaultLocaleProbe()

    async def negotiate(
        self,
        tenant: Tenant | None,
        user_locale: str | None,
        locale_param: str | None,
        headers: Mapping[str, str] | None = None,
    ) -> NegotiatedLocale:
        """Negotiate the locale.

        Args:
            tenant: Resolved tenant, if any
            user_locale: The signed-in user's stored preference
            locale_param: Explicitly requested locale
            headers: Headers for the outbound translation fetch

        Returns:
            The negotiated locale with its merged translation table.

        Raises:
            LocaleNotAvailableError: If the chosen locale is not globally available.
        """
        if tenant is not None:
            bundle = await self._bundle_cache.get_or_load(tenant.id, headers=headers)
            locale = select_locale(
                user_locale, locale_param, tenant.locales, tenant.default_locale
            )
        else:
            bundle = self._bundle_cache.base_bundle
            locale = select_locale(user_locale, locale_param, (), self._fallback_locale)

        tenant_id = tenant.id if tenant is not None else None
        if locale not in self._available_locales:
            self._probe.locale_not_available(locale=locale, tenant_id=tenant_id)
            raise LocaleNotAvailableError(locale)

        self._probe.locale_negotiated(locale=locale, tenant_id=tenant_id)
        return NegotiatedLocale(
            locale=locale,
            translations=bundle.for_locale(locale),
            customization=tenant.customization_for(locale) if tenant else None,
        )
