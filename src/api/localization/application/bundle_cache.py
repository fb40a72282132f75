"""Process-wide cache of tenant locale bundles.

Bundles are loaded lazily on first use for a tenant and reused until
invalidated. Publication is copy-on-write: readers take the current
mapping without locking and only ever see complete bundles. The write lock
guards the swap alone; it is never held while overrides are fetched.
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Any, Mapping

from localization.application.observability import DefaultLocaleProbe, LocaleProbe
from localization.domain import LocaleBundle
from localization.ports import TranslationService


class LocaleBundleCache:
    """Keyed cache of LocaleBundle per tenant id.

    Invalidation contract:
    - ``invalidate(tenant_id)`` drops the tenant's bundle; the next
      ``get_or_load`` refetches its overrides.
    - A fetch that was in flight when its tenant got invalidated is
      returned to its caller but not published.
    """

    def __init__(
        self,
        translation_service: TranslationService,
        base_catalog: Mapping[str, Mapping[str, Any]] | None = None,
        probe: LocaleProbe | None = None,
    ):
        self._translation_service = translation_service
        self._base_catalog = base_catalog or {}
        self._probe = probe or DefaultLocaleProbe()
        self._bundles: Mapping[str, LocaleBundle] = MappingProxyType({})
        self._generations: dict[str, int] = {}
        self._epoch = 0
        self._write_lock = threading.Lock()
        self._base_bundle = LocaleBundle.merge("", self._base_catalog, {})

    @property
    def base_bundle(self) -> LocaleBundle:
        """Bundle of the base catalog alone, for requests without a tenant."""
        return self._base_bundle

    def peek(self, tenant_id: str) -> LocaleBundle | None:
        """Return the cached bundle without loading."""
        return self._bundles.get(tenant_id)

    async def get_or_load(
        self,
        tenant_id: str,
        headers: Mapping[str, str] | None = None,
    ) -> LocaleBundle:
        """Return the tenant's bundle, fetching its overrides on a miss.

        Raises:
            UpstreamUnauthorized: If the translation service rejects the session.
            UpstreamServiceError: If the translation service fails.
        """
        bundle = self._bundles.get(tenant_id)
        if bundle is not None:
            self._probe.bundle_cache_hit(tenant_id=tenant_id)
            return bundle

        version = self._version(tenant_id)
        try:
            overrides = await self._translation_service.get_translations(
                tenant_id, headers=headers
            )
        except Exception as e:
            self._probe.bundle_load_failed(tenant_id=tenant_id, error=e)
            raise

        bundle = LocaleBundle.merge(tenant_id, self._base_catalog, overrides)

        with self._write_lock:
            if self._version(tenant_id) == version:
                self._bundles = MappingProxyType({**self._bundles, tenant_id: bundle})
                published = True
            else:
                published = False

        if published:
            self._probe.bundle_loaded(
                tenant_id=tenant_id, locale_count=len(bundle.locales)
            )
        else:
            self._probe.bundle_discarded_stale(tenant_id=tenant_id)
        return bundle

    def invalidate(self, tenant_id: str) -> None:
        """Drop the tenant's bundle so the next use refetches it."""
        with self._write_lock:
            self._generations[tenant_id] = self._generations.get(tenant_id, 0) + 1
            self._bundles = MappingProxyType(
                {key: value for key, value in self._bundles.items() if key != tenant_id}
            )
        self._probe.bundle_invalidated(tenant_id=tenant_id)

    def invalidate_all(self) -> None:
        """Drop every cached bundle."""
        with self._write_lock:
            self._epoch += 1
            self._bundles = MappingProxyType({})
        self._probe.bundle_invalidated(tenant_id=None)

    def _version(self, tenant_id: str) -> tuple[int, int]:
        return self._epoch, self._generations.get(tenant_id, 0)
