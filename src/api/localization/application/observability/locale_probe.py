"""Domain probe for locale negotiation and translation bundle caching.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class LocaleProbe(Protocol):
    """Domain probe for localization operations."""

    def locale_negotiated(self, locale: str, tenant_id: str | None) -> None:
        """Record the locale chosen for a request."""
        ...

    def locale_not_available(self, locale: str, tenant_id: str | None) -> None:
        """Record that the chosen locale is missing from the global list."""
        ...

    def bundle_cache_hit(self, tenant_id: str) -> None:
        """Record that a cached bundle was reused."""
        ...

    def bundle_loaded(self, tenant_id: str, locale_count: int) -> None:
        """Record that a bundle was built from freshly fetched overrides."""
        ...

    def bundle_load_failed(self, tenant_id: str, error: Exception) -> None:
        """Record that fetching overrides for a bundle failed."""
        ...

    def bundle_discarded_stale(self, tenant_id: str) -> None:
        """Record that a bundle was invalidated while its overrides were in flight."""
        ...

    def bundle_invalidated(self, tenant_id: str | None) -> None:
        """Record that one bundle (or all, when tenant_id is None) was dropped."""
        ...

    def with_context(self, context: ObservationContext) -> LocaleProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultLocaleProbe:
    """Default implementation of LocaleProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultLocaleProbe:
        """Create a new probe with observation context bound."""
        return DefaultLocaleProbe(logger=self._logger, context=context)

    def locale_negotiated(self, locale: str, tenant_id: str | None) -> None:
        self._logger.debug(
            "locale_negotiated",
            locale=locale,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def locale_not_available(self, locale: str, tenant_id: str | None) -> None:
        self._logger.error(
            "locale_not_available",
            locale=locale,
            tenant_id=tenant_id,
            message="Negotiated locale is not in the available locales",
            **self._get_context_kwargs(),
        )

    def bundle_cache_hit(self, tenant_id: str) -> None:
        self._logger.debug(
            "locale_bundle_cache_hit",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def bundle_loaded(self, tenant_id: str, locale_count: int) -> None:
        self._logger.info(
            "locale_bundle_loaded",
            tenant_id=tenant_id,
            locale_count=locale_count,
            **self._get_context_kwargs(),
        )

    def bundle_load_failed(self, tenant_id: str, error: Exception) -> None:
        self._logger.error(
            "locale_bundle_load_failed",
            tenant_id=tenant_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def bundle_discarded_stale(self, tenant_id: str) -> None:
        self._logger.debug(
            "locale_bundle_discarded_stale",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def bundle_invalidated(self, tenant_id: str | None) -> None:
        self._logger.info(
            "locale_bundle_invalidated",
            tenant_id=tenant_id,
            scope="tenant" if tenant_id is not None else "all",
            **self._get_context_kwargs(),
        )
