"""Domain probe for tenant resolution.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events of the tenant resolution ladder.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class TenantResolverProbe(Protocol):
    """Domain probe for tenant resolution operations."""

    def tenant_resolved(self, host: str, tenant_id: str, strategy: str) -> None:
        """Record that a strategy of the ladder matched the host."""
        ...

    def tenant_unresolved(self, host: str, target: str, directory_empty: bool) -> None:
        """Record that no strategy matched the host."""
        ...

    def canonical_redirect_issued(self, host: str, canonical_domain: str) -> None:
        """Record that a request was redirected to the tenant's canonical domain."""
        ...

    def with_context(self, context: ObservationContext) -> TenantResolverProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantResolverProbe:
    """Default implementation of TenantResolverProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantResolverProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantResolverProbe(logger=self._logger, context=context)

    def tenant_resolved(self, host: str, tenant_id: str, strategy: str) -> None:
        self._logger.debug(
            "tenant_resolved",
            host=host,
            tenant_id=tenant_id,
            strategy=strategy,
            **self._get_context_kwargs(),
        )

    def tenant_unresolved(self, host: str, target: str, directory_empty: bool) -> None:
        self._logger.info(
            "tenant_unresolved",
            host=host,
            target=target,
            directory_empty=directory_empty,
            **self._get_context_kwargs(),
        )

    def canonical_redirect_issued(self, host: str, canonical_domain: str) -> None:
        self._logger.debug(
            "tenant_canonical_redirect_issued",
            host=host,
            canonical_domain=canonical_domain,
            **self._get_context_kwargs(),
        )
