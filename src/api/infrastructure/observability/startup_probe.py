"""Domain probe for application startup and lifecycle events.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events during application initialization and shutdown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def application_started(self, tenant_count: int, available_locales: list[str]) -> None:
        """Record that the application finished starting up."""
        ...

    def tenant_directory_empty(self) -> None:
        """Record that no tenants are known, so every request goes to onboarding."""
        ...

    def application_stopped(self) -> None:
        """Record that upstream clients were closed on shutdown."""
        ...

    def with_context(self, context: ObservationContext) -> StartupProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultStartupProbe:
        """Create a new probe with observation context bound."""
        return DefaultStartupProbe(logger=self._logger, context=context)

    def application_started(self, tenant_count: int, available_locales: list[str]) -> None:
        self._logger.info(
            "application_started",
            tenant_count=tenant_count,
            available_locales=available_locales,
            **self._get_context_kwargs(),
        )

    def tenant_directory_empty(self) -> None:
        self._logger.warning(
            "tenant_directory_empty",
            message="All requests will be redirected to tenant onboarding",
            **self._get_context_kwargs(),
        )

    def application_stopped(self) -> None:
        self._logger.info("application_stopped", **self._get_context_kwargs())
