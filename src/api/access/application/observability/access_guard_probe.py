"""Domain probe for access decisions.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class AccessGuardProbe(Protocol):
    """Domain probe for access guard operations."""

    def access_denied(
        self,
        gate: str,
        outcome: str,
        user_id: str | None,
        tenant_id: str | None,
    ) -> None:
        """Record that a gate redirected a user away."""
        ...

    def gate_skipped(self, gate: str, path: str) -> None:
        """Record that a gate did not apply to an exempt path."""
        ...

    def with_context(self, context: ObservationContext) -> AccessGuardProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAccessGuardProbe:
    """Default implementation of AccessGuardProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAccessGuardProbe:
        """Create a new probe with observation context bound."""
        return DefaultAccessGuardProbe(logger=self._logger, context=context)

    def access_denied(
        self,
        gate: str,
        outcome: str,
        user_id: str | None,
        tenant_id: str | None,
    ) -> None:
        self._logger.info(
            "access_denied",
            gate=gate,
            outcome=outcome,
            user_id=user_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def gate_skipped(self, gate: str, path: str) -> None:
        self._logger.debug(
            "access_gate_skipped",
            gate=gate,
            path=path,
            **self._get_context_kwargs(),
        )
