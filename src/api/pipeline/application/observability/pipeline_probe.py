"""Domain probe for the request pipeline.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

from infrastructure.observability.context import ObservationContext

if TYPE_CHECKING:
    from pipeline.domain import RequestContext


def observation_context_for(context: RequestContext) -> ObservationContext:
    """Observation metadata of a request context."""
    return ObservationContext(
        correlation_id=context.correlation_id,
        user_id=context.user.id if context.user else None,
        tenant_id=context.tenant.id if context.tenant else None,
        host=context.host,
        extra={"path": context.path},
    )


class PipelineProbe(Protocol):
    """Domain probe for pipeline runs."""

    def pipeline_terminated(self, step: str, location: str, status_code: int) -> None:
        """Record that a step ended the pipeline with a redirect."""
        ...

    def pipeline_failed(self, step: str, error: Exception) -> None:
        """Record that a step failed fatally."""
        ...

    def pipeline_completed(self, step_count: int) -> None:
        """Record that every step let the request through."""
        ...

    def session_recovered(self, step: str, service: str) -> None:
        """Record that an unauthorized session was recovered."""
        ...

    def with_context(self, context: ObservationContext) -> PipelineProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultPipelineProbe:
    """Default implementation of PipelineProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultPipelineProbe:
        """Create a new probe with observation context bound."""
        return DefaultPipelineProbe(logger=self._logger, context=context)

    def pipeline_terminated(self, step: str, location: str, status_code: int) -> None:
        self._logger.debug(
            "pipeline_terminated",
            step=step,
            location=location,
            status_code=status_code,
            **self._get_context_kwargs(),
        )

    def pipeline_failed(self, step: str, error: Exception) -> None:
        self._logger.error(
            "pipeline_failed",
            step=step,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def pipeline_completed(self, step_count: int) -> None:
        self._logger.debug(
            "pipeline_completed",
            step_count=step_count,
            **self._get_context_kwargs(),
        )

    def session_recovered(self, step: str, service: str) -> None:
        self._logger.warning(
            "pipeline_session_recovered",
            step=step,
            service=service,
            **self._get_context_kwargs(),
        )
