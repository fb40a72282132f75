"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped and domain-relevant metadata that should be
    included with all instrumentation events. This enables correlation
    of events across services and provides business context for debugging.

    Attributes:
        correlation_id: Event id of the current request (if generated yet).
        user_id: Identifier of the signed-in user (if applicable).
        tenant_id: Resolved tenant identifier (if applicable).
        host: Host the request was addressed to.
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(host="sub.example.com", tenant_id="t-1")
        probe = DefaultTenantResolverProbe().with_context(context)
    """

    correlation_id: str | None = None
    user_id: str | None = None
    tenant_id: str | None = None
    host: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.correlation_id is not None:
            result["correlation_id"] = self.correlation_id
        if self.user_id is not None:
            result["user_id"] = self.user_id
        if self.tenant_id is not None:
            result["tenant_id"] = self.tenant_id
        if self.host is not None:
            result["host"] = self.host
        result.update(self.extra)
        return result

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return ObservationContext(
            correlation_id=self.correlation_id,
            user_id=self.user_id,
            tenant_id=self.tenant_id,
            host=self.host,
            extra={**self.extra, **kwargs},
        )
