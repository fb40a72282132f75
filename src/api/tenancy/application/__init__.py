"""Application layer for tenancy."""

from tenancy.application.tenant_resolver import (
    RESOLUTION_STRATEGIES,
    TenantResolution,
    TenantResolver,
)

__all__ = ["RESOLUTION_STRATEGIES", "TenantResolution", "TenantResolver"]
