"""Domain-Oriented Observability for tenant resolution."""

from tenancy.application.observability.tenant_resolver_probe import (
    DefaultTenantResolverProbe,
    TenantResolverProbe,
)

__all__ = ["DefaultTenantResolverProbe", "TenantResolverProbe"]
