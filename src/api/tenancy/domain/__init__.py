"""Domain layer for tenancy: tenant value objects."""

from tenancy.domain.value_objects import Tenant, TenantCustomization

__all__ = ["Tenant", "TenantCustomization"]
