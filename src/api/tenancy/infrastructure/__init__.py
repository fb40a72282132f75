"""Infrastructure adapters for tenancy."""

from tenancy.infrastructure.tenant_directory import InMemoryTenantDirectory

__all__ = ["InMemoryTenantDirectory"]
