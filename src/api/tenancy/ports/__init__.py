"""Ports (interfaces) for the tenancy bounded context."""

from tenancy.ports.repositories import TenantDirectory

__all__ = ["TenantDirectory"]
