"""Repository protocols (ports) for the tenancy bounded context.

The tenant directory is owned by another system; this context only reads
it. Implementations must return results from one consistent snapshot per
call.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tenancy.domain import Tenant


@runtime_checkable
class TenantDirectory(Protocol):
    """Read-only access to the tenant directory."""

    async def find_by_domain(self, domain: str) -> Tenant | None:
        """Return the tenant that registered the exact domain, if any."""
        ...

    async def find_by_ident(self, ident: str) -> Tenant | None:
        """Return the tenant with the given ident (slug), if any."""
        ...

    async def count(self) -> int:
        """Return the number of tenants in the directory."""
        ...

    async def first(self) -> Tenant | None:
        """Return the first tenant in directory order, if any."""
        ...
