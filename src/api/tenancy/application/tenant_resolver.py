"""Tenant resolution for inbound requests.

Resolves the tenant owning a request host by walking an ordered ladder of
strategies; the first strategy that finds a tenant wins:

1. ``by_domain``: exact match of the host against a registered domain
2. ``by_ident``: the host minus the application's root domain suffix,
   matched against tenant idents (``sub.example.com`` -> ``sub``)
3. ``only_tenant``: the only tenant in the directory, if there is exactly one

Resolution is a pure function of the host and the directory snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, NamedTuple

from shared_kernel.redirects import TerminalRedirect
from tenancy.application.observability import (
    DefaultTenantResolverProbe,
    TenantResolverProbe,
)
from tenancy.domain import Tenant
from tenancy.ports.repositories import TenantDirectory


class ResolutionStrategy(NamedTuple):
    """A named rung of the resolution ladder."""

    name: str
    find: Callable[[str, TenantDirectory, str], Awaitable[Tenant | None]]


async def by_domain(host: str, directory: TenantDirectory, root_domain: str) -> Tenant | None:
    return await directory.find_by_domain(host)


async def by_ident(host: str, directory: TenantDirectory, root_domain: str) -> Tenant | None:
    ident = host.removesuffix(f".{root_domain}")
    if not ident:
        return None
    return await directory.find_by_ident(ident)


async def only_tenant(host: str, directory: TenantDirectory, root_domain: str) -> Tenant | None:
    if await directory.count() == 1:
        return await directory.first()
    return None


RESOLUTION_STRATEGIES: tuple[ResolutionStrategy, ...] = (
    ResolutionStrategy("domain", by_domain),
    ResolutionStrategy("ident", by_ident),
    ResolutionStrategy("only_tenant", only_tenant),
)


@dataclass(frozen=True)
class TenantResolution:
    """Result of resolving a host.

    Exactly one of ``tenant`` and ``redirect`` is set.
    """

    tenant: Tenant | None = None
    strategy: str | None = None
    redirect: TerminalRedirect | None = None

    @property
    def resolved(self) -> bool:
        return self.tenant is not None


class TenantResolver:
    """Resolves tenants for hosts and enforces canonical tenant domains."""

    def __init__(
        self,
        directory: TenantDirectory,
        root_domain: str,
        new_tenant_path: str,
        tenant_not_found_path: str,
        not_found_redirect: str | None = None,
        strategies: tuple[ResolutionStrategy, ...] = RESOLUTION_STRATEGIES,
        probe: TenantResolverProbe | None = None,
    ):
        """Initialize the resolver.

        Args:
            directory: Tenant directory to query
            root_domain: Application root domain without port
            new_tenant_path: Target when the directory holds no tenants
            tenant_not_found_path: Target when tenants exist but none match
            not_found_redirect: Deployment override for both targets
            strategies: Ordered resolution ladder
            probe: Optional domain probe for observability
        """
        self._directory = directory
        self._root_domain = root_domain
        self._new_tenant_path = new_tenant_path
        self._tenant_not_found_path = tenant_not_found_path
        self._not_found_redirect = not_found_redirect
        self._strategies = strategies
        self._probe = probe or DefaultTenantResolverProbe()

    async def resolve(self, host: str) -> TenantResolution:
        """Resolve the tenant owning ``host``.

        Returns:
            A resolution carrying either the tenant or the redirect for an
            unresolved host (tenant creation page when the directory is
            empty, tenant-not-found page otherwise).
        """
        for strategy in self._strategies:
            tenant = await strategy.find(host, self._directory, self._root_domain)
            if tenant is not None:
                self._probe.tenant_resolved(
                    host=host, tenant_id=tenant.id, strategy=strategy.name
                )
                return TenantResolution(tenant=tenant, strategy=strategy.name)

        directory_empty = await self._directory.count() == 0
        if self._not_found_redirect:
            target = self._not_found_redirect
        elif directory_empty:
            target = self._new_tenant_path
        else:
            target = self._tenant_not_found_path

        self._probe.tenant_unresolved(
            host=host, target=target, directory_empty=directory_empty
        )
        return TenantResolution(redirect=TerminalRedirect.temporary(target))

    def canonical_redirect(
        self,
        tenant: Tenant,
        scheme: str,
        host: str,
        fullpath: str,
    ) -> TerminalRedirect | None:
        """Permanent redirect to the tenant's canonical domain, if needed."""
        domain = tenant.canonical_domain
        if not domain or host == domain:
            return None

        self._probe.canonical_redirect_issued(host=host, canonical_domain=domain)
        return TerminalRedirect.permanent(f"{scheme}://{domain}{fullpath}")
