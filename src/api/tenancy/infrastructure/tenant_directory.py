"""In-memory tenant directory.

Holds an immutable snapshot of the tenant directory. Refreshes happen out
of band by swapping the whole snapshot, so a reader always sees one
consistent version.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable

from pydantic import BaseModel, Field, TypeAdapter

from tenancy.domain import Tenant, TenantCustomization


class TenantCustomizationRecord(BaseModel):
    """Serialized tenant customization."""

    name: str
    slogan: str | None = None
    description: str | None = None


class TenantRecord(BaseModel):
    """Serialized tenant as stored in a directory seed file."""

    id: str
    ident: str
    default_locale: str
    locales: list[str] = Field(default_factory=list)
    domains: list[str] = Field(default_factory=list)
    canonical_domain: str | None = None
    only_organizations: bool = False
    customizations: dict[str, TenantCustomizationRecord] = Field(default_factory=dict)

    def to_domain(self) -> Tenant:
        return Tenant(
            id=self.id,
            ident=self.ident,
            default_locale=self.default_locale,
            locales=tuple(self.locales),
            domains=tuple(self.domains),
            canonical_domain=self.canonical_domain,
            only_organizations=self.only_organizations,
            customizations=MappingProxyType(
                {
                    locale: TenantCustomization(locale=locale, **record.model_dump())
                    for locale, record in self.customizations.items()
                }
            ),
        )


_tenant_records = TypeAdapter(list[TenantRecord])


@dataclass(frozen=True)
class _Snapshot:
    tenants: tuple[Tenant, ...]
    by_domain: MappingProxyType
    by_ident: MappingProxyType


def _build_snapshot(tenants: Iterable[Tenant]) -> _Snapshot:
    ordered = tuple(tenants)
    return _Snapshot(
        tenants=ordered,
        by_domain=MappingProxyType(
            {domain: tenant for tenant in ordered for domain in tenant.domains}
        ),
        by_ident=MappingProxyType({tenant.ident: tenant for tenant in ordered}),
    )


class InMemoryTenantDirectory:
    """Tenant directory backed by an immutable in-process snapshot."""

    def __init__(self, tenants: Iterable[Tenant] = ()):
        self._snapshot = _build_snapshot(tenants)
        self._write_lock = threading.Lock()

    @classmethod
    def from_file(cls, path: Path) -> InMemoryTenantDirectory:
        """Load a directory from a JSON array of tenant records.

        Raises:
            pydantic.ValidationError: If the file does not match TenantRecord.
        """
        records = _tenant_records.validate_json(path.read_bytes())
        return cls(record.to_domain() for record in records)

    def replace_all(self, tenants: Iterable[Tenant]) -> None:
        """Publish a new directory snapshot."""
        snapshot = _build_snapshot(tenants)
        with self._write_lock:
            self._snapshot = snapshot

    async def find_by_domain(self, domain: str) -> Tenant | None:
        return self._snapshot.by_domain.get(domain)

    async def find_by_ident(self, ident: str) -> Tenant | None:
        return self._snapshot.by_ident.get(ident)

    async def count(self) -> int:
        return len(self._snapshot.tenants)

    async def first(self) -> Tenant | None:
        tenants = self._snapshot.tenants
        return tenants[0] if tenants else None
