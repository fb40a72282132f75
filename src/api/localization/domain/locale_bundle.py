"""Locale bundle value object.

A bundle holds, for one tenant, the merged translation table of every
locale: the application's base catalog overlaid with the tenant's dynamic
overrides. Bundles are immutable; refreshing a tenant publishes a new one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping

KEY_SEPARATOR = "."

_EMPTY_TABLE: Mapping[str, str] = MappingProxyType({})


def flatten_catalog(
    catalog: Mapping[str, Any],
    prefix: str = "",
) -> Iterator[tuple[str, str]]:
    """Flatten a nested translation catalog into ``(dotted.key, text)`` pairs.

    Example:
        >>> dict(flatten_catalog({"layouts": {"title": "Home"}}))
        {"layouts.title": "Home"}
    """
    for key, value in catalog.items():
        path = f"{prefix}{KEY_SEPARATOR}{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            yield from flatten_catalog(value, path)
        else:
            yield path, str(value)


@dataclass(frozen=True)
class LocaleBundle:
    """Merged translation tables of one tenant, per locale."""

    tenant_id: str
    tables: Mapping[str, Mapping[str, str]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def merge(
        cls,
        tenant_id: str,
        base_catalog: Mapping[str, Mapping[str, Any]],
        overrides: Mapping[str, Mapping[str, str]],
    ) -> LocaleBundle:
        """Build a bundle from a nested base catalog and flat overrides.

        Base catalog keys are flattened with ``.``. Override keys are stored
        verbatim: they already are full paths, so separators inside them are
        never re-interpreted.

        Args:
            tenant_id: Tenant the bundle belongs to
            base_catalog: ``{locale: nested catalog}`` shipped with the app
            overrides: ``{locale: {flat key: text}}`` from the translation service
        """
        tables: dict[str, Mapping[str, str]] = {}
        for locale in sorted(set(base_catalog) | set(overrides)):
            table = dict(flatten_catalog(base_catalog.get(locale, {})))
            table.update(overrides.get(locale, {}))
            tables[locale] = MappingProxyType(table)
        return cls(tenant_id=tenant_id, tables=MappingProxyType(tables))

    @property
    def locales(self) -> tuple[str, ...]:
        return tuple(self.tables)

    def for_locale(self, locale: str) -> Mapping[str, str]:
        return self.tables.get(locale, _EMPTY_TABLE)

    def translate(self, locale: str, key: str, default: str | None = None) -> str | None:
        return self.for_locale(locale).get(key, default)
