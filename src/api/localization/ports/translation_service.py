"""Translation service port."""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable


@runtime_checkable
class TranslationService(Protocol):
    """Source of tenant-specific translation overrides."""

    async def get_translations(
        self,
        tenant_id: str,
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, dict[str, str]]:
        """Return the tenant's overrides as ``{locale: {key: text}}``.

        Keys are flat, already-joined paths (``"listings.new.title"``).
        """
        ...
