"""HTTP adapter for the translation service.

The translation service stores tenant-edited texts. Its payload lists
translations per key:

    {"data": [
        {
            "translation_key": "homepage.index.post_new_listing",
            "translations": [{"locale": "en", "translation": "Post"}]
        }
    ]}

which this adapter reshapes to ``{locale: {key: text}}``.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import httpx

from infrastructure.http import request_upstream
from shared_kernel.exceptions import UpstreamServiceError

SERVICE_NAME = "translation_service"


def translations_for_bundle(entries: Iterable[Mapping[str, Any]]) -> dict[str, dict[str, str]]:
    """Reshape per-key translation entries to per-locale flat tables.

    Entries with an empty translation are skipped so the base catalog text
    stays in effect.
    """
    result: dict[str, dict[str, str]] = {}
    for entry in entries:
        key = entry["translation_key"]
        for translation in entry.get("translations") or ():
            text = translation.get("translation")
            if text:
                result.setdefault(translation["locale"], {})[key] = text
    return result


class HttpTranslationService:
    """Fetches tenant translation overrides over HTTP."""

    def __init__(self, client: httpx.AsyncClient):
        """Initialize the adapter.

        Args:
            client: Client configured with the translation service base URL
        """
        self._client = client

    async def get_translations(
        self,
        tenant_id: str,
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, dict[str, str]]:
        """Fetch the tenant's translation overrides.

        A tenant without overrides (404) yields an empty mapping.

        Raises:
            UpstreamUnauthorized: If the service rejects the session.
            UpstreamServiceError: If the service fails or returns malformed data.
        """
        response = await request_upstream(
            self._client,
            SERVICE_NAME,
            "GET",
            f"/tenants/{tenant_id}/translations",
            headers=headers,
            allowed_statuses=(httpx.codes.NOT_FOUND,),
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return {}

        try:
            payload = response.json()
            return translations_for_bundle(payload.get("data") or ())
        except (ValueError, KeyError, AttributeError, TypeError) as e:
            raise UpstreamServiceError(SERVICE_NAME, f"Malformed payload: {e}") from e
