"""HTTP adapter for the identity service's login token exchange."""

from __future__ import annotations

from typing import Mapping

import httpx

from infrastructure.http import request_upstream
from shared_kernel.exceptions import UpstreamServiceError

SERVICE_NAME = "identity_service"


class HttpIdentityExchange:
    """Consumes one-time login tokens at the identity service.

    The service invalidates a token on first use; a second exchange of the
    same token answers 404.
    """

    def __init__(self, client: httpx.AsyncClient):
        """Initialize the adapter.

        Args:
            client: Client configured with the identity service base URL
        """
        self._client = client

    async def use_token_for_login(
        self,
        token: str,
        headers: Mapping[str, str] | None = None,
    ) -> str | None:
        """Exchange a login token for the user id it was issued to.

        Raises:
            UpstreamUnauthorized: If the service rejects the session.
            UpstreamServiceError: If the service fails or returns malformed data.
        """
        response = await request_upstream(
            self._client,
            SERVICE_NAME,
            "POST",
            "/auth_tokens/use",
            headers=headers,
            json={"token": token},
            allowed_statuses=(httpx.codes.NOT_FOUND, httpx.codes.GONE),
        )
        if response.status_code in (httpx.codes.NOT_FOUND, httpx.codes.GONE):
            return None

        try:
            user_id = response.json()["data"]["user_id"]
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamServiceError(SERVICE_NAME, f"Malformed payload: {e}") from e
        return str(user_id) if user_id is not None else None
