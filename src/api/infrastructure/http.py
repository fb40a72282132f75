"""Shared helpers for httpx-based upstream service adapters.

Every adapter maps upstream failures the same way: a 401 means the
session itself is no longer valid, anything else is a service failure.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from shared_kernel.exceptions import UpstreamServiceError, UpstreamUnauthorized


async def request_upstream(
    client: httpx.AsyncClient,
    service: str,
    method: str,
    url: str,
    headers: Mapping[str, str] | None = None,
    allowed_statuses: tuple[int, ...] = (),
    **kwargs: Any,
) -> httpx.Response:
    """Send a request to an upstream service and check its status.

    Args:
        client: Client to send the request with
        service: Service name used in error messages
        method: HTTP method
        url: Absolute URL or path relative to the client's base URL
        headers: Extra headers (e.g. the request's event id)
        allowed_statuses: Non-2xx statuses returned to the caller as-is
        **kwargs: Forwarded to ``client.request``

    Raises:
        UpstreamUnauthorized: On HTTP 401.
        UpstreamServiceError: On transport errors and other non-2xx statuses.
    """
    try:
        response = await client.request(method, url, headers=dict(headers or {}), **kwargs)
    except httpx.HTTPError as e:
        raise UpstreamServiceError(service, f"Request failed: {e}") from e

    if response.status_code == httpx.codes.UNAUTHORIZED:
        raise UpstreamUnauthorized(service)

    if response.is_success or response.status_code in allowed_statuses:
        return response

    raise UpstreamServiceError(
        service, f"Unexpected status {response.status_code} for {method} {url}"
    )
