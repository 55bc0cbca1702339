"""
Lazily created httpx client shared by the collaborator adapters.
"""

from __future__ import annotations

from typing import Any

import httpx


class AsyncHTTPClientOwner:
    """Holds an ``httpx.AsyncClient``, creating one on first use.

    An injected client (tests, shared pools) is never closed by the owner.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        **client_kwargs: Any,
    ) -> None:
        self._http_client = http_client
        self._owns_client = http_client is None
        self._timeout = timeout
        self._client_kwargs = client_kwargs

    def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                **self._client_kwargs,
            )
            self._owns_client = True
        return self._http_client

    async def close(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None


def safe_json(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body, returning {} for empty or non-object bodies."""
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
