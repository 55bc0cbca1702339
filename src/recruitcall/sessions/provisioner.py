"""
Ultravox session provisioner.

Creates a voice agent call/session and returns its ``joinUrl``, the media
stream endpoint the telephony provider connects to.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from recruitcall.sessions.models import SessionConfig, SessionHandle
from recruitcall.shared.http import AsyncHTTPClientOwner
from recruitcall.shared.logging import get_logger

logger = get_logger(__name__)


class SessionProvisionerError(Exception):
    """Base exception for session provisioning errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        provider_response: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.provider_response = provider_response


class SessionResponseError(SessionProvisionerError):
    """Provisioning succeeded at HTTP level but the body has no usable join URL."""


class UltravoxProvisioner(AsyncHTTPClientOwner):
    """Provisions agent sessions through ``POST /api/calls``."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.ultravox.ai",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 20.0,
    ) -> None:
        super().__init__(http_client=http_client, timeout=timeout)
        self._api_key = api_key
        self._calls_endpoint = f"{base_url.rstrip('/')}/api/calls"

    async def provision(self, config: SessionConfig) -> SessionHandle:
        """Create a session for ``config``.

        Raises:
            SessionProvisionerError: Transport failure or non-2xx response.
            SessionResponseError: Body is not JSON, lacks ``joinUrl``, or has
                fields of the wrong type.
        """
        client = self._get_client()
        logger.info(
            "Creating Ultravox agent",
            extra={"model": config.model, "voice": config.voice, "medium": config.medium},
        )

        try:
            response = await client.post(
                self._calls_endpoint,
                json=config.to_payload(),
                headers={"X-API-Key": self._api_key},
            )
        except httpx.HTTPError as e:
            raise SessionProvisionerError(f"Ultravox request failed: {e!s}") from e

        if not response.is_success:
            logger.error(
                "Ultravox session creation failed",
                extra={"status_code": response.status_code, "body": response.text[:500]},
            )
            raise SessionProvisionerError(
                f"Ultravox API error: {response.status_code}",
                status_code=response.status_code,
                provider_response=response.text,
            )

        return self._parse_handle(response)

    @staticmethod
    def _parse_handle(response: httpx.Response) -> SessionHandle:
        try:
            data = response.json()
        except ValueError as e:
            raise SessionResponseError(
                f"Failed to parse Ultravox response: {response.text[:200]}",
                status_code=response.status_code,
                provider_response=response.text,
            ) from e

        join_url = data.get("joinUrl") if isinstance(data, dict) else None
        if not isinstance(join_url, str) or not join_url.strip():
            raise SessionResponseError(
                "Ultravox response missing joinUrl",
                status_code=response.status_code,
                provider_response=data,
            )

        try:
            return SessionHandle(join_url=join_url.strip(), session_id=data.get("callId"))
        except ValidationError as e:
            raise SessionResponseError(
                f"Invalid Ultravox session in response: {e.error_count()} field error(s)",
                status_code=response.status_code,
                provider_response=data,
            ) from e
