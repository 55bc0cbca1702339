"""
LLM gateway protocol and shared adapter plumbing.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from recruitcall.llm.models import (
    ChatRequest,
    ChatResponse,
    LLMAuthenticationError,
    LLMError,
    LLMProvider,
    LLMProviderError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from recruitcall.shared.http import AsyncHTTPClientOwner, safe_json
from recruitcall.shared.logging import get_logger

logger = get_logger(__name__)


class LLMGateway(ABC):
    """Provider-neutral chat completion interface."""

    @property
    @abstractmethod
    def provider(self) -> LLMProvider:
        ...

    @abstractmethod
    async def chat_completion(self, request: ChatRequest) -> ChatResponse:
        """Run one chat completion.

        Raises:
            LLMError: Any provider, transport or timeout failure.
        """
        ...

    async def close(self) -> None:
        return None


class BaseLLMAdapter(AsyncHTTPClientOwner, LLMGateway):
    """HTTP adapter base: posts JSON and maps failures onto the LLMError family."""

    def __init__(
        self,
        api_key: str,
        default_model: str,
        timeout_seconds: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(http_client=http_client, timeout=timeout_seconds)
        self._api_key = api_key
        self._default_model = default_model

    @property
    def default_model(self) -> str:
        return self._default_model

    async def _post_json(
        self,
        url: str,
        payload: dict[str, Any],
        request: ChatRequest,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> tuple[dict[str, Any], float]:
        """POST ``payload`` and return (decoded body, latency in ms)."""
        client = self._get_client()
        started = time.perf_counter()
        try:
            response = await client.post(url, json=payload, headers=headers, params=params)
        except httpx.TimeoutException as e:
            raise LLMTimeoutError(
                f"{self.provider.value} request timed out",
                correlation_id=request.correlation_id,
                provider=self.provider,
                original_error=e,
            ) from e
        except httpx.HTTPError as e:
            raise LLMProviderError(
                f"{self.provider.value} request failed: {e!s}",
                correlation_id=request.correlation_id,
                provider=self.provider,
                original_error=e,
            ) from e
        latency_ms = (time.perf_counter() - started) * 1000

        if response.status_code >= 400:
            self._raise_for_status(response, request)

        return safe_json(response), latency_ms

    def _raise_for_status(self, response: httpx.Response, request: ChatRequest) -> None:
        body = safe_json(response)
        error = body.get("error") if isinstance(body.get("error"), dict) else {}
        detail = error.get("message") or response.text[:200]
        message = f"{self.provider.value} error {response.status_code}: {detail}"

        logger.error(
            "LLM request failed",
            extra={
                "provider": self.provider.value,
                "status_code": response.status_code,
                "correlation_id": request.correlation_id,
            },
        )

        error_cls: type[LLMError] = LLMProviderError
        if response.status_code in (401, 403):
            error_cls = LLMAuthenticationError
        elif response.status_code == 429:
            error_cls = LLMRateLimitError
        raise error_cls(
            message,
            correlation_id=request.correlation_id,
            provider=self.provider,
        )
