"""
OpenAI chat completions adapter.
"""

from __future__ import annotations

import httpx

from recruitcall.llm.gateway import BaseLLMAdapter
from recruitcall.llm.models import ChatRequest, ChatResponse, LLMProvider, LLMProviderError


class OpenAIAdapter(BaseLLMAdapter):
    """
    OpenAI HTTP adapter.
    Chat / text only.
    """

    def __init__(
        self,
        api_key: str,
        default_model: str = "gpt-4.1-mini",
        timeout_seconds: float = 30.0,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, default_model, timeout_seconds, http_client)
        self._base_url = (base_url or "https://api.openai.com/v1").rstrip("/")
        self._chat_endpoint = f"{self._base_url}/chat/completions"

    @property
    def provider(self) -> LLMProvider:
        return LLMProvider.OPENAI

    async def chat_completion(self, request: ChatRequest) -> ChatResponse:
        model = request.model or self._default_model
        payload = {
            "model": model,
            "messages": [
                {"role": m.role.value, "content": m.content}
                for m in request.messages
            ],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        data, latency_ms = await self._post_json(
            self._chat_endpoint, payload, request, headers=headers
        )

        try:
            content = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise LLMProviderError(
                "OpenAI response missing choices[0].message.content",
                correlation_id=request.correlation_id,
                provider=self.provider,
                original_error=e,
            ) from e

        usage = data.get("usage") or {}
        return ChatResponse(
            content=content,
            model=data.get("model", model),
            provider=self.provider,
            usage={k: v for k, v in usage.items() if isinstance(v, int)},
            correlation_id=request.correlation_id,
            latency_ms=latency_ms,
        )
