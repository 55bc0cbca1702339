"""
Google Gemini adapter (Generative Language REST API, ``generateContent``).
"""

from __future__ import annotations

import httpx

from recruitcall.llm.gateway import BaseLLMAdapter
from recruitcall.llm.models import (
    ChatRequest,
    ChatResponse,
    LLMProvider,
    LLMProviderError,
    MessageRole,
)


class GeminiAdapter(BaseLLMAdapter):
    """Gemini HTTP adapter. System messages become ``systemInstruction``."""

    def __init__(
        self,
        api_key: str,
        default_model: str = "gemini-2.0-flash",
        timeout_seconds: float = 30.0,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, default_model, timeout_seconds, http_client)
        self._base_url = (base_url or "https://generativelanguage.googleapis.com/v1beta").rstrip("/")

    @property
    def provider(self) -> LLMProvider:
        return LLMProvider.GEMINI

    async def chat_completion(self, request: ChatRequest) -> ChatResponse:
        model = request.model or self._default_model

        system_parts = [
            {"text": m.content} for m in request.messages if m.role == MessageRole.SYSTEM
        ]
        contents = [
            {
                "role": "model" if m.role == MessageRole.ASSISTANT else "user",
                "parts": [{"text": m.content}],
            }
            for m in request.messages
            if m.role != MessageRole.SYSTEM
        ]

        payload: dict = {
            "contents": contents,
            "generationConfig": {
                "temperature": request.temperature,
                "maxOutputTokens": request.max_tokens,
            },
        }
        if system_parts:
            payload["systemInstruction"] = {"parts": system_parts}

        data, latency_ms = await self._post_json(
            f"{self._base_url}/models/{model}:generateContent",
            payload,
            request,
            headers={"x-goog-api-key": self._api_key},
        )

        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback") or {}
            raise LLMProviderError(
                f"Gemini returned no candidates (blockReason={feedback.get('blockReason')})",
                correlation_id=request.correlation_id,
                provider=self.provider,
            )

        parts = (candidates[0].get("content") or {}).get("parts") or []
        content = "".join(p.get("text") or "" for p in parts if isinstance(p, dict))

        usage_meta = data.get("usageMetadata") or {}
        return ChatResponse(
            content=content,
            model=model,
            provider=self.provider,
            usage={
                "prompt_tokens": int(usage_meta.get("promptTokenCount", 0)),
                "completion_tokens": int(usage_meta.get("candidatesTokenCount", 0)),
                "total_tokens": int(usage_meta.get("totalTokenCount", 0)),
            },
            correlation_id=request.correlation_id,
            latency_ms=latency_ms,
        )
