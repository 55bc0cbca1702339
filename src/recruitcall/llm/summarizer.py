"""
Job description summarizer on top of the LLM gateway.
"""

from __future__ import annotations

from recruitcall.llm.gateway import LLMGateway
from recruitcall.llm.models import (
    ChatMessage,
    ChatRequest,
    LLMEmptyResponseError,
    MessageRole,
)
from recruitcall.llm.prompts import build_summarize_prompt
from recruitcall.shared.logging import get_logger

logger = get_logger(__name__)


class JobSummarizer:
    """Condenses scraped job text into a short natural-language summary."""

    def __init__(
        self,
        gateway: LLMGateway,
        temperature: float = 0.2,
        max_tokens: int = 1024,
    ) -> None:
        self._gateway = gateway
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def summarize(self, text: str) -> str:
        """Summarize ``text``.

        Raises:
            LLMEmptyResponseError: The model returned only whitespace.
            LLMError: Any other gateway failure.
        """
        request = ChatRequest(
            messages=[ChatMessage(role=MessageRole.USER, content=build_summarize_prompt(text))],
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        response = await self._gateway.chat_completion(request)

        summary = response.content.strip()
        if not summary:
            raise LLMEmptyResponseError(
                "Summarizer returned empty output",
                correlation_id=request.correlation_id,
                provider=response.provider,
            )

        logger.info(
            "Job summarized",
            extra={
                "provider": response.provider.value,
                "model": response.model,
                "input_chars": len(text),
                "summary_chars": len(summary),
                "latency_ms": round(response.latency_ms, 1),
            },
        )
        return summary

    async def close(self) -> None:
        await self._gateway.close()
