"""
Factory for creating LLM gateway instances.
"""

from typing import Any

from recruitcall.llm.gateway import BaseLLMAdapter, LLMGateway
from recruitcall.llm.gemini_adapter import GeminiAdapter
from recruitcall.llm.models import LLMProvider, LLMProviderError
from recruitcall.llm.openai_adapter import OpenAIAdapter
from recruitcall.shared.logging import get_logger

logger = get_logger(__name__)

_ADAPTERS: dict[LLMProvider, type[BaseLLMAdapter]] = {
    LLMProvider.GEMINI: GeminiAdapter,
    LLMProvider.OPENAI: OpenAIAdapter,
}

DEFAULT_MODELS: dict[LLMProvider, str] = {
    LLMProvider.GEMINI: "gemini-2.0-flash",
    LLMProvider.OPENAI: "gpt-4.1-mini",
}


def _resolve_provider(provider: LLMProvider | str) -> LLMProvider:
    if isinstance(provider, LLMProvider):
        return provider
    try:
        return LLMProvider(provider.lower())
    except ValueError as e:
        supported = ", ".join(p.value for p in LLMProvider)
        raise LLMProviderError(
            f"Unsupported LLM provider: {provider}. Supported providers: {supported}"
        ) from e


def create_llm_gateway(
    provider: LLMProvider | str,
    api_key: str,
    model: str | None = None,
    timeout_seconds: float = 30.0,
    **kwargs: Any,
) -> LLMGateway:
    """Create the summarization gateway for ``provider``.

    Args:
        provider: ``gemini`` or ``openai`` (case-insensitive), or the enum.
        api_key: API key for the provider.
        model: Model name; the provider default when omitted.
        timeout_seconds: HTTP timeout per request.
        **kwargs: ``base_url`` and ``http_client`` passed to the adapter.

    Raises:
        LLMProviderError: Unknown provider or empty API key.
    """
    resolved = _resolve_provider(provider)
    if not api_key:
        raise LLMProviderError(f"API key required for {resolved.value}.")

    model = model or DEFAULT_MODELS[resolved]
    logger.info(
        "Creating LLM gateway",
        extra={"provider": resolved.value, "model": model, "timeout_seconds": timeout_seconds},
    )
    return _ADAPTERS[resolved](
        api_key=api_key,
        default_model=model,
        timeout_seconds=timeout_seconds,
        base_url=kwargs.get("base_url"),
        http_client=kwargs.get("http_client"),
    )
