"""
LLM gateway module used to summarize job descriptions.
"""

from recruitcall.llm.factory import create_llm_gateway
from recruitcall.llm.gateway import BaseLLMAdapter, LLMGateway
from recruitcall.llm.gemini_adapter import GeminiAdapter
from recruitcall.llm.models import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    LLMError,
    LLMProvider,
    MessageRole,
)
from recruitcall.llm.openai_adapter import OpenAIAdapter
from recruitcall.llm.summarizer import JobSummarizer

__all__ = [
    "BaseLLMAdapter",
    "LLMGateway",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "LLMError",
    "LLMProvider",
    "MessageRole",
    "GeminiAdapter",
    "OpenAIAdapter",
    "JobSummarizer",
    "create_llm_gateway",
]
