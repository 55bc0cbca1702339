"""
Data models for the LLM gateway.
"""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field


class LLMProvider(str, Enum):
    """Supported LLM providers."""

    GEMINI = "gemini"
    OPENAI = "openai"


class MessageRole(str, Enum):
    """Message roles in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A single message in a chat conversation."""

    role: MessageRole
    content: str

    model_config = {"frozen": True}


class ChatRequest(BaseModel):
    """Request for chat completion."""

    messages: list[ChatMessage]
    model: str | None = None
    temperature: float = 0.7
    max_tokens: int = 1024
    correlation_id: str = Field(default_factory=lambda: str(uuid4()))


class ChatResponse(BaseModel):
    """Response from chat completion."""

    content: str
    model: str
    provider: LLMProvider
    usage: dict[str, int] = Field(default_factory=dict)
    correlation_id: str
    latency_ms: float
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LLMError(Exception):
    """Base exception for LLM gateway errors."""

    def __init__(
        self,
        message: str,
        correlation_id: str | None = None,
        provider: LLMProvider | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.correlation_id = correlation_id
        self.provider = provider
        self.original_error = original_error


class LLMTimeoutError(LLMError):
    """Timeout error for LLM requests."""


class LLMRateLimitError(LLMError):
    """Rate limit error for LLM requests."""


class LLMAuthenticationError(LLMError):
    """Authentication error for LLM requests."""


class LLMProviderError(LLMError):
    """Generic provider error for LLM requests."""


class LLMEmptyResponseError(LLMError):
    """The provider answered but produced no text."""
