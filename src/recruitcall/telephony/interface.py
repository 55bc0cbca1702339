"""
Telephony provider interface definition.

- TelephonyProvider places outbound calls (initiate_call)
- and normalizes provider status callbacks (parse_webhook_event)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class CallStatus(str, Enum):
    """Call status values."""

    QUEUED = "queued"
    INITIATED = "initiated"
    RINGING = "ringing"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BUSY = "busy"
    NO_ANSWER = "no_answer"
    FAILED = "failed"
    CANCELED = "canceled"


class WebhookEventType(str, Enum):
    """Webhook event types from telephony provider."""

    CALL_INITIATED = "call.initiated"
    CALL_RINGING = "call.ringing"
    CALL_ANSWERED = "call.answered"
    CALL_COMPLETED = "call.completed"
    CALL_FAILED = "call.failed"
    CALL_NO_ANSWER = "call.no_answer"
    CALL_BUSY = "call.busy"


@dataclass(frozen=True)
class CallInitiationRequest:
    """Request to initiate an outbound call.

    ``callback_url`` is the URL the provider fetches for connection
    instructions once the callee answers.
    """

    to: str
    from_number: str
    callback_url: str
    status_callback_url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CallInitiationResponse:
    """Response from call initiation."""

    provider_call_id: str
    status: CallStatus
    created_at: datetime
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WebhookEvent:
    """Parsed status callback from telephony provider."""

    event_type: WebhookEventType
    provider_call_id: str
    status: CallStatus
    timestamp: datetime
    duration_seconds: int | None = None
    error_code: str | None = None
    error_message: str | None = None
    raw_payload: dict[str, Any] = field(default_factory=dict)


class TelephonyProviderError(Exception):
    """Base exception for telephony provider errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        provider_response: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.provider_response = provider_response or {}


class CallInitiationError(TelephonyProviderError):
    """Error during call initiation."""


class WebhookParseError(TelephonyProviderError):
    """Error parsing webhook event."""


class TelephonyProvider(ABC):
    """Abstract interface for telephony providers."""

    @abstractmethod
    async def initiate_call(
        self,
        request: CallInitiationRequest,
    ) -> CallInitiationResponse:
        """Place an outbound call.

        Returns once the provider has accepted the request, not once the
        callee answers.

        Raises:
            CallInitiationError: On a non-success response or transport failure.
        """
        ...

    @abstractmethod
    def parse_webhook_event(
        self,
        payload: dict[str, Any],
    ) -> WebhookEvent:
        """Parse a status callback from the provider."""
        ...

    async def close(self) -> None:
        """Release provider resources (HTTP clients)."""
        return None
