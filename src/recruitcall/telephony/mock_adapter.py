"""
Mock telephony provider for local development and tests.

Never dials anything: call requests are recorded and answered with
sequential ``MOCK_CALL_NNNNNN`` ids, or with a configured failure.
"""

from datetime import datetime, timezone
from typing import Any

from recruitcall.shared.logging import get_logger
from recruitcall.telephony.interface import (
    CallInitiationError,
    CallInitiationRequest,
    CallInitiationResponse,
    CallStatus,
    TelephonyProvider,
    WebhookEvent,
    WebhookEventType,
    WebhookParseError,
)

logger = get_logger(__name__)

_EVENT_BY_STATUS: dict[CallStatus, WebhookEventType] = {
    CallStatus.INITIATED: WebhookEventType.CALL_INITIATED,
    CallStatus.RINGING: WebhookEventType.CALL_RINGING,
    CallStatus.IN_PROGRESS: WebhookEventType.CALL_ANSWERED,
    CallStatus.FAILED: WebhookEventType.CALL_FAILED,
    CallStatus.NO_ANSWER: WebhookEventType.CALL_NO_ANSWER,
    CallStatus.BUSY: WebhookEventType.CALL_BUSY,
}


class MockTelephonyAdapter(TelephonyProvider):
    """In-memory telephony provider."""

    def __init__(self) -> None:
        self._calls: list[CallInitiationRequest] = []
        self._issued = 0
        self._failure: CallInitiationError | None = None

    def reset(self) -> None:
        self._calls.clear()
        self._issued = 0
        self._failure = None

    def configure_failure(
        self,
        should_fail: bool = True,
        error_message: str = "Mock failure",
        error_code: str = "MOCK_ERROR",
    ) -> None:
        """Make every following ``initiate_call`` raise (or stop raising)."""
        self._failure = (
            CallInitiationError(message=error_message, error_code=error_code)
            if should_fail
            else None
        )

    @property
    def calls(self) -> list[CallInitiationRequest]:
        return list(self._calls)

    def get_last_call(self) -> CallInitiationRequest | None:
        return self._calls[-1] if self._calls else None

    async def initiate_call(
        self,
        request: CallInitiationRequest,
    ) -> CallInitiationResponse:
        logger.info(
            "Mock call requested",
            extra={"to": request.to, "callback_url": request.callback_url},
        )
        if self._failure is not None:
            raise self._failure

        self._calls.append(request)
        self._issued += 1
        provider_call_id = f"MOCK_CALL_{self._issued:06d}"

        return CallInitiationResponse(
            provider_call_id=provider_call_id,
            status=CallStatus.QUEUED,
            created_at=datetime.now(timezone.utc),
            raw_response={"mock": True, "provider_call_id": provider_call_id},
        )

    def parse_webhook_event(self, payload: dict[str, Any]) -> WebhookEvent:
        # Accepts Twilio/Exotel-shaped callbacks as well as bare provider_call_id
        provider_call_id = payload.get("provider_call_id") or payload.get("CallSid")
        if not provider_call_id:
            raise WebhookParseError(
                message="Missing provider_call_id in payload",
                error_code="MISSING_PROVIDER_CALL_ID",
                provider_response=payload,
            )

        raw_status = str(payload.get("CallStatus") or payload.get("Status") or "completed")
        normalized = raw_status.lower().replace("-", "_")
        if normalized == "answered":
            normalized = CallStatus.IN_PROGRESS.value
        try:
            status = CallStatus(normalized)
        except ValueError:
            status = CallStatus.COMPLETED

        return WebhookEvent(
            event_type=_EVENT_BY_STATUS.get(status, WebhookEventType.CALL_COMPLETED),
            provider_call_id=str(provider_call_id),
            status=status,
            timestamp=datetime.now(timezone.utc),
            raw_payload=payload,
        )
