"""
Twilio telephony provider adapter.

Twilio fetches ``Url`` (POST) once the callee answers; the handoff endpoint
answers with ``<Connect><Stream>`` TwiML.
"""

from __future__ import annotations

from typing import Any

from recruitcall.telephony.http_adapter import AcceptedCall, FormPostTelephonyAdapter
from recruitcall.telephony.interface import CallInitiationRequest, CallStatus, WebhookEventType

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"

# Twilio and Exotel share status vocabulary; Twilio adds "initiated"
TWILIO_STATUS_MAP: dict[str, CallStatus] = {
    "queued": CallStatus.QUEUED,
    "initiated": CallStatus.INITIATED,
    "ringing": CallStatus.RINGING,
    "in-progress": CallStatus.IN_PROGRESS,
    "completed": CallStatus.COMPLETED,
    "busy": CallStatus.BUSY,
    "no-answer": CallStatus.NO_ANSWER,
    "failed": CallStatus.FAILED,
    "canceled": CallStatus.CANCELED,
}

TWILIO_EVENT_MAP: dict[str, WebhookEventType] = {
    "initiated": WebhookEventType.CALL_INITIATED,
    "ringing": WebhookEventType.CALL_RINGING,
    "in-progress": WebhookEventType.CALL_ANSWERED,
    "completed": WebhookEventType.CALL_COMPLETED,
    "failed": WebhookEventType.CALL_FAILED,
    "no-answer": WebhookEventType.CALL_NO_ANSWER,
    "busy": WebhookEventType.CALL_BUSY,
}


class TwilioAdapter(FormPostTelephonyAdapter):
    """Twilio adapter using the REST Calls resource."""

    provider_name = "Twilio"
    status_map = TWILIO_STATUS_MAP
    event_map = TWILIO_EVENT_MAP

    def _calls_url(self) -> str:
        return f"{TWILIO_API_BASE}/Accounts/{self._config.twilio_account_sid}/Calls.json"

    def _auth(self) -> tuple[str, str]:
        return (self._config.twilio_account_sid, self._config.twilio_auth_token)

    def _build_form(self, request: CallInitiationRequest) -> dict[str, Any]:
        form: dict[str, Any] = {
            "To": request.to,
            "From": request.from_number,
            "Url": request.callback_url,
            "Method": "POST",
        }
        if request.status_callback_url:
            form.update(
                StatusCallback=request.status_callback_url,
                StatusCallbackEvent=["initiated", "ringing", "answered", "completed"],
                StatusCallbackMethod="POST",
            )
        return form

    def _error_details(self, data: dict[str, Any], status_code: int) -> tuple[str, str]:
        return (
            data.get("message") or f"Twilio API error: {status_code}",
            str(data.get("code") or status_code),
        )

    def _accepted_call(self, data: dict[str, Any]) -> AcceptedCall | None:
        if not data.get("sid"):
            return None
        return AcceptedCall(sid=data["sid"], status=str(data.get("status") or ""))

    def _callback_error(self, payload: dict[str, Any], status: str) -> tuple[str | None, str | None]:
        if status != "failed":
            return None, None
        return payload.get("ErrorCode"), payload.get("ErrorMessage")
