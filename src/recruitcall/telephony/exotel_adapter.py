"""
Exotel telephony provider adapter.

Places calls through the Exotel "connect" API. Exotel requests ``Url`` once
the callee answers and expects Twilio-style ``<Response>`` markup back.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from recruitcall.shared.logging import mask_secret
from recruitcall.telephony.http_adapter import AcceptedCall, FormPostTelephonyAdapter
from recruitcall.telephony.interface import CallInitiationRequest, CallStatus, WebhookEventType

EXOTEL_STATUS_MAP: dict[str, CallStatus] = {
    "queued": CallStatus.QUEUED,
    "ringing": CallStatus.RINGING,
    "in-progress": CallStatus.IN_PROGRESS,
    "completed": CallStatus.COMPLETED,
    "busy": CallStatus.BUSY,
    "no-answer": CallStatus.NO_ANSWER,
    "failed": CallStatus.FAILED,
    "canceled": CallStatus.CANCELED,
}

EXOTEL_EVENT_MAP: dict[str, WebhookEventType] = {
    "queued": WebhookEventType.CALL_INITIATED,
    "ringing": WebhookEventType.CALL_RINGING,
    "in-progress": WebhookEventType.CALL_ANSWERED,
    "completed": WebhookEventType.CALL_COMPLETED,
    "failed": WebhookEventType.CALL_FAILED,
    "canceled": WebhookEventType.CALL_FAILED,
    "no-answer": WebhookEventType.CALL_NO_ANSWER,
    "busy": WebhookEventType.CALL_BUSY,
}


def _parse_exotel_timestamp(value: str | None) -> datetime:
    # Exotel returns "YYYY-MM-DD HH:MM:SS"
    if value:
        try:
            return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)
        except ValueError:
            pass
    return datetime.now(timezone.utc)


class ExotelAdapter(FormPostTelephonyAdapter):
    """Exotel telephony provider adapter."""

    provider_name = "Exotel"
    status_map = EXOTEL_STATUS_MAP
    event_map = EXOTEL_EVENT_MAP
    # Passthru applets send CallStatus, status callbacks send Status
    status_keys = ("Status", "CallStatus")
    duration_keys = ("ConversationDuration", "DialCallDuration")

    def _calls_url(self) -> str:
        sid = self._config.exotel_sid
        return f"https://{self._config.exotel_subdomain}/v1/Accounts/{sid}/Calls/connect.json"

    def _auth(self) -> tuple[str, str]:
        return (self._config.exotel_api_key, self._config.exotel_api_token)

    def _log_context(self) -> dict[str, Any]:
        return {"exotel_sid": mask_secret(self._config.exotel_sid)}

    def _build_form(self, request: CallInitiationRequest) -> dict[str, Any]:
        form: dict[str, Any] = {
            "From": request.from_number,
            "To": request.to,
            "CallerId": request.from_number,
            "Url": request.callback_url,
            "CallType": "trans",
        }
        if request.status_callback_url:
            form["StatusCallback"] = request.status_callback_url
            form["StatusCallbackContentType"] = "application/json"
        return form

    def _error_details(self, data: dict[str, Any], status_code: int) -> tuple[str, str]:
        exception = data.get("RestException") or {}
        message = exception.get("Message") or f"Exotel API error: {status_code}"
        return message, str(exception.get("Code") or status_code)

    def _accepted_call(self, data: dict[str, Any]) -> AcceptedCall | None:
        call = data.get("Call")
        if not isinstance(call, dict) or not call.get("Sid"):
            return None
        return AcceptedCall(
            sid=call["Sid"],
            status=str(call.get("Status") or ""),
            created_at=_parse_exotel_timestamp(call.get("DateCreated")),
        )

    def _callback_timestamp(self, payload: dict[str, Any]) -> datetime:
        return _parse_exotel_timestamp(payload.get("DateUpdated"))
