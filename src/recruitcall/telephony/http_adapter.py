"""
Shared plumbing for REST telephony providers.

Exotel and Twilio both place calls with a form-encoded POST under HTTP basic
auth and report call progress with form (or JSON) status callbacks. Subclasses
supply the endpoint, the form fields and how to read the provider's response.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar

import httpx

from recruitcall.shared.http import AsyncHTTPClientOwner, safe_json
from recruitcall.shared.logging import get_logger
from recruitcall.telephony.config import TelephonyConfig
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


@dataclass(frozen=True)
class AcceptedCall:
    """The parts of a successful call-creation response the pipeline keeps."""

    sid: str
    status: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class FormPostTelephonyAdapter(AsyncHTTPClientOwner, TelephonyProvider):
    """Template for providers whose Calls API takes a form POST."""

    provider_name: ClassVar[str]
    status_map: ClassVar[dict[str, CallStatus]]
    event_map: ClassVar[dict[str, WebhookEventType]]
    # Callback keys, first match wins
    status_keys: ClassVar[tuple[str, ...]] = ("CallStatus",)
    duration_keys: ClassVar[tuple[str, ...]] = ("CallDuration",)

    def __init__(
        self,
        config: TelephonyConfig,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        super().__init__(http_client=http_client, timeout=timeout)
        self._config = config

    @abstractmethod
    def _calls_url(self) -> str: ...

    @abstractmethod
    def _auth(self) -> tuple[str, str]: ...

    @abstractmethod
    def _build_form(self, request: CallInitiationRequest) -> dict[str, Any]: ...

    @abstractmethod
    def _error_details(self, data: dict[str, Any], status_code: int) -> tuple[str, str]:
        """Return (message, error code) for a failed call-creation response."""

    @abstractmethod
    def _accepted_call(self, data: dict[str, Any]) -> AcceptedCall | None:
        """Read the created call, or None when the body lacks a call id."""

    def _log_context(self) -> dict[str, Any]:
        return {}

    async def initiate_call(
        self,
        request: CallInitiationRequest,
    ) -> CallInitiationResponse:
        client = self._get_client()
        logger.info(
            f"Initiating {self.provider_name} call",
            extra={"to": request.to, "callback_url": request.callback_url, **self._log_context()},
        )

        try:
            response = await client.post(
                self._calls_url(),
                data=self._build_form(request),
                auth=self._auth(),
            )
        except httpx.HTTPError as e:
            logger.exception(f"HTTP error during {self.provider_name} call initiation")
            raise CallInitiationError(
                message=f"HTTP error: {e!s}",
                error_code="HTTP_ERROR",
            ) from e

        data = safe_json(response)

        if response.status_code >= 400:
            message, code = self._error_details(data, response.status_code)
            logger.error(
                f"{self.provider_name} call initiation failed",
                extra={"status_code": response.status_code, "error": data or response.text[:200]},
            )
            raise CallInitiationError(message=message, error_code=code, provider_response=data)

        call = self._accepted_call(data)
        if call is None:
            raise CallInitiationError(
                message=f"{self.provider_name} response missing call id",
                error_code="INVALID_RESPONSE",
                provider_response=data,
            )

        logger.info(f"{self.provider_name} call accepted", extra={"provider_call_id": call.sid})
        return CallInitiationResponse(
            provider_call_id=call.sid,
            status=self.status_map.get(call.status.lower(), CallStatus.QUEUED),
            created_at=call.created_at,
            raw_response=data,
        )

    def _callback_timestamp(self, payload: dict[str, Any]) -> datetime:
        return datetime.now(timezone.utc)

    def _callback_error(self, payload: dict[str, Any], status: str) -> tuple[str | None, str | None]:
        return None, None

    def parse_webhook_event(self, payload: dict[str, Any]) -> WebhookEvent:
        call_sid = payload.get("CallSid")
        if not call_sid:
            raise WebhookParseError(
                message="Missing CallSid in webhook payload",
                error_code="MISSING_CALL_SID",
                provider_response=payload,
            )

        call_status = next(
            (str(payload[k]).lower() for k in self.status_keys if payload.get(k)), ""
        )
        if not call_status:
            raise WebhookParseError(
                message=f"Missing {self.status_keys[0]} in webhook payload",
                error_code="MISSING_CALL_STATUS",
                provider_response=payload,
            )

        duration_seconds = None
        raw_duration = next((payload[k] for k in self.duration_keys if payload.get(k)), None)
        if raw_duration is not None:
            try:
                duration_seconds = int(raw_duration)
            except (ValueError, TypeError):
                logger.warning(
                    "Ignoring unparseable call duration",
                    extra={"provider_call_id": call_sid, "duration": raw_duration},
                )

        error_code, error_message = self._callback_error(payload, call_status)
        return WebhookEvent(
            event_type=self.event_map.get(call_status, WebhookEventType.CALL_COMPLETED),
            provider_call_id=str(call_sid),
            status=self.status_map.get(call_status, CallStatus.COMPLETED),
            timestamp=self._callback_timestamp(payload),
            duration_seconds=duration_seconds,
            error_code=error_code,
            error_message=error_message,
            raw_payload=payload,
        )
