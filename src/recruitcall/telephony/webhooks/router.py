"""
FastAPI router for telephony provider callbacks.

- /xml (alias /connect): handoff markup, fetched when the candidate answers
- /webhooks/telephony/events: call status callbacks (log + ACK)
"""

from __future__ import annotations

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, Response, status

from recruitcall.dependencies import get_handoff_responder, get_telephony_provider
from recruitcall.shared.logging import get_logger
from recruitcall.telephony.handoff import HandoffResponder
from recruitcall.telephony.interface import TelephonyProvider, WebhookParseError

logger = get_logger(__name__)

HANDOFF_PATH = "/xml"

router = APIRouter(tags=["webhooks"])


@router.api_route(HANDOFF_PATH, methods=["GET", "POST"])
@router.api_route("/connect", methods=["GET", "POST"])
async def handoff(
    responder: Annotated[HandoffResponder, Depends(get_handoff_responder)],
) -> Response:
    result = responder.respond()
    return Response(
        content=result.body,
        status_code=result.status_code,
        media_type=result.media_type,
    )


async def _read_callback_payload(request: Request) -> dict[str, Any]:
    # Build payload deterministically from query params + form or JSON body.
    payload: dict[str, Any] = dict(request.query_params)
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            body = await request.json()
        except json.JSONDecodeError:
            body = None
        if isinstance(body, dict):
            payload.update(body)
    elif content_type:
        form = await request.form()
        payload.update({k: v for k, v in form.items() if isinstance(v, str)})
    return payload


@router.post("/webhooks/telephony/events", status_code=status.HTTP_200_OK)
async def receive_webhook_event(
    request: Request,
    provider: Annotated[TelephonyProvider, Depends(get_telephony_provider)],
) -> dict[str, bool]:
    # Status callbacks must never break the call flow: parse errors are ACKed.
    payload = await _read_callback_payload(request)

    try:
        event = provider.parse_webhook_event(payload)
    except WebhookParseError as e:
        logger.warning(
            "Unparseable telephony status callback (ACKing 200)",
            extra={"error": str(e), "error_code": e.error_code, "payload_keys": sorted(payload)},
        )
        return {"ok": False}

    logger.info(
        "Telephony call event",
        extra={
            "event_type": event.event_type.value,
            "provider_call_id": event.provider_call_id,
            "status": event.status.value,
            "duration_seconds": event.duration_seconds,
            "error_code": event.error_code,
        },
    )
    return {"ok": True}
