"""
Trigger endpoint: one request runs one orchestration.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from recruitcall.config import Settings
from recruitcall.dependencies import get_app_settings, get_orchestrator
from recruitcall.pipeline.orchestrator import CallOrchestrator
from recruitcall.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["calls"])

CALL_INITIATED_MESSAGE = "Call initiated successfully!"


def resolve_public_base_url(request: Request, override: str = "") -> str:
    """
    Public base URL reachable by the telephony provider.

    Priority:
      1) configured PUBLIC_BASE_URL
      2) X-Forwarded-Proto / X-Forwarded-Host (when behind tunnel/proxy)
      3) scheme + host of the request itself
    """
    if override:
        return override.rstrip("/")

    xf_host = (request.headers.get("x-forwarded-host") or "").split(",")[0].strip()
    if xf_host:
        xf_proto = (request.headers.get("x-forwarded-proto") or "").split(",")[0].strip()
        return f"{xf_proto or 'https'}://{xf_host}"

    return str(request.base_url).rstrip("/")


@router.get("/", response_class=PlainTextResponse)
async def trigger_call(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
    orchestrator: Annotated[CallOrchestrator, Depends(get_orchestrator)],
) -> str:
    # PipelineError and anything unexpected become 500 JSON in main's handlers
    public_base_url = resolve_public_base_url(request, settings.public_base_url)
    result = await orchestrator.run(public_base_url)
    logger.info(
        "Call initiated",
        extra={"provider_call_id": result.provider_call_id, "callback_url": result.callback_url},
    )
    return CALL_INITIATED_MESSAGE
