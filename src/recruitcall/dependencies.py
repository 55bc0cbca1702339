"""
FastAPI dependencies resolving the long-lived services stored on app.state.
"""

from typing import Annotated

from fastapi import Depends, Request

from recruitcall.config import Settings
from recruitcall.pipeline.orchestrator import CallOrchestrator
from recruitcall.sessions.registry import SessionStore
from recruitcall.telephony.handoff import HandoffResponder
from recruitcall.telephony.interface import TelephonyProvider


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_registry(request: Request) -> SessionStore:
    return request.app.state.session_registry


def get_orchestrator(request: Request) -> CallOrchestrator:
    return request.app.state.orchestrator


def get_telephony_provider(request: Request) -> TelephonyProvider:
    return request.app.state.telephony_provider


def get_handoff_responder(
    registry: Annotated[SessionStore, Depends(get_session_registry)],
) -> HandoffResponder:
    return HandoffResponder(registry)
