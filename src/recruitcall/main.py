"""
FastAPI application entry point.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from recruitcall.api.router import router as calls_router
from recruitcall.config import Settings, get_settings
from recruitcall.pipeline.errors import PipelineError
from recruitcall.pipeline.factory import build_orchestrator
from recruitcall.pipeline.orchestrator import CallOrchestrator
from recruitcall.sessions.registry import SessionRegistry, SessionStore
from recruitcall.shared.logging import correlation_id_var, get_logger, setup_logging
from recruitcall.telephony.config import TelephonyConfig, get_telephony_config
from recruitcall.telephony.factory import create_telephony_provider
from recruitcall.telephony.interface import TelephonyProvider
from recruitcall.telephony.webhooks.router import router as telephony_webhooks_router

logger = get_logger(__name__)


async def _unexpected_error(_: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)

    logger.info(
        "Application starting",
        extra={"env": settings.app_env, "llm_provider": settings.llm_provider},
    )

    yield

    logger.info("Shutting down application")
    await app.state.orchestrator.close()
    logger.info("Application shutdown complete")


def create_app(
    settings: Settings | None = None,
    telephony_config: TelephonyConfig | None = None,
    registry: SessionStore | None = None,
    orchestrator: CallOrchestrator | None = None,
    telephony_provider: TelephonyProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Missing required configuration raises ``pydantic.ValidationError`` here,
    at startup.
    """
    settings = settings or get_settings()
    telephony_config = telephony_config or get_telephony_config()
    registry = registry if registry is not None else SessionRegistry()
    telephony_provider = telephony_provider or create_telephony_provider(
        telephony_config, timeout=settings.call_timeout_seconds
    )
    orchestrator = orchestrator or build_orchestrator(
        settings, telephony_config, registry, telephony_provider=telephony_provider
    )

    app = FastAPI(
        title="RecruitCall API",
        description="Voice recruiting agent: provision, dial, hand off",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.state.settings = settings
    app.state.session_registry = registry
    app.state.orchestrator = orchestrator
    app.state.telephony_provider = telephony_provider

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        correlation_id = request.headers.get("x-request-id") or str(uuid4())
        token = correlation_id_var.set(correlation_id)
        try:
            response = await call_next(request)
        except Exception as exc:
            # Handled here so the 500 keeps the correlation id and header
            response = await _unexpected_error(request, exc)
        finally:
            correlation_id_var.reset(token)
        response.headers["X-Request-ID"] = correlation_id
        return response

    # Map domain exceptions to HTTP responses
    @app.exception_handler(PipelineError)
    async def _pipeline_error(_: Request, exc: PipelineError) -> JSONResponse:
        logger.error("Orchestration failed", extra=exc.to_dict())
        return JSONResponse(status_code=500, content=exc.to_dict())

    app.add_exception_handler(Exception, _unexpected_error)

    app.include_router(calls_router)
    app.include_router(telephony_webhooks_router)

    @app.get("/health")
    async def health_check() -> dict[str, str | bool]:
        return {
            "status": "healthy",
            "session_ready": app.state.session_registry.get() is not None,
        }

    return app


def run() -> None:
    """Start the server on the configured host and port."""
    settings = get_settings()
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
