"""
Recruiting call orchestrator.

One run: fetch the job description, summarize it, provision a voice agent
session for it, publish the session into the registry, then ask the
telephony provider to call the candidate. The provider fetches the handoff
URL later, from a separate request, and reads the session back from the
registry.

Steps run strictly in sequence; the first failure aborts the run. Every
collaborator call is bounded by a timeout that maps onto that step's error.
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeVar

import anyio

from recruitcall.jobs.fetcher import ContentFetchError
from recruitcall.llm.models import LLMError
from recruitcall.pipeline.errors import (
    CallTriggerError,
    FetchError,
    PipelineError,
    ProvisionError,
    ProvisionResponseError,
    SummarizeError,
)
from recruitcall.sessions.models import SessionConfig, SessionHandle
from recruitcall.sessions.provisioner import SessionProvisionerError, SessionResponseError
from recruitcall.sessions.registry import DEFAULT_SESSION_KEY, SessionStore
from recruitcall.shared.logging import get_logger
from recruitcall.telephony.interface import (
    CallInitiationRequest,
    CallInitiationResponse,
    TelephonyProviderError,
)

logger = get_logger(__name__)

T = TypeVar("T")


class ContentFetcher(Protocol):
    async def fetch_text(self, url: str) -> str: ...


class Summarizer(Protocol):
    async def summarize(self, text: str) -> str: ...


class SessionProvisioner(Protocol):
    async def provision(self, config: SessionConfig) -> SessionHandle: ...


class CallTrigger(Protocol):
    async def initiate_call(self, request: CallInitiationRequest) -> CallInitiationResponse: ...


@dataclass(frozen=True)
class OrchestratorConfig:
    """Static inputs of a run."""

    job_desc_url: str
    candidate_number: str
    caller_id: str
    merge_server_url: str
    handoff_path: str = "/xml"
    status_callback_path: str | None = None
    session_overrides: dict[str, Any] = field(default_factory=dict)
    fetch_timeout_seconds: float = 15.0
    summarize_timeout_seconds: float = 30.0
    provision_timeout_seconds: float = 20.0
    call_timeout_seconds: float = 15.0


@dataclass(frozen=True)
class OrchestrationResult:
    join_url: str
    session_id: str | None
    provider_call_id: str
    callback_url: str


class CallOrchestrator:
    """Runs the provision-then-call pipeline."""

    def __init__(
        self,
        config: OrchestratorConfig,
        fetcher: ContentFetcher,
        summarizer: Summarizer,
        provisioner: SessionProvisioner,
        call_trigger: CallTrigger,
        registry: SessionStore,
        registry_key: str = DEFAULT_SESSION_KEY,
    ) -> None:
        self._config = config
        self._fetcher = fetcher
        self._summarizer = summarizer
        self._provisioner = provisioner
        self._call_trigger = call_trigger
        self._registry = registry
        self._registry_key = registry_key

    @property
    def registry(self) -> SessionStore:
        return self._registry

    def build_callback_url(self, public_base_url: str) -> str:
        return f"{public_base_url.rstrip('/')}{self._config.handoff_path}"

    async def run(self, public_base_url: str) -> OrchestrationResult:
        """Execute one run.

        Args:
            public_base_url: Base URL the telephony provider can reach.

        Returns:
            Result once the provider has accepted the call request.

        Raises:
            PipelineError: The failing step's error (FetchError,
                SummarizeError, ProvisionError, CallTriggerError).
        """
        cfg = self._config
        started = time.perf_counter()
        logger.info("Orchestration started", extra={"public_base_url": public_base_url})

        job_text = await self._run_step(
            FetchError,
            cfg.fetch_timeout_seconds,
            (ContentFetchError,),
            self._fetcher.fetch_text,
            cfg.job_desc_url,
        )

        job_summary = await self._run_step(
            SummarizeError,
            cfg.summarize_timeout_seconds,
            (LLMError,),
            self._summarizer.summarize,
            job_text,
        )
        if not job_summary.strip():
            raise SummarizeError("Summarizer returned empty output")

        session_config = SessionConfig.for_job_summary(
            job_summary,
            cfg.merge_server_url,
            **cfg.session_overrides,
        )
        handle = await self._run_step(
            ProvisionError,
            cfg.provision_timeout_seconds,
            (SessionProvisionerError,),
            self._provisioner.provision,
            session_config,
            subkinds={SessionResponseError: ProvisionResponseError},
        )

        # Published before dialing: the provider may request the handoff URL
        # before initiate_call returns. If dialing then fails, the handle
        # stays published for a call that was never placed.
        self._registry.set(handle, self._registry_key)
        logger.info("Join URL published", extra={"join_url": handle.join_url})

        callback_url = self.build_callback_url(public_base_url)
        status_callback_url = (
            f"{public_base_url.rstrip('/')}{cfg.status_callback_path}"
            if cfg.status_callback_path
            else None
        )
        call = await self._run_step(
            CallTriggerError,
            cfg.call_timeout_seconds,
            (TelephonyProviderError,),
            self._call_trigger.initiate_call,
            CallInitiationRequest(
                to=cfg.candidate_number,
                from_number=cfg.caller_id,
                callback_url=callback_url,
                status_callback_url=status_callback_url,
            ),
        )

        logger.info(
            "Orchestration completed",
            extra={
                "provider_call_id": call.provider_call_id,
                "session_id": handle.session_id,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        return OrchestrationResult(
            join_url=handle.join_url,
            session_id=handle.session_id,
            provider_call_id=call.provider_call_id,
            callback_url=callback_url,
        )

    async def _run_step(
        self,
        error_cls: type[PipelineError],
        timeout: float,
        handled: tuple[type[Exception], ...],
        func: Callable[..., Awaitable[T]],
        *args: Any,
        subkinds: dict[type[Exception], type[PipelineError]] | None = None,
    ) -> T:
        """Await ``func(*args)`` within ``timeout``, mapping failures to ``error_cls``.

        Exceptions outside ``handled`` propagate unchanged.
        """
        started = time.perf_counter()
        try:
            with anyio.fail_after(timeout):
                result = await func(*args)
        except TimeoutError as e:
            logger.error(
                "Orchestration step timed out",
                extra={"step": error_cls.step, "timeout_seconds": timeout},
            )
            raise error_cls(f"{error_cls.step} timed out after {timeout:g}s") from e
        except handled as e:
            target = error_cls
            for exc_type, subkind in (subkinds or {}).items():
                if isinstance(e, exc_type):
                    target = subkind
                    break
            logger.error(
                "Orchestration step failed",
                extra={"step": error_cls.step, "kind": target.__name__, "error": str(e)},
            )
            raise target(str(e)) from e

        logger.info(
            "Orchestration step completed",
            extra={
                "step": error_cls.step,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        return result

    async def close(self) -> None:
        for collaborator in (self._fetcher, self._summarizer, self._provisioner, self._call_trigger):
            close = getattr(collaborator, "close", None)
            if close is not None:
                await close()
