"""
Pytest configuration and shared fixtures.

Collaborators are replaced by in-memory fakes that record the order in which
the orchestrator calls them.
"""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from recruitcall.config import Settings
from recruitcall.jobs.fetcher import ContentFetchError
from recruitcall.main import create_app
from recruitcall.pipeline.orchestrator import CallOrchestrator, OrchestratorConfig
from recruitcall.sessions.models import SessionConfig, SessionHandle
from recruitcall.sessions.registry import SessionRegistry
from recruitcall.telephony.config import ProviderType, TelephonyConfig
from recruitcall.telephony.mock_adapter import MockTelephonyAdapter

JOB_TEXT = "Looking for a backend engineer..."
JOB_SUMMARY = "Backend engineer role."
JOIN_URL = "wss://example/session/123"


class CallLog:
    """Ordered record of collaborator invocations."""

    def __init__(self) -> None:
        self.entries: list[tuple[str, Any]] = []

    def record(self, step: str, value: Any) -> None:
        self.entries.append((step, value))

    @property
    def steps(self) -> list[str]:
        return [step for step, _ in self.entries]


class FakeFetcher:
    def __init__(self, log: CallLog, text: str = JOB_TEXT, error: Exception | None = None) -> None:
        self._log = log
        self._text = text
        self._error = error

    async def fetch_text(self, url: str) -> str:
        self._log.record("fetch", url)
        if self._error is not None:
            raise self._error
        return self._text


class FakeSummarizer:
    def __init__(self, log: CallLog, summary: str = JOB_SUMMARY, error: Exception | None = None) -> None:
        self._log = log
        self._summary = summary
        self._error = error

    async def summarize(self, text: str) -> str:
        self._log.record("summarize", text)
        if self._error is not None:
            raise self._error
        return self._summary


class FakeProvisioner:
    def __init__(
        self,
        log: CallLog,
        registry: SessionRegistry | None = None,
        join_url: str = JOIN_URL,
        error: Exception | None = None,
    ) -> None:
        self._log = log
        self._registry = registry
        self._join_url = join_url
        self._error = error
        self.registry_seen_before_return: SessionHandle | None = None

    async def provision(self, config: SessionConfig) -> SessionHandle:
        self._log.record("provision", config)
        if self._registry is not None:
            self.registry_seen_before_return = self._registry.get()
        if self._error is not None:
            raise self._error
        return SessionHandle(join_url=self._join_url, session_id="session-123")


class RecordingTelephony(MockTelephonyAdapter):
    """Mock adapter that also snapshots the registry when dialing."""

    def __init__(self, log: CallLog, registry: SessionRegistry) -> None:
        super().__init__()
        self._log = log
        self._registry = registry
        self.registry_at_dial: SessionHandle | None = None

    async def initiate_call(self, request):
        self._log.record("trigger", request)
        self.registry_at_dial = self._registry.get()
        return await super().initiate_call(request)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        job_desc_url="https://jobs.example.com/backend",
        candidate_number="+919800000001",
        merge_server_url="https://merge.example.com/escalate",
        ultravox_api_key="uv-test-key",
        llm_api_key="llm-test-key",
        public_base_url="",
    )


@pytest.fixture
def telephony_config() -> TelephonyConfig:
    return TelephonyConfig(provider_type=ProviderType.MOCK, caller_id="+918000000000")


@pytest.fixture
def orchestrator_config() -> OrchestratorConfig:
    return OrchestratorConfig(
        job_desc_url="https://jobs.example.com/backend",
        candidate_number="+919800000001",
        caller_id="+918000000000",
        merge_server_url="https://merge.example.com/escalate",
        fetch_timeout_seconds=1.0,
        summarize_timeout_seconds=1.0,
        provision_timeout_seconds=1.0,
        call_timeout_seconds=1.0,
    )


@pytest.fixture
def call_log() -> CallLog:
    return CallLog()


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def telephony(call_log: CallLog, registry: SessionRegistry) -> RecordingTelephony:
    return RecordingTelephony(call_log, registry)


@pytest.fixture
def orchestrator(
    orchestrator_config: OrchestratorConfig,
    call_log: CallLog,
    registry: SessionRegistry,
    telephony: RecordingTelephony,
) -> CallOrchestrator:
    return CallOrchestrator(
        config=orchestrator_config,
        fetcher=FakeFetcher(call_log),
        summarizer=FakeSummarizer(call_log),
        provisioner=FakeProvisioner(call_log, registry),
        call_trigger=telephony,
        registry=registry,
    )


@pytest.fixture
def app(
    settings: Settings,
    telephony_config: TelephonyConfig,
    registry: SessionRegistry,
    orchestrator: CallOrchestrator,
    telephony: RecordingTelephony,
) -> FastAPI:
    return create_app(
        settings=settings,
        telephony_config=telephony_config,
        registry=registry,
        orchestrator=orchestrator,
        telephony_provider=telephony,
    )


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def fetch_failure() -> ContentFetchError:
    return ContentFetchError("Failed to fetch https://jobs.example.com/backend: HTTP 404", status_code=404)
