"""
API tests: trigger endpoint, status callbacks, health, public URL resolution.
"""

from __future__ import annotations

import json
import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.requests import Request

from conftest import JOIN_URL, CallLog, FakeFetcher, FakeProvisioner, FakeSummarizer, RecordingTelephony
from recruitcall.api.router import CALL_INITIATED_MESSAGE, resolve_public_base_url
from recruitcall.config import Settings
from recruitcall.main import create_app
from recruitcall.pipeline.orchestrator import CallOrchestrator, OrchestratorConfig
from recruitcall.sessions.provisioner import SessionResponseError
from recruitcall.sessions.registry import SessionRegistry
from recruitcall.shared.logging import StructuredFormatter
from recruitcall.telephony.config import TelephonyConfig


def _request(headers: dict[str, str], host: str = "testserver", scheme: str = "http") -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "root_path": "",
        "scheme": scheme,
        "query_string": b"",
        "server": (host, 80),
        "headers": [(k.lower().encode(), v.encode()) for k, v in {"host": host, **headers}.items()],
    }
    return Request(scope)


def _app_with(
    settings: Settings,
    telephony_config: TelephonyConfig,
    orchestrator_config: OrchestratorConfig,
    registry: SessionRegistry,
    log: CallLog,
    **overrides,
) -> tuple[FastAPI, RecordingTelephony]:
    telephony = overrides.pop("telephony", None) or RecordingTelephony(log, registry)
    orchestrator = CallOrchestrator(
        config=orchestrator_config,
        fetcher=overrides.get("fetcher") or FakeFetcher(log),
        summarizer=overrides.get("summarizer") or FakeSummarizer(log),
        provisioner=overrides.get("provisioner") or FakeProvisioner(log, registry),
        call_trigger=telephony,
        registry=registry,
    )
    app = create_app(
        settings=settings,
        telephony_config=telephony_config,
        registry=registry,
        orchestrator=orchestrator,
        telephony_provider=telephony,
    )
    return app, telephony


class TestTriggerEndpoint:
    def test_success_returns_plain_acknowledgement(
        self,
        client: TestClient,
        telephony: RecordingTelephony,
    ) -> None:
        response = client.get("/")

        assert response.status_code == 200
        assert response.text == CALL_INITIATED_MESSAGE
        assert telephony.get_last_call().callback_url == "http://testserver/xml"

    def test_end_to_end_handoff_after_trigger(
        self,
        client: TestClient,
        registry: SessionRegistry,
    ) -> None:
        assert client.get("/xml").status_code == 503

        assert client.get("/").status_code == 200
        assert registry.get().join_url == JOIN_URL

        handoff = client.get("/xml")
        assert handoff.status_code == 200
        assert f'url="{JOIN_URL}"' in handoff.text

    def test_forwarded_headers_build_callback_url(
        self,
        client: TestClient,
        telephony: RecordingTelephony,
    ) -> None:
        client.get(
            "/",
            headers={"X-Forwarded-Proto": "https", "X-Forwarded-Host": "abc.ngrok.app"},
        )

        assert telephony.get_last_call().callback_url == "https://abc.ngrok.app/xml"

    def test_configured_public_base_url_wins(
        self,
        settings: Settings,
        telephony_config: TelephonyConfig,
        orchestrator_config: OrchestratorConfig,
        registry: SessionRegistry,
        call_log: CallLog,
    ) -> None:
        settings = settings.model_copy(update={"public_base_url": "https://recruit.example.com"})
        app, telephony = _app_with(settings, telephony_config, orchestrator_config, registry, call_log)

        TestClient(app).get("/", headers={"X-Forwarded-Host": "ignored.example.com"})

        assert telephony.get_last_call().callback_url == "https://recruit.example.com/xml"

    def test_pipeline_failure_returns_500_json(
        self,
        settings: Settings,
        telephony_config: TelephonyConfig,
        orchestrator_config: OrchestratorConfig,
        registry: SessionRegistry,
        call_log: CallLog,
    ) -> None:
        app, _ = _app_with(
            settings,
            telephony_config,
            orchestrator_config,
            registry,
            call_log,
            provisioner=FakeProvisioner(call_log, error=SessionResponseError("Ultravox response missing joinUrl")),
        )

        response = TestClient(app).get("/")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Ultravox response missing joinUrl"
        assert body["kind"] == "ProvisionResponseError"
        assert registry.get() is None
        assert TestClient(app).get("/xml").status_code == 503

    def test_call_trigger_failure_returns_500_but_handoff_is_served(
        self,
        settings: Settings,
        telephony_config: TelephonyConfig,
        orchestrator_config: OrchestratorConfig,
        registry: SessionRegistry,
        call_log: CallLog,
    ) -> None:
        telephony = RecordingTelephony(call_log, registry)
        telephony.configure_failure(error_message="Exotel API error: 403")
        app, _ = _app_with(
            settings, telephony_config, orchestrator_config, registry, call_log, telephony=telephony
        )
        client = TestClient(app)

        response = client.get("/")

        assert response.status_code == 500
        assert response.json()["kind"] == "CallTriggerError"
        assert client.get("/xml").status_code == 200

    def test_unexpected_error_returns_generic_500(
        self,
        settings: Settings,
        telephony_config: TelephonyConfig,
        orchestrator_config: OrchestratorConfig,
        registry: SessionRegistry,
        call_log: CallLog,
    ) -> None:
        app, _ = _app_with(
            settings,
            telephony_config,
            orchestrator_config,
            registry,
            call_log,
            fetcher=FakeFetcher(call_log, error=RuntimeError("disk on fire")),
        )

        response = TestClient(app, raise_server_exceptions=False).get("/")

        assert response.status_code == 500
        assert response.json() == {"error": "disk on fire"}

    def test_unexpected_error_keeps_correlation_id(
        self,
        settings: Settings,
        telephony_config: TelephonyConfig,
        orchestrator_config: OrchestratorConfig,
        registry: SessionRegistry,
        call_log: CallLog,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        app, _ = _app_with(
            settings,
            telephony_config,
            orchestrator_config,
            registry,
            call_log,
            fetcher=FakeFetcher(call_log, error=RuntimeError("disk on fire")),
        )
        caplog.handler.setFormatter(StructuredFormatter())
        caplog.set_level(logging.ERROR, logger="recruitcall.main")

        response = TestClient(app, raise_server_exceptions=False).get(
            "/", headers={"X-Request-ID": "req-500"}
        )

        assert response.status_code == 500
        assert response.headers["X-Request-ID"] == "req-500"
        entries = [json.loads(line) for line in caplog.text.splitlines() if line.startswith("{")]
        unhandled = [e for e in entries if e["message"] == "Unhandled error"]
        assert unhandled
        assert unhandled[0]["correlation_id"] == "req-500"


class TestStatusCallbacks:
    def test_form_callback_is_acknowledged(self, client: TestClient) -> None:
        response = client.post(
            "/webhooks/telephony/events",
            data={"CallSid": "CA123", "CallStatus": "completed"},
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_json_callback_is_acknowledged(self, client: TestClient) -> None:
        response = client.post(
            "/webhooks/telephony/events",
            json={"CallSid": "CA123", "Status": "busy"},
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_unparseable_callback_is_still_acknowledged(self, client: TestClient) -> None:
        response = client.post("/webhooks/telephony/events", data={"Foo": "bar"})

        assert response.status_code == 200
        assert response.json() == {"ok": False}


class TestHealth:
    def test_health_reports_session_readiness(
        self, client: TestClient, registry: SessionRegistry
    ) -> None:
        assert client.get("/health").json() == {"status": "healthy", "session_ready": False}

        client.get("/")

        assert client.get("/health").json() == {"status": "healthy", "session_ready": True}

    def test_correlation_id_is_echoed(self, client: TestClient) -> None:
        response = client.get("/health", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"


class TestResolvePublicBaseUrl:
    def test_override(self) -> None:
        assert resolve_public_base_url(_request({}), "https://x.example.com/") == "https://x.example.com"

    def test_forwarded_host_defaults_to_https(self) -> None:
        request = _request({"X-Forwarded-Host": "tunnel.example.com"})

        assert resolve_public_base_url(request) == "https://tunnel.example.com"

    def test_forwarded_lists_use_first_hop(self) -> None:
        request = _request(
            {"X-Forwarded-Host": "a.example.com, b.internal", "X-Forwarded-Proto": "http, https"}
        )

        assert resolve_public_base_url(request) == "http://a.example.com"

    def test_request_scheme_and_host(self) -> None:
        request = _request({}, host="localhost:3000")

        assert resolve_public_base_url(request) == "http://localhost:3000"
