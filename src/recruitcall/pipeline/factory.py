"""
Builds a CallOrchestrator wired to the configured collaborators.
"""

from __future__ import annotations

from recruitcall.config import Settings
from recruitcall.jobs.fetcher import JobDescriptionFetcher
from recruitcall.llm.factory import create_llm_gateway
from recruitcall.llm.summarizer import JobSummarizer
from recruitcall.pipeline.orchestrator import CallOrchestrator, OrchestratorConfig
from recruitcall.sessions.provisioner import UltravoxProvisioner
from recruitcall.sessions.registry import SessionStore
from recruitcall.telephony.config import TelephonyConfig
from recruitcall.telephony.factory import create_telephony_provider
from recruitcall.telephony.interface import TelephonyProvider


def orchestrator_config_from_settings(
    settings: Settings,
    telephony_config: TelephonyConfig,
) -> OrchestratorConfig:
    return OrchestratorConfig(
        job_desc_url=settings.job_desc_url,
        candidate_number=settings.candidate_number,
        caller_id=telephony_config.caller_id,
        merge_server_url=settings.merge_server_url,
        status_callback_path=telephony_config.status_callback_path or None,
        session_overrides={
            "model": settings.ultravox_model,
            "voice": settings.ultravox_voice,
            "temperature": settings.ultravox_temperature,
            "first_speaker": settings.ultravox_first_speaker,
            "medium": settings.ultravox_medium,
        },
        fetch_timeout_seconds=settings.fetch_timeout_seconds,
        summarize_timeout_seconds=settings.summarize_timeout_seconds,
        provision_timeout_seconds=settings.provision_timeout_seconds,
        call_timeout_seconds=settings.call_timeout_seconds,
    )


def build_orchestrator(
    settings: Settings,
    telephony_config: TelephonyConfig,
    registry: SessionStore,
    telephony_provider: TelephonyProvider | None = None,
) -> CallOrchestrator:
    """Create the orchestrator and its HTTP collaborators."""
    gateway = create_llm_gateway(
        provider=settings.llm_provider,
        api_key=settings.llm_api_key,
        model=settings.llm_model,
        timeout_seconds=settings.summarize_timeout_seconds,
    )
    return CallOrchestrator(
        config=orchestrator_config_from_settings(settings, telephony_config),
        fetcher=JobDescriptionFetcher(timeout=settings.fetch_timeout_seconds),
        summarizer=JobSummarizer(gateway),
        provisioner=UltravoxProvisioner(
            api_key=settings.ultravox_api_key,
            base_url=settings.ultravox_base_url,
            timeout=settings.provision_timeout_seconds,
        ),
        call_trigger=telephony_provider
        or create_telephony_provider(telephony_config, timeout=settings.call_timeout_seconds),
        registry=registry,
    )
