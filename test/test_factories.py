"""
Tests for provider and orchestrator wiring.
"""

import pytest

from recruitcall.config import Settings
from recruitcall.pipeline.factory import build_orchestrator, orchestrator_config_from_settings
from recruitcall.sessions.registry import SessionRegistry
from recruitcall.telephony.config import ProviderType, TelephonyConfig
from recruitcall.telephony.exotel_adapter import ExotelAdapter
from recruitcall.telephony.factory import create_telephony_provider
from recruitcall.telephony.mock_adapter import MockTelephonyAdapter
from recruitcall.telephony.twilio_adapter import TwilioAdapter


class TestCreateTelephonyProvider:
    def test_exotel(self) -> None:
        config = TelephonyConfig(
            _env_file=None,
            provider_type=ProviderType.EXOTEL,
            exotel_sid="sid",
            exotel_api_key="key",
            exotel_api_token="token",
            caller_id="0804",
        )

        assert isinstance(create_telephony_provider(config), ExotelAdapter)

    def test_twilio(self) -> None:
        config = TelephonyConfig(
            _env_file=None,
            provider_type=ProviderType.TWILIO,
            twilio_account_sid="AC",
            twilio_auth_token="token",
            caller_id="+14155550000",
        )

        assert isinstance(create_telephony_provider(config), TwilioAdapter)

    def test_mock(self, telephony_config: TelephonyConfig) -> None:
        assert isinstance(create_telephony_provider(telephony_config), MockTelephonyAdapter)


class TestOrchestratorWiring:
    def test_config_from_settings(self, settings: Settings, telephony_config: TelephonyConfig) -> None:
        config = orchestrator_config_from_settings(settings, telephony_config)

        assert config.job_desc_url == settings.job_desc_url
        assert config.candidate_number == settings.candidate_number
        assert config.caller_id == "+918000000000"
        assert config.merge_server_url == settings.merge_server_url
        assert config.status_callback_path == "/webhooks/telephony/events"
        assert config.session_overrides["voice"] == "Mark"
        assert config.session_overrides["medium"] == "twilio"
        assert config.fetch_timeout_seconds == 15.0
        assert config.provision_timeout_seconds == 20.0

    def test_empty_status_callback_path_disables_callbacks(
        self, settings: Settings
    ) -> None:
        telephony_config = TelephonyConfig(
            _env_file=None, provider_type=ProviderType.MOCK, status_callback_path=""
        )

        config = orchestrator_config_from_settings(settings, telephony_config)

        assert config.status_callback_path is None

    @pytest.mark.asyncio
    async def test_build_orchestrator_shares_provider_and_registry(
        self, settings: Settings, telephony_config: TelephonyConfig
    ) -> None:
        registry = SessionRegistry()
        provider = MockTelephonyAdapter()

        orchestrator = build_orchestrator(
            settings, telephony_config, registry, telephony_provider=provider
        )

        assert orchestrator.registry is registry
        await orchestrator.close()
