"""
Telephony provider factory.

Single source of truth for configuration:
- use TelephonyConfig (Pydantic Settings) which loads from OS env + .env
- never read raw os.getenv("EXOTEL_*") here
"""

from __future__ import annotations

from recruitcall.shared.logging import get_logger, mask_secret
from recruitcall.telephony.config import ProviderType, TelephonyConfig
from recruitcall.telephony.exotel_adapter import ExotelAdapter
from recruitcall.telephony.interface import TelephonyProvider
from recruitcall.telephony.mock_adapter import MockTelephonyAdapter
from recruitcall.telephony.twilio_adapter import TwilioAdapter

logger = get_logger(__name__)


def create_telephony_provider(
    config: TelephonyConfig,
    timeout: float = 15.0,
) -> TelephonyProvider:
    """Build the telephony provider selected by ``config.provider_type``."""
    logger.info(
        "Telephony config resolved",
        extra={
            "provider_type": config.provider_type.value,
            "caller_id": config.caller_id,
            "exotel_sid": mask_secret(config.exotel_sid),
            "twilio_account_sid": mask_secret(config.twilio_account_sid),
        },
    )

    if config.provider_type == ProviderType.EXOTEL:
        return ExotelAdapter(config, timeout=timeout)

    if config.provider_type == ProviderType.TWILIO:
        return TwilioAdapter(config, timeout=timeout)

    if config.provider_type == ProviderType.MOCK:
        return MockTelephonyAdapter()

    raise ValueError(f"Unsupported telephony provider_type: {config.provider_type}")
