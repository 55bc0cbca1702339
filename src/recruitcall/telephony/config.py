"""
Telephony provider configuration.

Credentials for the selected provider are required; the others may be left
empty.
"""

from enum import Enum

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderType(str, Enum):
    """Supported telephony provider types."""

    EXOTEL = "exotel"
    TWILIO = "twilio"
    MOCK = "mock"


_REQUIRED_BY_PROVIDER: dict[ProviderType, tuple[str, ...]] = {
    ProviderType.EXOTEL: ("exotel_sid", "exotel_api_key", "exotel_api_token", "caller_id"),
    ProviderType.TWILIO: ("twilio_account_sid", "twilio_auth_token", "caller_id"),
    ProviderType.MOCK: (),
}


class TelephonyConfig(BaseSettings):
    """Telephony provider configuration from environment."""

    model_config = SettingsConfigDict(
        env_prefix="TELEPHONY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Provider selection
    provider_type: ProviderType = Field(default=ProviderType.EXOTEL)

    # Source number (Exophone / Twilio number) used as caller id
    caller_id: str = Field(default="")

    # Exotel credentials
    exotel_sid: str = Field(default="")
    exotel_api_key: str = Field(default="")
    exotel_api_token: str = Field(default="")
    exotel_subdomain: str = Field(default="api.exotel.com")

    # Twilio credentials
    twilio_account_sid: str = Field(default="")
    twilio_auth_token: str = Field(default="")

    # Provider status callbacks; empty disables them
    status_callback_path: str = Field(default="/webhooks/telephony/events")

    @model_validator(mode="after")
    def validate_provider_credentials(self) -> "TelephonyConfig":
        missing = [
            name
            for name in _REQUIRED_BY_PROVIDER[self.provider_type]
            if not str(getattr(self, name)).strip()
        ]
        if missing:
            env_names = ", ".join(f"TELEPHONY_{name.upper()}" for name in missing)
            raise ValueError(
                f"{self.provider_type.value} provider requires: {env_names}"
            )
        return self

    def get_status_callback_url(self, base_url: str) -> str | None:
        if not self.status_callback_path:
            return None
        return f"{base_url.rstrip('/')}{self.status_callback_path}"


def get_telephony_config() -> TelephonyConfig:
    return TelephonyConfig()
