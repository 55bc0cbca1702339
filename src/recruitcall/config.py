"""
Application configuration with environment-driven settings.

Required options have no default: a missing one fails settings construction
at startup instead of surfacing mid-pipeline.
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "recruitcall"
    app_env: Literal["dev", "qa", "uat", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)

    # Public base URL reachable by the telephony provider. When empty it is
    # derived from the trigger request (forwarded headers, then scheme+host).
    public_base_url: str = Field(default="")

    # Recruiting target
    job_desc_url: str = Field(..., description="Job description page to scrape")
    candidate_number: str = Field(..., description="Candidate phone number to dial")
    merge_server_url: str = Field(
        ...,
        description="Escalation endpoint exposed to the agent as the merge_manager tool",
    )

    # Voice session provisioning (Ultravox)
    ultravox_api_key: str = Field(...)
    ultravox_base_url: str = Field(default="https://api.ultravox.ai")
    ultravox_model: str = Field(default="fixie-ai/ultravox")
    ultravox_voice: str = Field(default="Mark")
    ultravox_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    ultravox_first_speaker: str = Field(default="FIRST_SPEAKER_AGENT")
    ultravox_medium: Literal["twilio", "exotel", "plivo", "telnyx"] = Field(default="twilio")

    # Summarization
    llm_provider: Literal["gemini", "openai"] = Field(default="gemini")
    llm_api_key: str = Field(
        ...,
        validation_alias=AliasChoices("llm_api_key", "gemini_api_key", "openai_api_key"),
    )
    llm_model: str | None = Field(default=None)

    # Bounded timeouts per collaborator call (seconds)
    fetch_timeout_seconds: float = Field(default=15.0, gt=0)
    summarize_timeout_seconds: float = Field(default=30.0, gt=0)
    provision_timeout_seconds: float = Field(default=20.0, gt=0)
    call_timeout_seconds: float = Field(default=15.0, gt=0)

    @field_validator(
        "job_desc_url",
        "candidate_number",
        "merge_server_url",
        "ultravox_api_key",
        "llm_api_key",
    )
    @classmethod
    def validate_required(cls, v: str) -> str:
        """Blank values count as missing."""
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("public_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")


@lru_cache
def _get_settings_cached() -> Settings:
    return Settings()


def get_settings() -> Settings:
    # Under pytest env vars change between tests (monkeypatch): never freeze.
    if os.environ.get("PYTEST_CURRENT_TEST"):
        return Settings()
    return _get_settings_cached()
