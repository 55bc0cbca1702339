"""
Voice agent session models.
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field

from recruitcall.llm.prompts import (
    ESCALATION_TOOL_DESCRIPTION,
    ESCALATION_TOOL_NAME,
    build_recruiter_prompt,
)


class EscalationTool(BaseModel):
    """HTTP tool the agent calls to hand the candidate over to a human."""

    model_tool_name: str = ESCALATION_TOOL_NAME
    description: str = ESCALATION_TOOL_DESCRIPTION
    base_url_pattern: str
    http_method: Literal["GET", "POST", "PUT", "PATCH", "DELETE"] = "POST"

    model_config = {"frozen": True, "protected_namespaces": ()}

    def to_payload(self) -> dict[str, Any]:
        return {
            "temporaryTool": {
                "modelToolName": self.model_tool_name,
                "description": self.description,
                "http": {
                    "baseUrlPattern": self.base_url_pattern,
                    "httpMethod": self.http_method,
                },
            }
        }


class SessionConfig(BaseModel):
    """Agent definition sent to the session provisioner. Immutable."""

    system_prompt: str
    model: str = "fixie-ai/ultravox"
    voice: str = "Mark"
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    first_speaker: str = "FIRST_SPEAKER_AGENT"
    medium: str = "twilio"
    escalation_tool: EscalationTool | None = None

    model_config = {"frozen": True}

    @classmethod
    def for_job_summary(
        cls,
        job_summary: str,
        merge_server_url: str,
        **overrides: Any,
    ) -> "SessionConfig":
        """Build the recruiter agent config for one orchestration run."""
        return cls(
            system_prompt=build_recruiter_prompt(job_summary),
            escalation_tool=EscalationTool(base_url_pattern=merge_server_url),
            **overrides,
        )

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the provisioning API's JSON body."""
        payload: dict[str, Any] = {
            "systemPrompt": self.system_prompt,
            "model": self.model,
            "temperature": self.temperature,
            "firstSpeaker": self.first_speaker,
            "voice": self.voice,
            "medium": {self.medium: {}},
        }
        if self.escalation_tool is not None:
            payload["selectedTools"] = [self.escalation_tool.to_payload()]
        return payload


class SessionHandle(BaseModel):
    """A provisioned agent session. ``join_url`` is where call media is streamed."""

    join_url: str
    session_id: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}
