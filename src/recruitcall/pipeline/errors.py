"""
Orchestration pipeline error taxonomy.

Each error names the step that failed; the collaborator's own exception is
chained as ``__cause__``.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for a failed orchestration step."""

    step: str = "pipeline"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "kind": self.kind, "step": self.step}


class FetchError(PipelineError):
    step = "fetch"


class SummarizeError(PipelineError):
    step = "summarize"


class ProvisionError(PipelineError):
    step = "provision"


class ProvisionResponseError(ProvisionError):
    """Provisioning answered with a body that has no usable join address."""


class CallTriggerError(PipelineError):
    step = "trigger_call"
