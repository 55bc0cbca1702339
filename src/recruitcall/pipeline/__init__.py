"""
Provision-then-call orchestration pipeline.
"""

from recruitcall.pipeline.errors import (
    CallTriggerError,
    FetchError,
    PipelineError,
    ProvisionError,
    ProvisionResponseError,
    SummarizeError,
)
from recruitcall.pipeline.orchestrator import (
    CallOrchestrator,
    OrchestrationResult,
    OrchestratorConfig,
)

__all__ = [
    "CallOrchestrator",
    "CallTriggerError",
    "FetchError",
    "OrchestrationResult",
    "OrchestratorConfig",
    "PipelineError",
    "ProvisionError",
    "ProvisionResponseError",
    "SummarizeError",
]
