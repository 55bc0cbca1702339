"""
Agent session provisioning and the in-process session registry.
"""

from recruitcall.sessions.models import EscalationTool, SessionConfig, SessionHandle
from recruitcall.sessions.provisioner import (
    SessionProvisionerError,
    SessionResponseError,
    UltravoxProvisioner,
)
from recruitcall.sessions.registry import DEFAULT_SESSION_KEY, SessionRegistry, SessionStore

__all__ = [
    "DEFAULT_SESSION_KEY",
    "EscalationTool",
    "SessionConfig",
    "SessionHandle",
    "SessionProvisionerError",
    "SessionRegistry",
    "SessionResponseError",
    "SessionStore",
    "UltravoxProvisioner",
]
