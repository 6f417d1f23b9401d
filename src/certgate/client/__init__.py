"""Client side: credentials, key generation, signing request, agent."""

from __future__ import annotations

from .config import ClientConfig  # noqa: F401
from .workflow import SigningWorkflow, WorkflowFatal, WorkflowState  # noqa: F401

__all__ = ["ClientConfig", "SigningWorkflow", "WorkflowFatal", "WorkflowState"]
