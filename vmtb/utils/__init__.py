"""Utility modules for the VMTB core."""

from vmtb.utils.config import settings, MeetingPolicy, WorkflowPolicy
from vmtb.utils.errors import CollaboratorError, InvariantViolation, VmtbError
from vmtb.utils.logging import (
    get_logger,
    get_latency_logger,
    get_audit_logger,
    monitor_latency,
    RequestContext,
)

__all__ = [
    "settings",
    "MeetingPolicy",
    "WorkflowPolicy",
    "CollaboratorError",
    "InvariantViolation",
    "VmtbError",
    "get_logger",
    "get_latency_logger",
    "get_audit_logger",
    "monitor_latency",
    "RequestContext",
]
