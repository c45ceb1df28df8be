# FILE: fixit/dispatch/errors.py
"""
Dispatch error taxonomy.

Every failure below Dispatcher.execute() is one of these (or is wrapped
into one) and ends up as ExecutionOutcome.error / error_kind. None of them
escape execute().

    PolicyDenied        Safety Gate rejected the request
    ResolutionFailed    intent could not be parsed (degrades to unknown)
    CapabilityNotFound  no registered capability for a name
    GenerationFailed    fallback generation could not produce a capability
    InvocationFailed    handler ran and failed, timed out or was not implemented
    AuditWriteFailed    audit append failed (operational log only)
"""

from __future__ import annotations

from typing import Optional


class DispatchError(Exception):
    kind = "dispatch_error"

    def __init__(self, message: str, *, capability_name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.capability_name = capability_name

    def __str__(self) -> str:
        return self.message


class PolicyDenied(DispatchError):
    kind = "policy_denied"


class ResolutionFailed(DispatchError):
    kind = "resolution_failed"


class CapabilityNotFound(DispatchError):
    kind = "capability_not_found"


class GenerationFailed(DispatchError):
    kind = "generation_failed"


class InvocationFailed(DispatchError):
    kind = "invocation_failed"


class AuditWriteFailed(DispatchError):
    kind = "audit_write_failed"
