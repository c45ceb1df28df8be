"""Safety Gate: dangerous-verb + protected-target deny filter."""

from .gate import (
    FALLBACK_POLICY,
    SafetyDecision,
    SafetyGate,
    SafetyPolicy,
    load_policy,
    reload_policy,
)

__all__ = [
    "FALLBACK_POLICY",
    "SafetyDecision",
    "SafetyGate",
    "SafetyPolicy",
    "load_policy",
    "reload_policy",
]
