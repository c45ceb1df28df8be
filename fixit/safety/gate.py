# FILE: fixit/safety/gate.py
"""
Safety Gate: lexical deny filter run before any mutating call.

A request is denied when its lower-cased text contains BOTH a dangerous
verb substring and a protected target substring. This is a coarse filter:

- false negatives: harmful phrasing that avoids every listed substring
  passes ("remove woo commerce").
- false positives: the two substrings are matched anywhere in the text,
  not as a verb/object pair, so "delete old posts and deactivate
  woocommerce" is denied even though the delete applies to posts.

The policy is loaded from JSON and cached after first load. Falls back to
the embedded defaults if the file is missing or invalid.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

from fixit.config import load_settings

logger = logging.getLogger(__name__)

FALLBACK_POLICY = {
    "version": 1,
    "dangerous_verbs": ["delete", "uninstall", "deactivate_critical"],
    "protected_targets": ["woocommerce", "elementor", "yoast-seo"],
}

DENIAL_TEMPLATE = "Critical plugin operation ({target}) requires manual confirmation"


@dataclass(frozen=True)
class SafetyDecision:
    allowed: bool
    reason: Optional[str] = None
    verb: Optional[str] = None
    target: Optional[str] = None


@dataclass(frozen=True)
class SafetyPolicy:
    dangerous_verbs: Tuple[str, ...]
    protected_targets: Tuple[str, ...]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SafetyPolicy":
        verbs = data.get("dangerous_verbs")
        targets = data.get("protected_targets")
        if not isinstance(verbs, list) or not isinstance(targets, list):
            raise ValueError("policy needs 'dangerous_verbs' and 'protected_targets' lists")
        return cls(
            dangerous_verbs=tuple(str(v).lower() for v in verbs if str(v).strip()),
            protected_targets=tuple(str(t).lower() for t in targets if str(t).strip()),
        )


@lru_cache(maxsize=4)
def load_policy(path: Optional[str] = None) -> SafetyPolicy:
    policy_path = path or load_settings().safety_policy_path

    try:
        with open(policy_path, "r", encoding="utf-8") as f:
            policy = SafetyPolicy.from_dict(json.load(f))
            logger.info(
                "[safety] Loaded policy from %s (%d verbs, %d protected targets)",
                policy_path,
                len(policy.dangerous_verbs),
                len(policy.protected_targets),
            )
            return policy
    except FileNotFoundError:
        logger.warning("[safety] Policy file not found at %s, using fallback", policy_path)
    except (json.JSONDecodeError, ValueError) as e:
        logger.error("[safety] Invalid policy file %s: %s", policy_path, e)
    return SafetyPolicy.from_dict(FALLBACK_POLICY)


def reload_policy() -> SafetyPolicy:
    """Force reload policy (clears cache)."""
    load_policy.cache_clear()
    return load_policy()


class SafetyGate:
    def __init__(self, policy: Optional[SafetyPolicy] = None):
        self.policy = policy or load_policy()

    def check(self, request_text: str) -> SafetyDecision:
        lowered = (request_text or "").lower()

        for verb in self.policy.dangerous_verbs:
            if verb not in lowered:
                continue
            for target in self.policy.protected_targets:
                if target in lowered:
                    return SafetyDecision(
                        allowed=False,
                        reason=DENIAL_TEMPLATE.format(target=target),
                        verb=verb,
                        target=target,
                    )

        return SafetyDecision(allowed=True)
