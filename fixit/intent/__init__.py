"""Free-text request -> structured Intent."""

from .resolver import IntentResolver, build_intent_prompt
from .schemas import Intent, IntentCategory, IntentVerb

__all__ = [
    "Intent",
    "IntentCategory",
    "IntentVerb",
    "IntentResolver",
    "build_intent_prompt",
]
