# FILE: fixit/intent/resolver.py
"""
Intent resolver.

One generation call per request, no retry. Whatever goes wrong (service
error, timeout, no JSON, bad JSON) the caller gets Intent.unknown(), which
never matches a capability.
"""

from __future__ import annotations

import json
import logging

from fixit.dispatch.errors import ResolutionFailed
from fixit.intent.schemas import Intent, IntentCategory, IntentVerb
from fixit.llm.generation import GenerationError, GenerationService
from fixit.llm.parsing import parse_json_object

logger = logging.getLogger(__name__)

_CATEGORIES = "|".join(c.value for c in IntentCategory if c != IntentCategory.UNKNOWN)
_VERBS = "|".join(v.value for v in IntentVerb if v != IntentVerb.UNKNOWN)


def build_intent_prompt(request_text: str) -> str:
    return (
        "Parse this store action request and return JSON.\n\n"
        f"Action: {json.dumps(request_text)}\n\n"
        "Return JSON with:\n"
        "{\n"
        f'  "type": "{_CATEGORIES}",\n'
        f'  "action": "{_VERBS}",\n'
        '  "target": "plugin_slug|post_id|setting_name",\n'
        '  "parameters": {}\n'
        "}\n"
        'Use "unknown" for any field you cannot determine.'
    )


class IntentResolver:
    def __init__(self, generation: GenerationService):
        self.generation = generation

    async def resolve(self, request_text: str) -> Intent:
        try:
            raw = await self.generation.generate(build_intent_prompt(request_text))
        except GenerationError as e:
            return self._fallback(ResolutionFailed(f"generation service error: {e}"))

        data = parse_json_object(raw)
        if data is None:
            return self._fallback(ResolutionFailed("no JSON object in generation response"))

        return Intent(
            category=data.get("type", "unknown"),
            verb=data.get("action", "unknown"),
            target=data.get("target"),
            parameters=data.get("parameters") or {},
        )

    @staticmethod
    def _fallback(err: ResolutionFailed) -> Intent:
        logger.warning("[intent] %s: %s", err.kind, err)
        return Intent.unknown()
