# FILE: fixit/capabilities/generator.py
"""
Capability generation fallback.

When no registered capability matches a request, the dispatcher asks a
generator for a new CapabilitySpec. The generation service picks one of the
catalog operations and describes it; it never supplies code. A reply that
names an operation outside the catalog is a GenerationFailed
("capability not implemented").
"""

from __future__ import annotations

import json
import logging
import re
import time
from abc import ABC, abstractmethod
from typing import Optional

from fixit.capabilities.handlers import HANDLERS, get_handler
from fixit.capabilities.schemas import CapabilitySpec
from fixit.connections.schemas import ConnectionRef
from fixit.dispatch.errors import GenerationFailed
from fixit.intent.schemas import Intent
from fixit.llm.generation import GenerationError, GenerationService
from fixit.llm.parsing import parse_json_object

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^[a-z][a-z0-9_]{0,120}$")


def generated_name(request_text: str, now_ms: Optional[int] = None) -> str:
    sanitized = re.sub(r"[^a-z0-9]", "_", request_text.lower())[:60].strip("_") or "action"
    return f"ai_function_{sanitized}_{now_ms if now_ms is not None else int(time.time() * 1000)}"


def generated_description(summary: str, request_text: str) -> str:
    """Embeds the request text so the same request finds this capability next time."""
    summary = (summary or "").strip()
    if request_text.lower() in summary.lower():
        return summary
    if not summary:
        return f"AI-generated capability for: {request_text}"
    return f"{summary} (for: {request_text})"


class CapabilityGenerator(ABC):
    """Interface: async generate(request_text, intent, connection) -> CapabilitySpec."""

    @abstractmethod
    async def generate(
        self, request_text: str, intent: Intent, connection: Optional[ConnectionRef] = None
    ) -> CapabilitySpec:
        pass


def build_generation_prompt(request_text: str, intent: Intent, store_type: Optional[str]) -> str:
    catalog = [
        {"operation": h.operation, "description": h.description, "platforms": list(h.platforms)}
        for h in HANDLERS.values()
        if store_type is None or store_type in h.platforms
    ]
    return (
        "Pick the single operation that fulfils this store request and describe it as a capability.\n\n"
        f"Request: {json.dumps(request_text)}\n"
        f"Parsed intent: {json.dumps(intent.snapshot())}\n"
        f"Store type: {store_type or 'unknown'}\n\n"
        f"Available operations:\n{json.dumps(catalog, indent=2)}\n\n"
        "Return JSON with:\n"
        "{\n"
        '  "name": "snake_case_capability_name",\n'
        '  "description": "one sentence describing what the capability does",\n'
        '  "operation": "<one of the operations above, or none>"\n'
        "}"
    )


class LLMCapabilityGenerator(CapabilityGenerator):
    def __init__(self, generation: GenerationService):
        self.generation = generation

    async def generate(
        self, request_text: str, intent: Intent, connection: Optional[ConnectionRef] = None
    ) -> CapabilitySpec:
        store_type = connection.store_type if connection is not None else None
        prompt = build_generation_prompt(request_text, intent, store_type)

        try:
            raw = await self.generation.generate(prompt)
        except GenerationError as e:
            raise GenerationFailed(f"capability generation failed: {e}") from e

        data = parse_json_object(raw)
        if data is None:
            raise GenerationFailed("capability generation returned no JSON object")

        operation = str(data.get("operation") or "").strip()
        handler = get_handler(operation)
        if handler is None:
            raise GenerationFailed(f"capability not implemented: {operation or 'none'}")
        if store_type is not None and store_type not in handler.platforms:
            raise GenerationFailed(f"capability not implemented for {store_type}: {operation}")

        name = str(data.get("name") or "").strip().lower()
        if not _NAME_RE.match(name):
            name = generated_name(request_text)

        spec = CapabilitySpec(
            name=name,
            description=generated_description(str(data.get("description") or ""), request_text),
            operation=operation,
            parameter_schema=handler.parameter_schema,
            source="generated",
        )
        logger.info("[generator] %r -> %s (%s)", request_text, spec.name, spec.operation)
        return spec
