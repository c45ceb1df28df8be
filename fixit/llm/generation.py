# FILE: fixit/llm/generation.py
"""
Generation service boundary.

Text in, text out. Used by the intent resolver and by the capability
generator. Every call carries an explicit timeout; every failure (missing
key, SDK error, timeout, empty reply) surfaces as GenerationError so callers
only have one exception to handle.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

from fixit.config import Settings, load_settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are the action planner for an e-commerce store assistant. "
    "Respond with only what is asked, no extra text."
)


class GenerationError(Exception):
    """Generation service call failed or returned nothing usable."""


class GenerationService(ABC):
    """Interface: async generate(prompt) -> str."""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        pass


class OpenAIGenerationService(GenerationService):
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_s: Optional[float] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or load_settings()
        self.api_key = api_key or settings.openai_api_key
        self.model = model or settings.generation_model
        self.timeout_s = float(timeout_s or settings.generation_timeout_s)
        self._client = None

    def _get_client(self):
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout_s)
        return self._client

    async def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise GenerationError("OPENAI_API_KEY is not set")

        client = self._get_client()
        try:
            resp = await asyncio.wait_for(
                client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    stream=False,
                ),
                timeout=self.timeout_s,
            )
        except asyncio.TimeoutError as exc:
            raise GenerationError(f"generation timed out after {self.timeout_s:g}s") from exc
        except Exception as exc:
            logger.warning("[generation] %s call failed: %s", self.model, exc)
            raise GenerationError(str(exc)) from exc

        try:
            content = resp.choices[0].message.content or ""
        except (AttributeError, IndexError) as exc:
            raise GenerationError("malformed generation response") from exc

        if not content.strip():
            raise GenerationError("empty generation response")
        return content


def is_generation_available(settings: Optional[Settings] = None) -> bool:
    settings = settings or load_settings()
    return bool(settings.openai_api_key)
