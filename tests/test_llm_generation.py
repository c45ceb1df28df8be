# FILE: tests/test_llm_generation.py
"""
Tests for fixit/llm/generation.py
OpenAI-backed generation service; every failure must surface as GenerationError.
"""

import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from fixit.config import Settings
from fixit.llm.generation import (
    GenerationError,
    GenerationService,
    OpenAIGenerationService,
    is_generation_available,
)


def _reply(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _service(create, timeout_s=5.0):
    service = OpenAIGenerationService(api_key="sk-test", model="gpt-4o-mini", timeout_s=timeout_s)
    client = MagicMock()
    client.chat.completions.create = create
    service._client = client
    return service


class TestOpenAIGenerationService:

    @pytest.mark.asyncio
    async def test_returns_content(self):
        create = AsyncMock(return_value=_reply('{"ok": true}'))
        service = _service(create)

        assert await service.generate("hello") == '{"ok": true}'
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["messages"][-1] == {"role": "user", "content": "hello"}

    @pytest.mark.asyncio
    async def test_missing_key(self):
        service = OpenAIGenerationService(settings=Settings(openai_api_key=None))
        with pytest.raises(GenerationError, match="OPENAI_API_KEY"):
            await service.generate("hello")

    @pytest.mark.asyncio
    async def test_sdk_error_wrapped(self):
        service = _service(AsyncMock(side_effect=RuntimeError("rate limited")))
        with pytest.raises(GenerationError, match="rate limited"):
            await service.generate("hello")

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self):
        async def slow(**kwargs):
            await asyncio.sleep(1)
            return _reply("late")

        service = _service(slow, timeout_s=0.01)
        with pytest.raises(GenerationError, match="timed out"):
            await service.generate("hello")

    @pytest.mark.asyncio
    async def test_empty_reply(self):
        service = _service(AsyncMock(return_value=_reply("   ")))
        with pytest.raises(GenerationError, match="empty"):
            await service.generate("hello")

    @pytest.mark.asyncio
    async def test_malformed_reply(self):
        service = _service(AsyncMock(return_value=SimpleNamespace(choices=[])))
        with pytest.raises(GenerationError, match="malformed"):
            await service.generate("hello")


class TestAvailability:

    def test_available_with_key(self):
        assert is_generation_available(Settings(openai_api_key="sk-x")) is True
        assert is_generation_available(Settings(openai_api_key=None)) is False

    def test_service_interface_is_abstract(self):
        with pytest.raises(TypeError):
            GenerationService()
