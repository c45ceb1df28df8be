# FILE: tests/conftest.py
"""
Pytest configuration for the Fixit test suite.

Configures:
- pytest-asyncio for async test support
- a fresh SQLite file database per test
- a scripted generation service stand-in
"""
import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest

from fixit.connections.schemas import ConnectionRef
from fixit.db import Database
from fixit.llm.generation import GenerationService

pytest_plugins = ["pytest_asyncio"]


class ScriptedGeneration(GenerationService):
    """Returns (or raises) the scripted replies in order; the last one repeats."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def database(tmp_path):
    """Opened Database backed by a temporary SQLite file."""
    db = Database(f"sqlite:///{tmp_path / 'fixit.db'}").open()
    yield db
    db.close()


@pytest.fixture
def scripted_generation():
    return ScriptedGeneration


@pytest.fixture
def wp_connection():
    return ConnectionRef(
        id="conn-wp",
        store_type="wordpress",
        store_url="https://blog.example.com",
        username="admin",
        app_password="abcd efgh ijkl",
    )


@pytest.fixture
def shopify_connection():
    return ConnectionRef(
        id="conn-shop",
        store_type="shopify",
        store_url="my-shop.myshopify.com",
        access_token="shpat_test",
    )
