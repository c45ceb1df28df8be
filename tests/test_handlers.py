# FILE: tests/test_handlers.py
"""
Tests for fixit/capabilities/handlers.py and validation.py
Static handler catalog and parameter validation.
"""

import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from unittest.mock import AsyncMock, MagicMock

import pytest

from fixit.capabilities.handlers import HANDLERS, MissingParameter, get_handler, list_operations
from fixit.capabilities.validation import validate_params


@pytest.fixture
def client():
    client = MagicMock()
    client.platform = "wordpress"
    client.perform = AsyncMock(return_value={"ok": True})
    client.test_connection = AsyncMock(return_value=True)
    return client


class TestCatalog:

    def test_operations_listed(self):
        operations = {h.operation for h in list_operations()}
        assert {
            "activate_plugin",
            "deactivate_plugin",
            "list_plugins",
            "clear_cache",
            "update_post",
            "update_page",
            "update_option",
            "update_product",
            "update_theme_asset",
            "create_discount",
            "test_connection",
        } <= operations

    def test_unknown_operation(self):
        assert get_handler("eval_code") is None

    def test_platforms(self):
        assert HANDLERS["clear_cache"].platforms == ("wordpress",)
        assert HANDLERS["create_discount"].platforms == ("shopify",)
        assert set(HANDLERS["test_connection"].platforms) == {"wordpress", "shopify"}


class TestHandlers:

    @pytest.mark.asyncio
    async def test_activate_plugin_uses_target(self, client):
        await HANDLERS["activate_plugin"].fn(client, {"target": "wordfence"})
        client.perform.assert_awaited_once_with("activate_plugin", {"plugin": "wordfence"})

    @pytest.mark.asyncio
    async def test_explicit_plugin_beats_target(self, client):
        await HANDLERS["deactivate_plugin"].fn(client, {"plugin": "akismet/akismet", "target": "akismet"})
        client.perform.assert_awaited_once_with("deactivate_plugin", {"plugin": "akismet/akismet"})

    @pytest.mark.asyncio
    async def test_update_post_converts_id(self, client):
        await HANDLERS["update_post"].fn(client, {"target": "12", "data": {"title": "Hi"}})
        client.perform.assert_awaited_once_with("update_post", {"post_id": 12, "data": {"title": "Hi"}})

    @pytest.mark.asyncio
    async def test_missing_parameter(self, client):
        with pytest.raises(MissingParameter, match="plugin"):
            await HANDLERS["activate_plugin"].fn(client, {})
        client.perform.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_integer_id(self, client):
        with pytest.raises(MissingParameter, match="integer"):
            await HANDLERS["update_page"].fn(client, {"target": "about-us", "data": {}})

    @pytest.mark.asyncio
    async def test_update_option_needs_value(self, client):
        with pytest.raises(MissingParameter, match="value"):
            await HANDLERS["update_option"].fn(client, {"option": "blogname"})

    @pytest.mark.asyncio
    async def test_connection_failure_reported(self, client):
        client.test_connection = AsyncMock(return_value=False)
        result = await HANDLERS["test_connection"].fn(client, {})
        assert result == {"success": False, "error": "wordpress connection test failed"}


class TestValidateParams:

    def test_valid(self):
        schema = HANDLERS["update_post"].parameter_schema
        assert validate_params(schema, {"post_id": 3, "data": {"title": "x"}}) == []

    def test_missing_required(self):
        schema = HANDLERS["update_post"].parameter_schema
        assert validate_params(schema, {"post_id": 3}) == ["missing required field: data"]

    def test_nested_paths(self):
        schema = {"type": "object", "properties": {"limit": {"type": "integer", "minimum": 1, "maximum": 250}}}
        assert validate_params(schema, {"limit": 500}) == ["limit.integer greater than maximum 250"]

    def test_bool_is_not_integer(self):
        assert validate_params({"type": "integer"}, True) == ["expected integer, got bool"]

    def test_array_items(self):
        schema = {"type": "array", "items": {"type": "string"}}
        assert validate_params(schema, ["a", 2]) == ["1.expected string, got int"]

    def test_empty_schema_accepts_anything(self):
        assert validate_params({}, object()) == []

    def test_numeric_string_id_accepted(self):
        schema = HANDLERS["update_post"].parameter_schema
        assert validate_params(schema, {"post_id": "12", "data": {}}) == []

    def test_non_numeric_id_rejected(self):
        schema = HANDLERS["update_post"].parameter_schema
        assert validate_params(schema, {"post_id": "abc", "data": {}}) == ["post_id.expected integer, got str"]

    def test_string_id_still_bounded(self):
        schema = HANDLERS["update_post"].parameter_schema
        assert validate_params(schema, {"post_id": "0", "data": {}}) == ["post_id.integer less than minimum 1"]

    def test_fractional_value_is_not_integer(self):
        assert validate_params({"type": "integer"}, 2.5) == ["expected integer, got float"]
        assert validate_params({"type": "integer"}, 3.0) == []

    def test_enum(self):
        schema = {"type": "string", "enum": ["draft", "publish"]}
        assert validate_params(schema, "publish") == []
        assert validate_params(schema, "trash") == ["value 'trash' not one of ['draft', 'publish']"]
