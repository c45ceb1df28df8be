# FILE: fixit/capabilities/handlers.py
"""
Static handler catalog.

Capabilities never carry executable code. Each one names an `operation`
from this closed catalog; the dispatcher looks the handler up here and
calls it with (client, params). A capability whose operation is missing
from the catalog cannot run ("capability not implemented").

Handlers raise on failure, or return a dict with "success": False and an
"error"/"message" to report a handled failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fixit.platforms.base import PlatformClient

HandlerFn = Callable[[PlatformClient, Dict[str, Any]], Awaitable[Any]]


@dataclass(frozen=True)
class HandlerSpec:
    operation: str
    description: str
    fn: HandlerFn
    parameter_schema: Dict[str, Any] = field(default_factory=lambda: {"type": "object"})
    platforms: tuple = ("wordpress", "shopify")


class MissingParameter(ValueError):
    pass


def _param(params: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = params.get(key)
        if value not in (None, ""):
            return value
    raise MissingParameter(f"missing parameter: {keys[0]}")


def _int_param(params: Dict[str, Any], *keys: str) -> int:
    value = _param(params, *keys)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise MissingParameter(f"parameter {keys[0]} must be an integer, got {value!r}")


def _dict_param(params: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = _param(params, key)
    if not isinstance(value, dict):
        raise MissingParameter(f"parameter {key} must be an object")
    return value


# =============================================================================
# WORDPRESS
# =============================================================================

async def _list_plugins(client: PlatformClient, params: Dict[str, Any]) -> Any:
    return await client.perform("list_plugins", {})


async def _activate_plugin(client: PlatformClient, params: Dict[str, Any]) -> Any:
    return await client.perform("activate_plugin", {"plugin": str(_param(params, "plugin", "target"))})


async def _deactivate_plugin(client: PlatformClient, params: Dict[str, Any]) -> Any:
    return await client.perform("deactivate_plugin", {"plugin": str(_param(params, "plugin", "target"))})


async def _clear_cache(client: PlatformClient, params: Dict[str, Any]) -> Any:
    return await client.perform("clear_cache", {})


async def _update_post(client: PlatformClient, params: Dict[str, Any]) -> Any:
    return await client.perform(
        "update_post",
        {"post_id": _int_param(params, "post_id", "target"), "data": _dict_param(params, "data")},
    )


async def _update_page(client: PlatformClient, params: Dict[str, Any]) -> Any:
    return await client.perform(
        "update_page",
        {"page_id": _int_param(params, "page_id", "target"), "data": _dict_param(params, "data")},
    )


async def _update_option(client: PlatformClient, params: Dict[str, Any]) -> Any:
    if "value" not in params:
        raise MissingParameter("missing parameter: value")
    return await client.perform(
        "update_option",
        {"option": str(_param(params, "option", "target")), "value": params["value"]},
    )


# =============================================================================
# SHOPIFY
# =============================================================================

async def _list_products(client: PlatformClient, params: Dict[str, Any]) -> Any:
    return await client.perform("list_products", {"limit": int(params.get("limit") or 50)})


async def _update_product(client: PlatformClient, params: Dict[str, Any]) -> Any:
    return await client.perform(
        "update_product",
        {"product_id": _int_param(params, "product_id", "target"), "data": _dict_param(params, "data")},
    )


async def _update_theme_asset(client: PlatformClient, params: Dict[str, Any]) -> Any:
    return await client.perform(
        "update_theme_asset",
        {
            "theme_id": _int_param(params, "theme_id"),
            "key": str(_param(params, "key")),
            "value": str(_param(params, "value")),
        },
    )


async def _create_discount(client: PlatformClient, params: Dict[str, Any]) -> Any:
    return await client.perform("create_discount", {"price_rule": _dict_param(params, "price_rule")})


# =============================================================================
# ANY PLATFORM
# =============================================================================

async def _test_connection(client: PlatformClient, params: Dict[str, Any]) -> Any:
    ok = await client.test_connection()
    if not ok:
        return {"success": False, "error": f"{client.platform} connection test failed"}
    return {"success": True, "platform": client.platform}


_ID = {"type": "integer", "minimum": 1}
_SLUG = {"type": "string", "minLength": 1, "maxLength": 255}

HANDLERS: Dict[str, HandlerSpec] = {
    spec.operation: spec
    for spec in [
        HandlerSpec(
            "list_plugins", "List installed WordPress plugins", _list_plugins,
            platforms=("wordpress",),
        ),
        HandlerSpec(
            "activate_plugin", "Activate a WordPress plugin", _activate_plugin,
            {"type": "object", "properties": {"plugin": _SLUG, "target": _SLUG}},
            platforms=("wordpress",),
        ),
        HandlerSpec(
            "deactivate_plugin", "Deactivate a WordPress plugin", _deactivate_plugin,
            {"type": "object", "properties": {"plugin": _SLUG, "target": _SLUG}},
            platforms=("wordpress",),
        ),
        HandlerSpec(
            "clear_cache", "Clear the WordPress page cache", _clear_cache,
            platforms=("wordpress",),
        ),
        HandlerSpec(
            "update_post", "Update a WordPress post", _update_post,
            {"type": "object", "required": ["data"], "properties": {"post_id": _ID, "data": {"type": "object"}}},
            platforms=("wordpress",),
        ),
        HandlerSpec(
            "update_page", "Update a WordPress page", _update_page,
            {"type": "object", "required": ["data"], "properties": {"page_id": _ID, "data": {"type": "object"}}},
            platforms=("wordpress",),
        ),
        HandlerSpec(
            "update_option", "Update a WordPress site setting", _update_option,
            {"type": "object", "required": ["value"], "properties": {"option": _SLUG}},
            platforms=("wordpress",),
        ),
        HandlerSpec(
            "list_products", "List Shopify products", _list_products,
            {"type": "object", "properties": {"limit": {"type": "integer", "minimum": 1, "maximum": 250}}},
            platforms=("shopify",),
        ),
        HandlerSpec(
            "update_product", "Update a Shopify product", _update_product,
            {"type": "object", "required": ["data"], "properties": {"product_id": _ID, "data": {"type": "object"}}},
            platforms=("shopify",),
        ),
        HandlerSpec(
            "update_theme_asset", "Update a Shopify theme asset", _update_theme_asset,
            {
                "type": "object",
                "required": ["theme_id", "key", "value"],
                "properties": {"theme_id": _ID, "key": _SLUG, "value": {"type": "string"}},
            },
            platforms=("shopify",),
        ),
        HandlerSpec(
            "create_discount", "Create a Shopify discount (price rule)", _create_discount,
            {"type": "object", "required": ["price_rule"], "properties": {"price_rule": {"type": "object"}}},
            platforms=("shopify",),
        ),
        HandlerSpec("test_connection", "Check that the store API is reachable", _test_connection),
    ]
}


def get_handler(operation: str) -> Optional[HandlerSpec]:
    return HANDLERS.get(operation)


def list_operations() -> List[HandlerSpec]:
    return list(HANDLERS.values())
