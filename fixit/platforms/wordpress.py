# FILE: fixit/platforms/wordpress.py
"""
WordPress REST API client.

Auth: Basic with a WordPress application password.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from fixit.platforms.base import PlatformClient, PlatformError

logger = logging.getLogger(__name__)

API_ROOT = "/wp-json/wp/v2"

# Cache plugins we know how to purge, in preference order: slug -> (method, REST path)
CACHE_PURGE_ENDPOINTS = {
    "w3-total-cache": ("POST", "/wp-json/w3tc/v1/flush"),
    "wp-rocket": ("POST", "/wp-json/wp-rocket/v1/clean"),
    "wp-super-cache": ("POST", "/wp-json/wp-super-cache/v1/cache"),
}


class WordPressClient(PlatformClient):
    platform = "wordpress"

    operations = {
        "list_plugins": "list_plugins",
        "activate_plugin": "activate_plugin",
        "deactivate_plugin": "deactivate_plugin",
        "clear_cache": "clear_cache",
        "update_post": "update_post",
        "update_page": "update_page",
        "update_option": "update_option",
    }

    def __init__(self, base_url: str, username: str, app_password: str, **kwargs):
        super().__init__(base_url, **kwargs)
        self.username = username
        self.app_password = app_password

    def _headers(self) -> Dict[str, str]:
        credentials = base64.b64encode(f"{self.username}:{self.app_password}".encode()).decode()
        return {
            "Authorization": f"Basic {credentials}",
            "Content-Type": "application/json",
        }

    # ------------------------------------------------------------------ plugins

    async def list_plugins(self) -> List[Dict[str, Any]]:
        return await self._request("GET", f"{API_ROOT}/plugins")

    async def active_plugins(self) -> List[Dict[str, Any]]:
        plugins = await self.list_plugins()
        return [p for p in plugins if p.get("status") == "active"]

    async def _set_plugin_status(self, plugin: str, status: str) -> Dict[str, Any]:
        path = f"{API_ROOT}/plugins/{quote(plugin, safe='/')}"
        return await self._request("POST", path, json={"status": status})

    async def activate_plugin(self, plugin: str) -> Dict[str, Any]:
        return await self._set_plugin_status(plugin, "active")

    async def deactivate_plugin(self, plugin: str) -> Dict[str, Any]:
        return await self._set_plugin_status(plugin, "inactive")

    # -------------------------------------------------------------------- cache

    async def clear_cache(self) -> Dict[str, Any]:
        """
        Purge the page cache through whichever supported cache plugin is active.

        Returns {"success", "message", "plugin"}; success is False (not an
        exception) when no supported cache plugin is active.
        """
        active = await self.active_plugins()
        active_slugs = {str(p.get("plugin", "")).split("/", 1)[0] for p in active}

        for slug, (method, path) in CACHE_PURGE_ENDPOINTS.items():
            if slug not in active_slugs:
                continue
            try:
                await self._request(method, path)
            except PlatformError as e:
                logger.warning("[wordpress] cache purge via %s failed: %s", slug, e)
                return {"success": False, "message": f"Cache purge via {slug} failed: {e}", "plugin": slug}
            return {"success": True, "message": f"Cache cleared via {slug}", "plugin": slug}

        return {
            "success": False,
            "message": "No supported cache plugin is active "
            f"(supported: {', '.join(CACHE_PURGE_ENDPOINTS)})",
            "plugin": None,
        }

    # ------------------------------------------------------------------ content

    async def update_post(self, post_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", f"{API_ROOT}/posts/{int(post_id)}", json=data)

    async def update_page(self, page_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", f"{API_ROOT}/pages/{int(page_id)}", json=data)

    async def update_option(self, option: str, value: Any) -> Dict[str, Any]:
        return await self._request("POST", f"{API_ROOT}/settings", json={option: value})

    async def test_connection(self, timeout_s: Optional[float] = None) -> bool:
        try:
            await self._request("GET", f"{API_ROOT}/", timeout_s=timeout_s)
            return True
        except PlatformError as e:
            logger.info("[wordpress] connection test failed for %s: %s", self.base_url, e)
            return False
