# FILE: fixit/platforms/shopify.py
"""Shopify Admin REST API client (token auth)."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from fixit.platforms.base import PlatformClient, PlatformError

logger = logging.getLogger(__name__)

API_VERSION = "2025-01"


def admin_base_url(store_url: str) -> str:
    host = re.sub(r"^https?://", "", store_url.strip()).rstrip("/")
    return f"https://{host}/admin/api/{API_VERSION}"


class ShopifyClient(PlatformClient):
    platform = "shopify"

    operations = {
        "list_products": "list_products",
        "update_product": "update_product",
        "update_theme_asset": "update_theme_asset",
        "create_discount": "create_discount",
    }

    def __init__(self, store_url: str, access_token: str, **kwargs):
        super().__init__(admin_base_url(store_url), **kwargs)
        self.access_token = access_token

    def _headers(self) -> Dict[str, str]:
        return {
            "X-Shopify-Access-Token": self.access_token,
            "Content-Type": "application/json",
        }

    async def list_products(self, limit: int = 50) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/products.json", params={"limit": int(limit)})
        return data.get("products", [])

    async def update_product(self, product_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        resp = await self._request("PUT", f"/products/{int(product_id)}.json", json={"product": data})
        return resp.get("product", resp)

    async def update_theme_asset(self, theme_id: int, key: str, value: str) -> Dict[str, Any]:
        resp = await self._request(
            "PUT",
            f"/themes/{int(theme_id)}/assets.json",
            json={"asset": {"key": key, "value": value}},
        )
        return resp.get("asset", resp)

    async def create_discount(self, price_rule: Dict[str, Any]) -> Dict[str, Any]:
        resp = await self._request("POST", "/price_rules.json", json={"price_rule": price_rule})
        return resp.get("price_rule", resp)

    async def test_connection(self, timeout_s: Optional[float] = None) -> bool:
        try:
            await self._request("GET", "/shop.json", timeout_s=timeout_s)
            return True
        except PlatformError as e:
            logger.info("[shopify] connection test failed for %s: %s", self.base_url, e)
            return False
