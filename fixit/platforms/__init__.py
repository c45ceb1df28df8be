"""
Target-platform clients.

Usage:
    from fixit.platforms import client_for

    client = client_for(connection_ref, timeout_s=10)
    await client.perform("deactivate_plugin", {"plugin": "hello-dolly/hello"})
"""

from typing import Optional

import httpx

from .base import DEFAULT_TIMEOUT_S, PlatformClient, PlatformError, UnsupportedOperation
from .shopify import ShopifyClient
from .wordpress import WordPressClient


def client_for(
    connection,
    *,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> PlatformClient:
    """Build the client for a connection (anything with store_type/store_url/credentials)."""
    if connection.store_type == "shopify":
        return ShopifyClient(
            connection.store_url,
            connection.access_token or "",
            timeout_s=timeout_s,
            transport=transport,
        )
    if connection.store_type == "wordpress":
        return WordPressClient(
            connection.store_url,
            connection.username or "",
            connection.app_password or "",
            timeout_s=timeout_s,
            transport=transport,
        )
    raise UnsupportedOperation(f"unknown store type: {connection.store_type}")


__all__ = [
    "DEFAULT_TIMEOUT_S",
    "PlatformClient",
    "PlatformError",
    "UnsupportedOperation",
    "ShopifyClient",
    "WordPressClient",
    "client_for",
]
