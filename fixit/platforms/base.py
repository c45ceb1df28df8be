# FILE: fixit/platforms/base.py
"""
Target-platform client base.

A client performs named operations against one connected store. Concrete
clients expose one coroutine method per operation they support; perform()
routes an operation name to that method. The dispatcher never needs to know
which platform backs a connection.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0


class PlatformError(Exception):
    """A platform API call failed (transport error or non-2xx status)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UnsupportedOperation(PlatformError):
    """The platform has no implementation for the requested operation."""


class PlatformClient(ABC):
    platform = "generic"

    # operation name -> method name; filled by subclasses
    operations: Dict[str, str] = {}

    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport

    async def perform(self, operation: str, params: Dict[str, Any]) -> Any:
        method_name = self.operations.get(operation)
        if method_name is None:
            raise UnsupportedOperation(
                f"operation '{operation}' is not supported by {self.platform}"
            )
        return await getattr(self, method_name)(**params)

    def _headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout_s: Optional[float] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        timeout = httpx.Timeout(timeout_s or self.timeout_s)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                resp = await client.request(method, url, json=json, params=params, headers=self._headers())
        except httpx.TimeoutException as e:
            raise PlatformError(f"{self.platform} request timed out: {method} {path}") from e
        except httpx.HTTPError as e:
            raise PlatformError(f"{self.platform} request failed: {e}") from e

        if resp.status_code >= 400:
            logger.warning(
                "[platforms] %s %s %s -> %s", self.platform, method, path, resp.status_code
            )
            raise PlatformError(
                f"{self.platform} API returned {resp.status_code} for {method} {path}",
                status_code=resp.status_code,
            )

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError:
            return {"text": resp.text}

    @abstractmethod
    async def test_connection(self, timeout_s: Optional[float] = None) -> bool:
        """True when the store answers an authenticated request."""
