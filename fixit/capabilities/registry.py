# FILE: fixit/capabilities/registry.py
"""
Capability Registry.

Owns every Capability row. Lookups return CapabilityOut snapshots, never
live ORM objects, so callers can hold them across awaits.

The handler cache maps capability name -> HandlerSpec; register() of a
name evicts its entry so a re-registered capability picks up its new
operation on the next invocation.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fixit.capabilities import service
from fixit.capabilities.handlers import HANDLERS, HandlerSpec
from fixit.capabilities.schemas import CapabilityOut, CapabilitySpec
from fixit.db import Database
from fixit.dispatch.errors import CapabilityNotFound

logger = logging.getLogger(__name__)


class CapabilityRegistry:
    def __init__(self, database: Database, catalog: Optional[Dict[str, HandlerSpec]] = None):
        self.database = database
        self.catalog = catalog if catalog is not None else HANDLERS
        self._handler_cache: Dict[str, HandlerSpec] = {}

    def find(self, query: str) -> Optional[CapabilityOut]:
        with self.database.session() as db:
            capability = service.find_by_description(db, query)
            return CapabilityOut.model_validate(capability) if capability else None

    def get(self, name: str) -> Optional[CapabilityOut]:
        with self.database.session() as db:
            capability = service.get_capability(db, name)
            return CapabilityOut.model_validate(capability) if capability else None

    def register(self, spec: CapabilitySpec) -> CapabilityOut:
        with self.database.session() as db:
            capability = CapabilityOut.model_validate(service.upsert_capability(db, spec))
        self._handler_cache.pop(spec.name, None)
        logger.info("[registry] registered %s -> %s (%s)", spec.name, spec.operation, spec.source)
        return capability

    def record_outcome(self, name: str, success: bool) -> None:
        with self.database.session() as db:
            updated = service.record_outcome(db, name, success)
        if updated == 0:
            raise CapabilityNotFound(f"capability '{name}' is not registered", capability_name=name)

    def list(self, include_inactive: bool = False) -> List[CapabilityOut]:
        with self.database.session() as db:
            return [
                CapabilityOut.model_validate(c)
                for c in service.list_capabilities(db, include_inactive=include_inactive)
            ]

    def deactivate(self, name: str) -> CapabilityOut:
        with self.database.session() as db:
            capability = service.deactivate_capability(db, name)
            if capability is None:
                raise CapabilityNotFound(f"capability '{name}' is not registered", capability_name=name)
            out = CapabilityOut.model_validate(capability)
        self._handler_cache.pop(name, None)
        logger.info("[registry] deactivated %s", name)
        return out

    def handler_for(self, capability: CapabilityOut) -> Optional[HandlerSpec]:
        handler = self._handler_cache.get(capability.name)
        if handler is None:
            handler = self.catalog.get(capability.operation)
            if handler is not None:
                self._handler_cache[capability.name] = handler
        return handler
