# FILE: fixit/intent/schemas.py
"""Intent schema: structured reading of a free-text store request."""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator


class IntentCategory(str, Enum):
    PLUGIN_MANAGEMENT = "plugin_management"
    CACHE_MANAGEMENT = "cache_management"
    CONTENT_MANAGEMENT = "content_management"
    SETTINGS_MANAGEMENT = "settings_management"
    UNKNOWN = "unknown"


class IntentVerb(str, Enum):
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    INSTALL = "install"
    UNINSTALL = "uninstall"
    CLEAR = "clear"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    UNKNOWN = "unknown"


class Intent(BaseModel):
    category: IntentCategory = IntentCategory.UNKNOWN
    verb: IntentVerb = IntentVerb.UNKNOWN
    target: str = ""
    parameters: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, v):
        try:
            return IntentCategory(str(v).strip().lower())
        except ValueError:
            return IntentCategory.UNKNOWN

    @field_validator("verb", mode="before")
    @classmethod
    def _coerce_verb(cls, v):
        try:
            return IntentVerb(str(v).strip().lower())
        except ValueError:
            return IntentVerb.UNKNOWN

    @field_validator("target", mode="before")
    @classmethod
    def _coerce_target(cls, v):
        if v is None:
            return ""
        target = str(v).strip()
        return "" if target.lower() == "unknown" else target

    @field_validator("parameters", mode="before")
    @classmethod
    def _coerce_parameters(cls, v):
        return v if isinstance(v, dict) else {}

    @classmethod
    def unknown(cls) -> "Intent":
        return cls()

    @property
    def is_unknown(self) -> bool:
        return self.category == IntentCategory.UNKNOWN and self.verb == IntentVerb.UNKNOWN

    def snapshot(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
