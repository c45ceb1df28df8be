# fixit/capabilities/schemas.py
"""Capability Pydantic schemas."""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

CapabilitySource = Literal["builtin", "generated", "manual"]


class CapabilitySpec(BaseModel):
    """Input to CapabilityRegistry.register() (upsert by name)."""
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    operation: str
    parameter_schema: Optional[Dict[str, Any]] = None
    source: CapabilitySource = "manual"


class CapabilityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    operation: str
    parameter_schema: Optional[Dict[str, Any]]
    source: str
    is_active: bool
    usage_count: int
    success_rate: float
    created_at: datetime
    updated_at: datetime


class OperationOut(BaseModel):
    operation: str
    description: str
    platforms: List[str]
    parameter_schema: Dict[str, Any]
