# fixit/dispatch/schemas.py
"""Dispatch API schemas."""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ExecuteRequest(BaseModel):
    request: str = Field(min_length=1, max_length=2000)
    connection_id: str


class ExecuteResponse(BaseModel):
    success: bool
    status: str
    output: Optional[Any] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    capability_name: Optional[str] = None
    duration_ms: int = 0
    intent: Optional[Dict[str, Any]] = None
    record_id: Optional[int] = None
