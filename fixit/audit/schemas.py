# fixit/audit/schemas.py
"""Audit log Pydantic schemas."""
from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

RecordStatus = Literal["success", "failed", "denied"]


class ExecutionRecordCreate(BaseModel):
    capability_name: str = "none"
    status: RecordStatus
    success: bool = False
    request_text: str = ""
    connection_id: Optional[str] = None
    input_snapshot: Optional[Dict[str, Any]] = None
    output_snapshot: Optional[Any] = None
    intent_snapshot: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None
    error_kind: Optional[str] = None
    duration_ms: int = 0
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ExecutionRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    capability_name: str
    status: RecordStatus
    success: bool
    request_text: str
    connection_id: Optional[str]
    input_snapshot: Optional[Dict[str, Any]]
    output_snapshot: Optional[Any]
    intent_snapshot: Optional[Dict[str, Any]]
    error_message: Optional[str]
    error_kind: Optional[str]
    duration_ms: int
    timestamp: datetime


class AuditFilter(BaseModel):
    capability_name: Optional[str] = None
    status: Optional[RecordStatus] = None
    success: Optional[bool] = None
    connection_id: Optional[str] = None
    since: Optional[datetime] = None


class AuditSummary(BaseModel):
    total: int
    by_status: Dict[str, int]
