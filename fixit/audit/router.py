# file: fixit/audit/router.py
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from fixit.audit import schemas
from fixit.audit.service import AuditLog
from fixit.config import load_settings

router = APIRouter(prefix="/audit", tags=["audit"])


def get_audit_log(request: Request) -> AuditLog:
    return request.app.state.audit_log


@router.get("/records", response_model=List[schemas.ExecutionRecordOut])
def list_records(
    capability_name: Optional[str] = None,
    status: Optional[schemas.RecordStatus] = None,
    success: Optional[bool] = None,
    connection_id: Optional[str] = None,
    since: Optional[datetime] = None,
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    audit: AuditLog = Depends(get_audit_log),
):
    filters = schemas.AuditFilter(
        capability_name=capability_name,
        status=status,
        success=success,
        connection_id=connection_id,
        since=since,
    )
    return audit.query(filters, limit=limit or load_settings().audit_query_limit)


@router.get("/records/{record_id}", response_model=schemas.ExecutionRecordOut)
def get_record(record_id: int, audit: AuditLog = Depends(get_audit_log)):
    record = audit.get(record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Record not found")
    return record


@router.get("/summary", response_model=schemas.AuditSummary)
def get_summary(audit: AuditLog = Depends(get_audit_log)):
    return audit.summary()
