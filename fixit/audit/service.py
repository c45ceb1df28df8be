# fixit/audit/service.py
"""
Audit log.

AuditLog is the only writer of execution_records. append() never raises:
a failed write is reported on the operational log (the "fixit.audit"
logger) and the dispatcher's outcome is returned unchanged.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from fixit.audit import models, schemas
from fixit.db import Database
from fixit.dispatch.errors import AuditWriteFailed

logger = logging.getLogger("fixit.audit")


def _safe_json(obj: Any) -> Any:
    try:
        json.dumps(obj)
        return obj
    except (TypeError, ValueError):
        return json.loads(json.dumps(obj, default=str))


# ============== SESSION-LEVEL ==============

def create_record(db: Session, data: schemas.ExecutionRecordCreate) -> models.ExecutionRecord:
    record = models.ExecutionRecord(
        capability_name=data.capability_name or "none",
        status=data.status,
        success=data.success,
        request_text=data.request_text,
        connection_id=data.connection_id,
        input_snapshot=_safe_json(data.input_snapshot),
        output_snapshot=_safe_json(data.output_snapshot),
        intent_snapshot=_safe_json(data.intent_snapshot),
        error_message=data.error_message,
        error_kind=data.error_kind,
        duration_ms=data.duration_ms,
        timestamp=data.timestamp,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def get_record(db: Session, record_id: int) -> Optional[models.ExecutionRecord]:
    return db.query(models.ExecutionRecord).filter(models.ExecutionRecord.id == record_id).first()


def query_records(
    db: Session, filters: Optional[schemas.AuditFilter] = None, limit: int = 50
) -> List[models.ExecutionRecord]:
    query = db.query(models.ExecutionRecord)
    if filters is not None:
        if filters.capability_name:
            query = query.filter(models.ExecutionRecord.capability_name == filters.capability_name)
        if filters.status:
            query = query.filter(models.ExecutionRecord.status == filters.status)
        if filters.success is not None:
            query = query.filter(models.ExecutionRecord.success.is_(filters.success))
        if filters.connection_id:
            query = query.filter(models.ExecutionRecord.connection_id == filters.connection_id)
        if filters.since is not None:
            query = query.filter(models.ExecutionRecord.timestamp >= filters.since)
    return (
        query.order_by(models.ExecutionRecord.timestamp.desc(), models.ExecutionRecord.id.desc())
        .limit(limit)
        .all()
    )


def count_by_status(db: Session) -> Dict[str, int]:
    rows = (
        db.query(models.ExecutionRecord.status, func.count(models.ExecutionRecord.id))
        .group_by(models.ExecutionRecord.status)
        .all()
    )
    return {status: count for status, count in rows}


# ============== AUDIT LOG ==============

class AuditLog:
    def __init__(self, database: Database, max_limit: int = 500):
        self.database = database
        self.max_limit = max_limit

    def append(self, record: schemas.ExecutionRecordCreate) -> Optional[int]:
        """Write one record. Returns its id, or None if the write failed."""
        try:
            with self.database.session() as db:
                return create_record(db, record).id
        except Exception as e:
            err = AuditWriteFailed(f"audit append failed: {e}", capability_name=record.capability_name)
            logger.exception(
                "[audit] %s (capability=%s status=%s)", err, record.capability_name, record.status
            )
            return None

    def query(
        self, filters: Optional[schemas.AuditFilter] = None, limit: int = 50
    ) -> List[schemas.ExecutionRecordOut]:
        limit = max(1, min(int(limit), self.max_limit))
        with self.database.session() as db:
            return [
                schemas.ExecutionRecordOut.model_validate(r)
                for r in query_records(db, filters, limit=limit)
            ]

    def get(self, record_id: int) -> Optional[schemas.ExecutionRecordOut]:
        with self.database.session() as db:
            record = get_record(db, record_id)
            return schemas.ExecutionRecordOut.model_validate(record) if record else None

    def summary(self) -> schemas.AuditSummary:
        with self.database.session() as db:
            by_status = count_by_status(db)
        return schemas.AuditSummary(total=sum(by_status.values()), by_status=by_status)
