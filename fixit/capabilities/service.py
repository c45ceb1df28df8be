# fixit/capabilities/service.py
"""
Capability persistence (Session-level functions).

record_outcome() is one UPDATE statement whose new values are computed by
the database from the stored row, so concurrent calls on the same name
cannot lose an update.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from fixit.capabilities import models, schemas


def get_capability(db: Session, name: str) -> Optional[models.Capability]:
    return db.query(models.Capability).filter(models.Capability.name == name).first()


def list_capabilities(db: Session, include_inactive: bool = False) -> List[models.Capability]:
    query = db.query(models.Capability)
    if not include_inactive:
        query = query.filter(models.Capability.is_active.is_(True))
    return query.order_by(models.Capability.usage_count.desc(), models.Capability.id.asc()).all()


def find_by_description(db: Session, text: str) -> Optional[models.Capability]:
    """First active capability (creation order) whose description contains text, case-insensitive."""
    needle = (text or "").strip().lower()
    if not needle:
        return None
    active = (
        db.query(models.Capability)
        .filter(models.Capability.is_active.is_(True))
        .order_by(models.Capability.id.asc())
        .all()
    )
    for capability in active:
        if capability.description and needle in capability.description.lower():
            return capability
    return None


def upsert_capability(db: Session, data: schemas.CapabilitySpec) -> models.Capability:
    capability = get_capability(db, data.name)
    if capability is None:
        capability = models.Capability(
            name=data.name,
            description=data.description,
            operation=data.operation,
            parameter_schema=data.parameter_schema,
            source=data.source,
        )
        db.add(capability)
    else:
        capability.description = data.description
        capability.operation = data.operation
        capability.parameter_schema = data.parameter_schema
        capability.source = data.source
        capability.is_active = True
        capability.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(capability)
    return capability


def record_outcome(db: Session, name: str, success: bool) -> int:
    """Returns the number of rows updated (0 when the name is unknown)."""
    cap = models.Capability
    stmt = (
        update(cap)
        .where(cap.name == name)
        .values(
            usage_count=cap.usage_count + 1,
            success_rate=(cap.success_rate * cap.usage_count + (1.0 if success else 0.0))
            / (cap.usage_count + 1),
        )
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    db.commit()
    return result.rowcount


def deactivate_capability(db: Session, name: str) -> Optional[models.Capability]:
    capability = get_capability(db, name)
    if capability is None:
        return None
    capability.is_active = False
    db.commit()
    db.refresh(capability)
    return capability
