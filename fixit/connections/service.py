# fixit/connections/service.py
"""
Connection service layer.

Connections are never physically deleted; delete_connection() deactivates.
"""
import logging
import time
from typing import List, Optional

from sqlalchemy.orm import Session

from fixit.connections import models, schemas

logger = logging.getLogger(__name__)


def create_connection(db: Session, data: schemas.ConnectionCreate) -> models.StoreConnection:
    connection = models.StoreConnection(
        store_type=data.store_type,
        store_url=data.store_url.rstrip("/"),
        access_token=data.access_token,
        username=data.username,
        app_password=data.app_password,
    )
    db.add(connection)
    db.commit()
    db.refresh(connection)
    logger.info("[connections] created %s connection %s", connection.store_type, connection.id)
    return connection


def get_connection(db: Session, connection_id: str) -> Optional[models.StoreConnection]:
    return db.query(models.StoreConnection).filter(models.StoreConnection.id == connection_id).first()


def get_active_connection(db: Session, connection_id: str) -> Optional[models.StoreConnection]:
    return (
        db.query(models.StoreConnection)
        .filter(models.StoreConnection.id == connection_id, models.StoreConnection.is_active.is_(True))
        .first()
    )


def list_connections(db: Session, store_type: Optional[str] = None) -> List[models.StoreConnection]:
    query = db.query(models.StoreConnection).filter(models.StoreConnection.is_active.is_(True))
    if store_type:
        query = query.filter(models.StoreConnection.store_type == store_type)
    return query.order_by(models.StoreConnection.created_at.desc()).all()


def update_connection(
    db: Session, connection_id: str, data: schemas.ConnectionUpdate
) -> Optional[models.StoreConnection]:
    connection = get_connection(db, connection_id)
    if not connection:
        return None
    if data.store_url is not None:
        connection.store_url = data.store_url.rstrip("/")
    if data.access_token is not None:
        connection.access_token = data.access_token
    if data.username is not None:
        connection.username = data.username
    if data.app_password is not None:
        connection.app_password = data.app_password
    if data.is_active is not None:
        connection.is_active = data.is_active
    db.commit()
    db.refresh(connection)
    return connection


def delete_connection(db: Session, connection_id: str) -> bool:
    connection = get_connection(db, connection_id)
    if not connection:
        return False
    connection.is_active = False
    db.commit()
    logger.info("[connections] deactivated connection %s", connection_id)
    return True


def to_ref(connection: models.StoreConnection) -> schemas.ConnectionRef:
    return schemas.ConnectionRef.model_validate(connection)


async def check_connection(
    connection: schemas.ConnectionRef, timeout_s: float
) -> schemas.ConnectionTestResult:
    from fixit.platforms import client_for

    started = time.perf_counter()
    ok = await client_for(connection, timeout_s=timeout_s).test_connection(timeout_s=timeout_s)
    return schemas.ConnectionTestResult(
        id=connection.id,
        store_type=connection.store_type,
        ok=ok,
        duration_ms=int((time.perf_counter() - started) * 1000),
    )
