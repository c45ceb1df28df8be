# file: fixit/connections/router.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fixit.config import load_settings
from fixit.connections import schemas, service
from fixit.db import get_db

router = APIRouter(prefix="/connections", tags=["connections"])


@router.post("", response_model=schemas.ConnectionOut, status_code=201)
def create_connection(data: schemas.ConnectionCreate, db: Session = Depends(get_db)):
    return service.create_connection(db, data)


@router.get("", response_model=List[schemas.ConnectionOut])
def list_connections(type: Optional[schemas.StoreType] = None, db: Session = Depends(get_db)):
    return service.list_connections(db, store_type=type)


@router.get("/{connection_id}", response_model=schemas.ConnectionOut)
def get_connection(connection_id: str, db: Session = Depends(get_db)):
    connection = service.get_connection(db, connection_id)
    if not connection:
        raise HTTPException(status_code=404, detail="Connection not found")
    return connection


@router.put("/{connection_id}", response_model=schemas.ConnectionOut)
def update_connection(connection_id: str, data: schemas.ConnectionUpdate, db: Session = Depends(get_db)):
    connection = service.update_connection(db, connection_id, data)
    if not connection:
        raise HTTPException(status_code=404, detail="Connection not found")
    return connection


@router.delete("/{connection_id}", status_code=204)
def delete_connection(connection_id: str, db: Session = Depends(get_db)):
    if not service.delete_connection(db, connection_id):
        raise HTTPException(status_code=404, detail="Connection not found")
    return None


@router.post("/{connection_id}/test", response_model=schemas.ConnectionTestResult)
async def test_connection(connection_id: str, db: Session = Depends(get_db)):
    """Connectivity check against the store API (10 s budget by default)."""
    connection = service.get_active_connection(db, connection_id)
    if not connection:
        raise HTTPException(status_code=404, detail="Connection not found")
    ref = service.to_ref(connection)
    return await service.check_connection(ref, timeout_s=load_settings().connection_test_timeout_s)
