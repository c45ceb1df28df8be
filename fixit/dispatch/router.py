# file: fixit/dispatch/router.py
from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from fixit.capabilities.handlers import list_operations
from fixit.capabilities.registry import CapabilityRegistry
from fixit.capabilities.schemas import CapabilityOut, OperationOut
from fixit.connections import service as connection_service
from fixit.db import get_db
from fixit.dispatch.dispatcher import Dispatcher
from fixit.dispatch.errors import CapabilityNotFound
from fixit.dispatch.schemas import ExecuteRequest, ExecuteResponse

router = APIRouter(prefix="/actions", tags=["actions"])


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.dispatcher


def get_registry(request: Request) -> CapabilityRegistry:
    return request.app.state.dispatcher.registry


@router.post("/execute", response_model=ExecuteResponse)
async def execute_action(
    data: ExecuteRequest,
    db: Session = Depends(get_db),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """Run a natural-language store request. Failures come back in the body, not as HTTP errors."""
    connection = connection_service.get_active_connection(db, data.connection_id)
    if not connection:
        raise HTTPException(status_code=404, detail="Connection not found")
    ref = connection_service.to_ref(connection)
    db.close()

    outcome = await dispatcher.execute(data.request, ref)
    return ExecuteResponse(**asdict(outcome))


@router.get("/capabilities", response_model=List[CapabilityOut])
def list_capabilities(include_inactive: bool = False, registry: CapabilityRegistry = Depends(get_registry)):
    return registry.list(include_inactive=include_inactive)


@router.get("/capabilities/{name}", response_model=CapabilityOut)
def get_capability(name: str, registry: CapabilityRegistry = Depends(get_registry)):
    capability = registry.get(name)
    if not capability:
        raise HTTPException(status_code=404, detail="Capability not found")
    return capability


@router.post("/capabilities/{name}/deactivate", response_model=CapabilityOut)
def deactivate_capability(name: str, registry: CapabilityRegistry = Depends(get_registry)):
    try:
        return registry.deactivate(name)
    except CapabilityNotFound:
        raise HTTPException(status_code=404, detail="Capability not found")


@router.get("/operations", response_model=List[OperationOut])
def get_operations():
    return [
        OperationOut(
            operation=h.operation,
            description=h.description,
            platforms=list(h.platforms),
            parameter_schema=h.parameter_schema,
        )
        for h in list_operations()
    ]
