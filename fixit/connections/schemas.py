# fixit/connections/schemas.py
"""
Connection Pydantic schemas.

Credentials are write-only: ConnectionOut reports whether they are set but
never echoes them.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator

StoreType = Literal["shopify", "wordpress"]


class ConnectionCreate(BaseModel):
    store_type: StoreType
    store_url: str
    access_token: Optional[str] = None
    username: Optional[str] = None
    app_password: Optional[str] = None

    @model_validator(mode="after")
    def _check_credentials(self):
        if self.store_type == "shopify" and not self.access_token:
            raise ValueError("Shopify connections require access_token")
        if self.store_type == "wordpress" and not (self.username and self.app_password):
            raise ValueError("WordPress connections require username and app_password")
        return self


class ConnectionUpdate(BaseModel):
    store_url: Optional[str] = None
    access_token: Optional[str] = None
    username: Optional[str] = None
    app_password: Optional[str] = None
    is_active: Optional[bool] = None


class ConnectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    store_type: StoreType
    store_url: str
    username: Optional[str] = None
    has_credentials: bool = False
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="before")
    @classmethod
    def _credentials_flag(cls, data):
        if isinstance(data, dict):
            return data
        return {
            "id": data.id,
            "store_type": data.store_type,
            "store_url": data.store_url,
            "username": data.username,
            "has_credentials": bool(data.access_token or (data.username and data.app_password)),
            "is_active": data.is_active,
            "created_at": data.created_at,
            "updated_at": data.updated_at,
        }


class ConnectionRef(BaseModel):
    """Read-only snapshot of a connection handed to the dispatcher."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    store_type: StoreType
    store_url: str
    access_token: Optional[str] = None
    username: Optional[str] = None
    app_password: Optional[str] = None


class ConnectionTestResult(BaseModel):
    id: str
    store_type: StoreType
    ok: bool
    duration_ms: int
