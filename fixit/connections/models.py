# fixit/connections/models.py
"""SQLAlchemy model for connected stores (Shopify or WordPress)."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, String

from fixit.db import Base


class StoreConnection(Base):
    __tablename__ = "store_connections"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    store_type = Column(String(20), nullable=False, index=True)  # shopify | wordpress
    store_url = Column(String(500), nullable=False)

    # Shopify
    access_token = Column(String(255), nullable=True)

    # WordPress (application password)
    username = Column(String(255), nullable=True)
    app_password = Column(String(255), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
