# fixit/capabilities/models.py
"""
SQLAlchemy model for registered capabilities.

A capability is never physically deleted, only deactivated. usage_count
only increases; success_rate is the running average of successful runs.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, Text

from fixit.db import Base


class Capability(Base):
    __tablename__ = "capabilities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")

    # Key into fixit.capabilities.handlers.HANDLERS
    operation = Column(String(100), nullable=False)
    parameter_schema = Column(JSON, nullable=True)

    # "builtin" | "generated" | "manual"
    source = Column(String(20), default="manual", nullable=False)

    is_active = Column(Boolean, default=True, nullable=False, index=True)
    usage_count = Column(Integer, default=0, nullable=False)
    success_rate = Column(Float, default=0.0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
