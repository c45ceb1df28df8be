# fixit/audit/models.py
"""
SQLAlchemy model for the append-only audit log.

One ExecutionRecord per dispatch attempt, whatever the outcome. Rows are
never updated or deleted by Fixit.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text

from fixit.db import Base


class ExecutionRecord(Base):
    __tablename__ = "execution_records"

    id = Column(Integer, primary_key=True, index=True)
    capability_name = Column(String(255), nullable=False, default="none", index=True)

    # success | failed | denied
    status = Column(String(20), nullable=False, index=True)
    success = Column(Boolean, nullable=False, default=False)

    request_text = Column(Text, nullable=False, default="")
    connection_id = Column(String(36), nullable=True, index=True)

    input_snapshot = Column(JSON, nullable=True)
    output_snapshot = Column(JSON, nullable=True)
    intent_snapshot = Column(JSON, nullable=True)

    error_message = Column(Text, nullable=True)
    error_kind = Column(String(50), nullable=True)
    duration_ms = Column(Integer, nullable=False, default=0)

    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
