"""Audit log model for MedAdmin.

Append-only: the workflow only ever inserts rows into this table.
"""

from enum import Enum

from sqlalchemy import Column, String, DateTime, JSON, Text

from medadmin.core.clock import utcnow
from medadmin.db.base import Base, new_id


class AuditSeverity(str, Enum):
    """Severity levels for audit log entries."""
    INFO = "info"         # Standard operations
    WARNING = "warning"   # Security-relevant actions (account overrides)
    ERROR = "error"       # Failed operations


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=new_id)

    # Actor
    actor_id = Column(String(36), nullable=True, index=True)

    # Action details
    action = Column(String(100), nullable=False, index=True)
    entity_type = Column(String(100), nullable=False, index=True)
    entity_id = Column(String(36), nullable=True, index=True)
    reason = Column(Text, nullable=True)
    details = Column(JSON, nullable=True)

    severity = Column(String(20), nullable=False, default="info", index=True)
    created_at = Column(DateTime, default=utcnow, index=True)

    def __repr__(self) -> str:
        return f"<AuditLog {self.action} on {self.entity_type} by {self.actor_id}>"
