"""Audit trail for admin decisions and override sessions."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from medadmin.db.models.audit import AuditLog, AuditSeverity

from .clock import utcnow
from .logger import get_logger


logger = get_logger(__name__)


class AuditAction(str, Enum):
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    INITIATE_OVERRIDE = "INITIATE_OVERRIDE"
    END_OVERRIDE = "END_OVERRIDE"


@dataclass
class AuditEntry:
    actor_id: str
    action: AuditAction
    entity_type: str
    entity_id: Optional[str]
    reason: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    severity: AuditSeverity = AuditSeverity.INFO
    timestamp: datetime = field(default_factory=utcnow)


class AuditSink(ABC):
    """Append-only destination for audit entries."""

    @abstractmethod
    def record(self, entry: AuditEntry) -> None:
        ...


class DatabaseAuditSink(AuditSink):
    """
    Writes entries to ``audit_logs`` through the caller's session.

    The row is only added, not committed, so it lands in the same transaction
    as the change it describes.
    """

    def __init__(self, db: Session):
        self.db = db

    def record(self, entry: AuditEntry) -> None:
        self.db.add(
            AuditLog(
                actor_id=entry.actor_id,
                action=entry.action.value,
                entity_type=entry.entity_type,
                entity_id=entry.entity_id,
                reason=entry.reason,
                details=entry.metadata or None,
                severity=entry.severity.value,
                created_at=entry.timestamp,
            )
        )
        logger.log(
            logging.WARNING if entry.severity == AuditSeverity.WARNING else logging.INFO,
            "AUDIT %s %s %s by %s",
            entry.action.value,
            entry.entity_type,
            entry.entity_id,
            entry.actor_id,
        )
