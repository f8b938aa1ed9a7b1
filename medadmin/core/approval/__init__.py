"""Approval workflow module for MedAdmin.

Implements the approval state machine for providers, organizations and
requirement submissions.
"""

from .states import ApprovalStatus, ApprovalTransition, EntityKind, VALID_TRANSITIONS
from .machine import ApprovalStateMachine
from .repository import ApprovableRepository
from .service import ApprovalService

__all__ = [
    "ApprovalStatus",
    "ApprovalTransition",
    "EntityKind",
    "VALID_TRANSITIONS",
    "ApprovalStateMachine",
    "ApprovableRepository",
    "ApprovalService",
]
