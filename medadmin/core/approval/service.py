"""Approval service for provider, organization and requirement decisions.

Provides the high-level API the admin console calls: approve / reject with
persistence, audit logging and change notification, plus listing and batch
helpers. Every public operation returns an :class:`ActionResult`.
"""

from typing import Optional, Dict, Any, List

from sqlalchemy.orm import Session

from ..audit import AuditAction, AuditEntry, AuditSink, DatabaseAuditSink
from ..errors import MissingReasonError, PermissionDeniedError, TransitionError
from ..events import ChangeNotifier
from ..identity import CurrentUser
from ..logger import get_logger
from ..rbac.checker import require_permission
from ..results import ActionResult, FailureReason
from .machine import ApprovalStateMachine
from .repository import ApprovableRepository
from .states import (
    APPROVAL_PERMISSIONS,
    ApprovalStatus,
    ApprovalTransition,
    EntityKind,
    from_stored,
    requires_reason,
)


logger = get_logger(__name__)


class ApprovalService:
    """
    High-level service for admin approval decisions.

    Handles:
    - Approving and rejecting pending entities of every kind
    - Race-safe persistence through compare-and-swap
    - One audit entry per decision, written in the same transaction
    - Listing and batch operations
    """

    def __init__(
        self,
        db: Session,
        *,
        audit: Optional[AuditSink] = None,
        notifier: Optional[ChangeNotifier] = None,
    ):
        """
        Initialize the approval service.

        Args:
            db: Database session
            audit: Audit sink (defaults to the ``audit_logs`` table)
            notifier: Receives ``(entity_type, entity_id)`` after each decision
        """
        self.db = db
        self.repository = ApprovableRepository(db)
        self.audit = audit or DatabaseAuditSink(db)
        self.notifier = notifier

    def approve(
        self,
        kind: EntityKind,
        entity_id: str,
        actor: Optional[CurrentUser],
        notes: Optional[str] = None,
    ) -> ActionResult[Dict[str, Any]]:
        """Approve a pending entity. ``notes`` are kept in the audit entry."""
        return self._decide(kind, entity_id, actor, ApprovalTransition.APPROVE, notes=notes)

    def reject(
        self,
        kind: EntityKind,
        entity_id: str,
        actor: Optional[CurrentUser],
        reason: Optional[str],
        notes: Optional[str] = None,
    ) -> ActionResult[Dict[str, Any]]:
        """Reject a pending entity; ``reason`` must be non-blank."""
        return self._decide(
            kind, entity_id, actor, ApprovalTransition.REJECT, reason=reason, notes=notes
        )

    def get_entity(self, kind: EntityKind, entity_id: str) -> Optional[Dict[str, Any]]:
        entity = self.repository.get(kind, entity_id)
        return self._entity_to_dict(kind, entity) if entity else None

    def list_entities(
        self,
        kind: EntityKind,
        status: Optional[ApprovalStatus] = None,
        *,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """List entities of a kind, newest first."""
        entities = self.repository.list_by_status(kind, status, limit=limit, offset=offset)
        return [self._entity_to_dict(kind, e) for e in entities]

    def batch_approve(
        self,
        kind: EntityKind,
        entity_ids: List[str],
        actor: Optional[CurrentUser],
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Approve several entities; each one is decided independently.

        Returns:
            Summary with ``approved`` ids and ``failed`` entries
        """
        results: Dict[str, Any] = {"approved": [], "failed": []}
        for entity_id in entity_ids:
            result = self.approve(kind, entity_id, actor, notes=notes)
            if result.success:
                results["approved"].append(entity_id)
            else:
                results["failed"].append(self._failure_summary(entity_id, result))
        return results

    def batch_reject(
        self,
        kind: EntityKind,
        entity_ids: List[str],
        actor: Optional[CurrentUser],
        reason: str,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Reject several entities with the same reason."""
        results: Dict[str, Any] = {"rejected": [], "failed": []}
        for entity_id in entity_ids:
            result = self.reject(kind, entity_id, actor, reason, notes=notes)
            if result.success:
                results["rejected"].append(entity_id)
            else:
                results["failed"].append(self._failure_summary(entity_id, result))
        return results

    def _decide(
        self,
        kind: EntityKind,
        entity_id: str,
        actor: Optional[CurrentUser],
        transition: ApprovalTransition,
        *,
        reason: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ActionResult[Dict[str, Any]]:
        if actor is None:
            return ActionResult.fail(FailureReason.NOT_AUTHENTICATED, "Not authenticated")

        label = kind.label
        notes = (notes or "").strip() or None
        try:
            require_permission(actor.permissions, APPROVAL_PERMISSIONS[kind])
            if requires_reason(transition) and not (reason or "").strip():
                raise MissingReasonError(
                    "Rejection reason is required", None, transition
                )

            entity = self.repository.get(kind, entity_id)
            if entity is None:
                return ActionResult.fail(FailureReason.NOT_FOUND, f"{label} not found")

            current = from_stored(kind, entity.status)
            machine = ApprovalStateMachine(
                entity_id, kind, current, user_permissions=actor.permissions
            )
            record = machine.transition(transition, reason=reason, user_id=actor.id)

            if kind == EntityKind.PROVIDER and transition == ApprovalTransition.APPROVE:
                pending = self.repository.unapproved_required_requirements(entity_id)
                if pending:
                    missing = sorted({name for names in pending.values() for name in names})
                    return ActionResult.fail(
                        FailureReason.REQUIREMENTS_INCOMPLETE,
                        "Cannot approve provider: not all required requirements are "
                        f"approved. Unapproved: {', '.join(missing)}",
                        details={"unapproved": missing, "pending_by_type": pending},
                    )

            swapped = self.repository.compare_and_swap_status(
                kind,
                entity_id,
                expected=ApprovalStatus(record["from_state"]),
                new=ApprovalStatus(record["to_state"]),
                values=self._decision_values(transition, actor.id, record),
            )
            if not swapped:
                self.db.rollback()
                logger.warning(
                    "%s %s changed state before %s by %s could be written",
                    label, entity_id, transition.value, actor.id,
                )
                return ActionResult.fail(
                    FailureReason.INVALID_STATE,
                    f"{label} is no longer pending approval",
                )

            self.audit.record(
                AuditEntry(
                    actor_id=actor.id,
                    action=AuditAction(transition.value.upper()),
                    entity_type=kind.value,
                    entity_id=entity_id,
                    reason=record["reason"],
                    metadata={"notes": notes} if notes else {},
                    timestamp=record["timestamp"],
                )
            )
            self.db.commit()
        except PermissionDeniedError as e:
            logger.info("%s denied %s on %s %s: %s", actor.id, transition.value, kind.value, entity_id, e)
            return ActionResult.fail(FailureReason.PERMISSION_DENIED, str(e))
        except MissingReasonError:
            return ActionResult.fail(FailureReason.MISSING_REASON, "Rejection reason is required")
        except TransitionError as e:
            return ActionResult.fail(FailureReason.INVALID_STATE, str(e))
        except Exception as e:
            self.db.rollback()
            logger.exception(
                "Failed to %s %s %s for %s", transition.value, kind.value, entity_id, actor.id
            )
            return ActionResult.fail(
                FailureReason.STORAGE_FAILURE,
                f"Failed to {transition.value} {label.lower()}",
                details={"exception": type(e).__name__},
            )

        logger.info(
            "%s %s %s by %s", label, record["to_state"], entity_id, actor.id
        )
        if self.notifier is not None:
            self.notifier.notify(kind.value, entity_id)

        past = "approved" if transition == ApprovalTransition.APPROVE else "rejected"
        return ActionResult.ok(
            f"{label} {past} successfully",
            data=self._entity_to_dict(kind, entity),
        )

    @staticmethod
    def _decision_values(
        transition: ApprovalTransition, actor_id: str, record: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Column values for a decision; each clears the opposite pair."""
        if transition == ApprovalTransition.APPROVE:
            return {
                "approved_at": record["timestamp"],
                "approved_by_id": actor_id,
                "rejected_at": None,
                "rejection_reason": None,
            }
        return {
            "rejected_at": record["timestamp"],
            "rejection_reason": record["reason"],
            "approved_at": None,
            "approved_by_id": None,
        }

    @staticmethod
    def _failure_summary(entity_id: str, result: ActionResult) -> Dict[str, Any]:
        return {"id": entity_id, "error": result.error.value, "message": result.message}

    def _entity_to_dict(self, kind: EntityKind, entity) -> Dict[str, Any]:
        """Convert an approvable model to a dictionary."""
        status = from_stored(kind, entity.status)
        if kind == EntityKind.REQUIREMENT_SUBMISSION:
            name = entity.requirement_type.name if entity.requirement_type else None
        else:
            name = entity.name
        return {
            "id": entity.id,
            "kind": kind.value,
            "name": name,
            "status": entity.status,
            "approval_status": status.value if status else None,
            "approved_at": entity.approved_at.isoformat() if entity.approved_at else None,
            "approved_by_id": entity.approved_by_id,
            "rejected_at": entity.rejected_at.isoformat() if entity.rejected_at else None,
            "rejection_reason": entity.rejection_reason,
            "created_at": entity.created_at.isoformat() if entity.created_at else None,
        }
