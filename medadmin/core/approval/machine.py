"""Per-entity approval state machine.

Checks one decision against the permission, reason and transition rules and
returns the record describing it.
"""

from typing import Optional, Dict, Any, Iterable

from ..clock import utcnow
from ..errors import MissingReasonError, PermissionDeniedError, TransitionError
from ..rbac.checker import PermissionChecker
from .states import (
    APPROVAL_PERMISSIONS,
    ApprovalStatus,
    ApprovalTransition,
    EntityKind,
    get_transition_rule,
    requires_reason,
)


class ApprovalStateMachine:
    """
    State machine for a single approvable entity.

    Checks run in a fixed order: permission, reason, then whether the
    transition is legal from the current state. ``current_state`` may be
    ``None`` for a stored status outside the workflow; nothing is legal from it.
    """

    def __init__(
        self,
        entity_id: str,
        kind: EntityKind,
        current_state: Optional[ApprovalStatus],
        *,
        user_permissions: Optional[Iterable[str]] = None,
    ):
        self.entity_id = entity_id
        self.kind = kind
        self._state = current_state
        self.checker = PermissionChecker(user_permissions or [])

    @property
    def state(self) -> Optional[ApprovalStatus]:
        """Workflow status, or ``None`` for a stored value outside the workflow."""
        return self._state

    @property
    def required_permission(self) -> str:
        return str(APPROVAL_PERMISSIONS[self.kind])

    def transition(
        self,
        transition: ApprovalTransition,
        *,
        reason: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Apply ``transition`` and return its record.

        Args:
            transition: Decision to apply
            reason: Free-text reason (required for rejections)
            user_id: Acting admin, copied into the record

        Returns:
            The transition record (from/to state, actor, reason, timestamp)

        Raises:
            PermissionDeniedError: If user lacks the kind's approval permission
            MissingReasonError: If the transition needs a reason and got none
            TransitionError: If the transition is invalid from the current state
        """
        if not self.checker.has_permission(self.required_permission):
            raise PermissionDeniedError(self.required_permission)

        reason = (reason or "").strip() or None
        if reason is None and requires_reason(transition):
            raise MissingReasonError(
                f"Transition {transition.value} requires a reason",
                self._state,
                transition,
            )

        rule = get_transition_rule(self._state, transition) if self._state else None
        if rule is None:
            state = self._state.value if self._state else "unknown"
            raise TransitionError(
                f"Cannot {transition.value} {self.kind.label.lower()} in state {state}",
                self._state,
                transition,
            )

        record = {
            "entity_id": self.entity_id,
            "entity_type": self.kind.value,
            "from_state": rule.from_state.value,
            "to_state": rule.to_state.value,
            "transition": transition.value,
            "user_id": user_id,
            "reason": reason,
            "timestamp": utcnow(),
        }
        self._state = rule.to_state
        return record

