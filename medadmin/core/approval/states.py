"""Approval workflow states and transitions.

State Machine Diagram:

    ┌──────────┐
    │ PENDING  │ ← created by the registration flow
    └────┬─────┘
         │
         ├─────────────────────┐
         │ approve             │ reject (reason required)
    ┌────▼─────┐         ┌─────▼────┐
    │ APPROVED │         │ REJECTED │
    └──────────┘         └──────────┘

Both outcomes are terminal; decisions are never re-opened.

Providers and organizations store the pending state as ``PENDING_APPROVAL``
while requirement submissions store ``PENDING``. ``ApprovalStatus`` is the
single vocabulary the workflow reasons in; ``to_stored``/``from_stored``
translate per entity kind.
"""

from enum import Enum
from typing import Dict, Optional, NamedTuple, Set

from ..rbac.permissions import Permission


class EntityKind(str, Enum):
    """Entity kinds that go through admin approval."""

    PROVIDER = "provider"
    ORGANIZATION = "organization"
    REQUIREMENT_SUBMISSION = "requirement_submission"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()


class ApprovalStatus(str, Enum):
    """States in the approval workflow."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalTransition(str, Enum):
    """Admin decisions that trigger state transitions."""

    APPROVE = "approve"   # PENDING → APPROVED
    REJECT = "reject"     # PENDING → REJECTED


class TransitionRule(NamedTuple):
    """Defines a valid state transition."""
    from_state: ApprovalStatus
    to_state: ApprovalStatus
    transition: ApprovalTransition
    requires_reason: bool = False


TRANSITION_RULES: list[TransitionRule] = [
    TransitionRule(ApprovalStatus.PENDING, ApprovalStatus.APPROVED, ApprovalTransition.APPROVE),
    TransitionRule(ApprovalStatus.PENDING, ApprovalStatus.REJECTED, ApprovalTransition.REJECT,
                   requires_reason=True),
]

# Build lookup tables for efficient access
VALID_TRANSITIONS: Dict[ApprovalStatus, Set[ApprovalTransition]] = {}
TRANSITION_TARGETS: Dict[tuple[ApprovalStatus, ApprovalTransition], TransitionRule] = {}

for rule in TRANSITION_RULES:
    VALID_TRANSITIONS.setdefault(rule.from_state, set()).add(rule.transition)
    TRANSITION_TARGETS[(rule.from_state, rule.transition)] = rule


TERMINAL_STATES: Set[ApprovalStatus] = {
    ApprovalStatus.APPROVED,
    ApprovalStatus.REJECTED,
}

# Stored status values per entity kind
_STORED_VALUES: Dict[EntityKind, Dict[ApprovalStatus, str]] = {
    EntityKind.PROVIDER: {
        ApprovalStatus.PENDING: "PENDING_APPROVAL",
        ApprovalStatus.APPROVED: "APPROVED",
        ApprovalStatus.REJECTED: "REJECTED",
    },
    EntityKind.ORGANIZATION: {
        ApprovalStatus.PENDING: "PENDING_APPROVAL",
        ApprovalStatus.APPROVED: "APPROVED",
        ApprovalStatus.REJECTED: "REJECTED",
    },
    EntityKind.REQUIREMENT_SUBMISSION: {
        ApprovalStatus.PENDING: "PENDING",
        ApprovalStatus.APPROVED: "APPROVED",
        ApprovalStatus.REJECTED: "REJECTED",
    },
}

# Permission an admin needs to decide on each kind. Requirement submissions
# are part of provider onboarding and share the provider permission.
APPROVAL_PERMISSIONS: Dict[EntityKind, Permission] = {
    EntityKind.PROVIDER: Permission.APPROVE_PROVIDERS,
    EntityKind.ORGANIZATION: Permission.APPROVE_ORGANIZATIONS,
    EntityKind.REQUIREMENT_SUBMISSION: Permission.APPROVE_PROVIDERS,
}


def to_stored(kind: EntityKind, status: ApprovalStatus) -> str:
    """Translate a workflow status into the value stored for ``kind``."""
    return _STORED_VALUES[kind][status]


def from_stored(kind: EntityKind, value: str) -> Optional[ApprovalStatus]:
    """Translate a stored value back; ``None`` for values outside the workflow."""
    for status, stored in _STORED_VALUES[kind].items():
        if stored == value:
            return status
    return None


def can_transition(from_state: Optional[ApprovalStatus], transition: ApprovalTransition) -> bool:
    """Check if a transition is valid from the given state."""
    return transition in VALID_TRANSITIONS.get(from_state, set())


def get_transition_rule(from_state: ApprovalStatus, transition: ApprovalTransition) -> Optional[TransitionRule]:
    """Get the transition rule for a state/action combination."""
    return TRANSITION_TARGETS.get((from_state, transition))


def get_target_state(from_state: ApprovalStatus, transition: ApprovalTransition) -> Optional[ApprovalStatus]:
    """Get the target state for a transition."""
    rule = get_transition_rule(from_state, transition)
    return rule.to_state if rule else None


def requires_reason(transition: ApprovalTransition) -> bool:
    """Whether ``transition`` needs a non-empty reason from any state."""
    return any(r.requires_reason for r in TRANSITION_RULES if r.transition == transition)
