"""Exception hierarchy for MedAdmin.

These are raised inside the domain layer only. Service entry points convert
them into :class:`~medadmin.core.results.ActionResult` failures.
"""


class MedAdminError(Exception):
    """Base class for all MedAdmin domain errors."""


class PermissionDeniedError(MedAdminError):
    """Raised when a user lacks a required permission."""

    def __init__(self, required_permission: str):
        super().__init__(f"Permission denied: requires {required_permission}")
        self.required_permission = required_permission


class TransitionError(MedAdminError):
    """Raised when a state transition is invalid."""

    def __init__(self, message: str, from_state, transition):
        super().__init__(message)
        self.from_state = from_state
        self.transition = transition


class MissingReasonError(TransitionError):
    """Raised when a transition that requires a reason gets none."""
