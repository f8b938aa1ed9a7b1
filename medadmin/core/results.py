"""Discriminated results returned by every workflow operation.

Expected business-rule violations never escape a service as exceptions;
callers inspect ``success`` and ``error`` instead and display ``message``
verbatim.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar


T = TypeVar("T")


class FailureReason(str, Enum):
    """Reason codes carried by failed results."""

    NOT_AUTHENTICATED = "not_authenticated"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    MISSING_REASON = "missing_reason"
    REQUIREMENTS_INCOMPLETE = "requirements_incomplete"
    DURATION_OUT_OF_RANGE = "duration_out_of_range"
    TARGET_NOT_FOUND = "target_not_found"
    TARGET_IS_ADMIN = "target_is_admin"
    SESSION_ALREADY_ACTIVE = "session_already_active"
    NO_ACTIVE_SESSION = "no_active_session"
    STORAGE_FAILURE = "storage_failure"


@dataclass
class ActionResult(Generic[T]):
    """Outcome of an admin action."""

    success: bool
    message: str
    error: Optional[FailureReason] = None
    data: Optional[T] = None
    redirect_url: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str, data: Optional[T] = None, **kwargs) -> "ActionResult[T]":
        return cls(success=True, message=message, data=data, **kwargs)

    @classmethod
    def fail(cls, error: FailureReason, message: str, **kwargs) -> "ActionResult[T]":
        return cls(success=False, message=message, error=error, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the ``{success, message, error?}`` shape the UI consumes."""
        result: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.error is not None:
            result["error"] = self.error.value
        if self.redirect_url is not None:
            result["redirect_url"] = self.redirect_url
        return result
