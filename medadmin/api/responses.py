"""Translate ``ActionResult`` values into HTTP responses."""

from typing import Any, Dict, Optional

from fastapi import status
from fastapi.responses import JSONResponse

from medadmin.core.identity import CurrentUser
from medadmin.core.rbac import has_permission
from medadmin.core.results import ActionResult, FailureReason

STATUS_CODES: Dict[FailureReason, int] = {
    FailureReason.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    FailureReason.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    FailureReason.TARGET_IS_ADMIN: status.HTTP_403_FORBIDDEN,
    FailureReason.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureReason.TARGET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureReason.NO_ACTIVE_SESSION: status.HTTP_404_NOT_FOUND,
    FailureReason.INVALID_STATE: status.HTTP_409_CONFLICT,
    FailureReason.REQUIREMENTS_INCOMPLETE: status.HTTP_409_CONFLICT,
    FailureReason.SESSION_ALREADY_ACTIVE: status.HTTP_409_CONFLICT,
    FailureReason.MISSING_REASON: status.HTTP_422_UNPROCESSABLE_ENTITY,
    FailureReason.DURATION_OUT_OF_RANGE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    FailureReason.STORAGE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(result: ActionResult) -> int:
    if result.success:
        return status.HTTP_200_OK
    return STATUS_CODES.get(result.error, status.HTTP_400_BAD_REQUEST)


def result_response(result: ActionResult, data: Optional[Any] = None) -> JSONResponse:
    """Serialize a result as ``{success, message, error?, redirect_url?, data?}``."""
    body = result.to_dict()
    if data is not None:
        body["data"] = data
    if result.details and not result.success:
        body["details"] = {k: v for k, v in result.details.items() if k != "exception"}
    return JSONResponse(status_code=status_code_for(result), content=body)


def authorize(actor: Optional[CurrentUser], permission: str) -> Optional[ActionResult]:
    """Return a failure result if ``actor`` may not use ``permission``, else ``None``."""
    if actor is None:
        return ActionResult.fail(FailureReason.NOT_AUTHENTICATED, "Not authenticated")
    if not has_permission(actor, permission):
        return ActionResult.fail(
            FailureReason.PERMISSION_DENIED, f"Permission denied: requires {permission}"
        )
    return None
