"""Account override ("act as") endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends

from medadmin.api.deps import get_current_user, get_override_manager
from medadmin.api.responses import authorize, result_response
from medadmin.api.schemas import InitiateOverrideRequest
from medadmin.core.identity import CurrentUser
from medadmin.core.logger import get_logger
from medadmin.core.override import OverrideSessionManager
from medadmin.core.rbac import Permission
from medadmin.core.results import ActionResult, FailureReason

logger = get_logger(__name__)

router = APIRouter(prefix="/overrides", tags=["overrides"])


@router.post("")
def initiate_override(
    body: InitiateOverrideRequest,
    manager: OverrideSessionManager = Depends(get_override_manager),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    """Start acting as the user registered to ``target_email``."""
    result = manager.initiate(
        current_user, body.target_email, body.reason, body.duration_minutes
    )
    return result_response(result, data=result.data.to_dict() if result.data else None)


@router.delete("")
def end_override(
    manager: OverrideSessionManager = Depends(get_override_manager),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    result = manager.end(current_user)
    return result_response(result, data=result.data.to_dict() if result.data else None)


@router.get("/active")
def get_active_override(
    manager: OverrideSessionManager = Depends(get_override_manager),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    """Return the caller's live override session, if any."""
    denied = authorize(current_user, Permission.ACCESS_ANY_ACCOUNT)
    if denied:
        return result_response(denied)
    try:
        session = manager.get_active(current_user.id)
    except Exception:
        logger.exception("Failed to look up override session for %s", current_user.id)
        return result_response(
            ActionResult.fail(
                FailureReason.STORAGE_FAILURE, "Failed to look up override session"
            )
        )
    result = ActionResult.ok(
        "Override session active" if session else "No active override session"
    )
    return result_response(result, data=session.to_dict() if session else None)
