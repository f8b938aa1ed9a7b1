"""Requirement submission review endpoints.

Submissions are reviewed by provider approvers; a provider can only be
approved once all of its required submissions are approved.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from medadmin.api.deps import get_approval_service, get_current_user
from medadmin.api.responses import authorize, result_response
from medadmin.api.schemas import ApprovableEntityResponse, ApproveRequest, RejectRequest
from medadmin.core.approval import ApprovalService, ApprovalStatus, EntityKind
from medadmin.core.identity import CurrentUser
from medadmin.core.rbac import Permission

router = APIRouter(prefix="/requirements", tags=["requirements"])

KIND = EntityKind.REQUIREMENT_SUBMISSION


@router.get("", response_model=List[ApprovableEntityResponse])
def list_requirement_submissions(
    status: Optional[ApprovalStatus] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    denied = authorize(current_user, Permission.APPROVE_PROVIDERS)
    if denied:
        return result_response(denied)
    return service.list_entities(KIND, status, limit=limit, offset=offset)


@router.post("/{submission_id}/approve")
def approve_requirement(
    submission_id: str,
    body: Optional[ApproveRequest] = None,
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    result = service.approve(KIND, submission_id, current_user, notes=body.notes if body else None)
    return result_response(result, data=result.data)


@router.post("/{submission_id}/reject")
def reject_requirement(
    submission_id: str,
    body: RejectRequest,
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    result = service.reject(KIND, submission_id, current_user, body.reason, notes=body.notes)
    return result_response(result, data=result.data)
