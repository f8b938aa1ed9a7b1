"""Organization approval endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from medadmin.api.deps import get_approval_service, get_current_user
from medadmin.api.responses import authorize, result_response
from medadmin.api.schemas import (
    ApprovableEntityResponse,
    ApproveRequest,
    BatchApproveRequest,
    BatchApproveResponse,
    BatchRejectRequest,
    BatchRejectResponse,
    RejectRequest,
)
from medadmin.core.approval import ApprovalService, ApprovalStatus, EntityKind
from medadmin.core.identity import CurrentUser
from medadmin.core.rbac import Permission
from medadmin.core.results import ActionResult, FailureReason

router = APIRouter(prefix="/organizations", tags=["organizations"])

KIND = EntityKind.ORGANIZATION


@router.get("", response_model=List[ApprovableEntityResponse])
def list_organizations(
    status: Optional[ApprovalStatus] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    """List organizations, newest first, optionally filtered by approval status."""
    denied = authorize(current_user, Permission.APPROVE_ORGANIZATIONS)
    if denied:
        return result_response(denied)
    return service.list_entities(KIND, status, limit=limit, offset=offset)


@router.post("/batch/approve", response_model=BatchApproveResponse)
def batch_approve_organizations(
    body: BatchApproveRequest,
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    denied = authorize(current_user, Permission.APPROVE_ORGANIZATIONS)
    if denied:
        return result_response(denied)
    return service.batch_approve(KIND, body.ids, current_user, notes=body.notes)


@router.post("/batch/reject", response_model=BatchRejectResponse)
def batch_reject_organizations(
    body: BatchRejectRequest,
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    denied = authorize(current_user, Permission.APPROVE_ORGANIZATIONS)
    if denied:
        return result_response(denied)
    return service.batch_reject(KIND, body.ids, current_user, body.reason, notes=body.notes)


@router.get("/{organization_id}", response_model=ApprovableEntityResponse)
def get_organization(
    organization_id: str,
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    denied = authorize(current_user, Permission.APPROVE_ORGANIZATIONS)
    if denied:
        return result_response(denied)
    entity = service.get_entity(KIND, organization_id)
    if entity is None:
        return result_response(ActionResult.fail(FailureReason.NOT_FOUND, "Organization not found"))
    return entity


@router.post("/{organization_id}/approve")
def approve_organization(
    organization_id: str,
    body: Optional[ApproveRequest] = None,
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    """Approve a pending organization."""
    result = service.approve(KIND, organization_id, current_user, notes=body.notes if body else None)
    return result_response(result, data=result.data)


@router.post("/{organization_id}/reject")
def reject_organization(
    organization_id: str,
    body: RejectRequest,
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    result = service.reject(KIND, organization_id, current_user, body.reason, notes=body.notes)
    return result_response(result, data=result.data)
