"""Provider approval endpoints."""

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

router = APIRouter(prefix="/providers", tags=["providers"])

KIND = EntityKind.PROVIDER


@router.get("", response_model=List[ApprovableEntityResponse])
def list_providers(
    status: Optional[ApprovalStatus] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    """List providers, newest first, optionally filtered by approval status."""
    denied = authorize(current_user, Permission.APPROVE_PROVIDERS)
    if denied:
        return result_response(denied)
    return service.list_entities(KIND, status, limit=limit, offset=offset)


@router.post("/batch/approve", response_model=BatchApproveResponse)
def batch_approve_providers(
    body: BatchApproveRequest,
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    denied = authorize(current_user, Permission.APPROVE_PROVIDERS)
    if denied:
        return result_response(denied)
    return service.batch_approve(KIND, body.ids, current_user, notes=body.notes)


@router.post("/batch/reject", response_model=BatchRejectResponse)
def batch_reject_providers(
    body: BatchRejectRequest,
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    denied = authorize(current_user, Permission.APPROVE_PROVIDERS)
    if denied:
        return result_response(denied)
    return service.batch_reject(KIND, body.ids, current_user, body.reason, notes=body.notes)


@router.get("/{provider_id}", response_model=ApprovableEntityResponse)
def get_provider(
    provider_id: str,
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    denied = authorize(current_user, Permission.APPROVE_PROVIDERS)
    if denied:
        return result_response(denied)
    entity = service.get_entity(KIND, provider_id)
    if entity is None:
        return result_response(ActionResult.fail(FailureReason.NOT_FOUND, "Provider not found"))
    return entity


@router.post("/{provider_id}/approve")
def approve_provider(
    provider_id: str,
    body: Optional[ApproveRequest] = None,
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    """Approve a pending provider once all required requirements are approved."""
    result = service.approve(KIND, provider_id, current_user, notes=body.notes if body else None)
    return result_response(result, data=result.data)


@router.post("/{provider_id}/reject")
def reject_provider(
    provider_id: str,
    body: RejectRequest,
    service: ApprovalService = Depends(get_approval_service),
    current_user: Optional[CurrentUser] = Depends(get_current_user),
):
    result = service.reject(KIND, provider_id, current_user, body.reason, notes=body.notes)
    return result_response(result, data=result.data)
