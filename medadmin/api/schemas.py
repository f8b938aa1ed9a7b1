"""Request and response schemas for the admin API."""

from typing import List, Optional

from pydantic import BaseModel, Field


class ApproveRequest(BaseModel):
    notes: Optional[str] = None


class RejectRequest(BaseModel):
    reason: str = ""
    notes: Optional[str] = None


class BatchApproveRequest(BaseModel):
    ids: List[str] = Field(..., min_length=1)
    notes: Optional[str] = None


class BatchRejectRequest(BaseModel):
    ids: List[str] = Field(..., min_length=1)
    reason: str = ""
    notes: Optional[str] = None


class BatchFailure(BaseModel):
    id: str
    error: str
    message: str


class BatchApproveResponse(BaseModel):
    approved: List[str] = []
    failed: List[BatchFailure] = []


class BatchRejectResponse(BaseModel):
    rejected: List[str] = []
    failed: List[BatchFailure] = []


class ApprovableEntityResponse(BaseModel):
    id: str
    kind: str
    name: Optional[str]
    status: str
    approval_status: Optional[str]
    approved_at: Optional[str]
    approved_by_id: Optional[str]
    rejected_at: Optional[str]
    rejection_reason: Optional[str]
    created_at: Optional[str]


class InitiateOverrideRequest(BaseModel):
    target_email: str
    reason: str = ""
    # Range is enforced by the session manager so it can report the configured bounds
    duration_minutes: Optional[int] = None
