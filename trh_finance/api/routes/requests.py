"""
Fund Requests API Routes

Public submission and status lookup, plus the admin review endpoints.
"""

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ...workflow import PaymentRequest, RequestStatus, RequestWorkflow
from ..auth import AdminUser, require_approve, require_view
from ..services import get_workflow

router = APIRouter(prefix="/requests", tags=["requests"])


class RequestSubmission(BaseModel):
    """Input model for a new fund request. Accepts snake_case or camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    requester_name: str = ""
    department: str = ""
    amount: str | float | None = None
    purpose: str = ""
    method: str = ""
    date_needed: str | None = None
    attachment_url: str | None = None
    bank_name: str | None = None
    account_name: str | None = None
    account_number: str | None = None


class RejectionInput(BaseModel):
    """Request body for a rejection."""

    reason: str = ""


class PublicRequestStatus(BaseModel):
    """What a requester sees when tracking a request."""

    id: str
    status: str
    requester_name: str
    department: str
    amount: float
    purpose: str
    method: str
    date_needed: date
    created_at: datetime
    updated_at: datetime
    rejection_reason: str | None = None

    @classmethod
    def from_request(cls, request: PaymentRequest) -> "PublicRequestStatus":
        return cls(
            id=request.id,
            status=request.status.value,
            requester_name=request.requester_name,
            department=request.department,
            amount=float(request.amount),
            purpose=request.purpose,
            method=request.method.value,
            date_needed=request.date_needed,
            created_at=request.created_at,
            updated_at=request.updated_at,
            rejection_reason=(
                request.rejection_reason if request.status is RequestStatus.REJECTED else None
            ),
        )


class RequestListResponse(BaseModel):
    """Request list with per-status counts."""

    items: list[dict]
    total: int
    counts: dict[str, int]


@router.post("", status_code=201)
async def submit_request(
    input_data: RequestSubmission,
    workflow: RequestWorkflow = Depends(get_workflow),
) -> dict:
    """Submit a fund request (public).

    Returns:
        Created request id and status
    """
    request = workflow.submit(input_data.model_dump())
    return {
        "id": request.id,
        "status": request.status.value,
        "message": "Request submitted",
    }


@router.get("/{request_id}/status", response_model=PublicRequestStatus)
async def get_request_status(
    request_id: str,
    workflow: RequestWorkflow = Depends(get_workflow),
) -> PublicRequestStatus:
    """Track a request by id (public)."""
    request = workflow.get_request(request_id)
    if request is None:
        raise HTTPException(status_code=404, detail="Request not found")
    return PublicRequestStatus.from_request(request)


@router.get("", response_model=RequestListResponse)
async def list_requests(
    status: RequestStatus | None = Query(None),
    user: AdminUser = Depends(require_view),
    workflow: RequestWorkflow = Depends(get_workflow),
) -> RequestListResponse:
    """List requests, PENDING first then newest first.

    Args:
        status: Filter by status
        user: Authenticated user
        workflow: Request workflow

    Returns:
        Requests with status counts
    """
    all_requests = workflow.list_requests()
    counts = {s.value: 0 for s in RequestStatus}
    for request in all_requests:
        counts[request.status.value] += 1

    items = [r for r in all_requests if status is None or r.status is status]
    return RequestListResponse(
        items=[r.to_dict() for r in items],
        total=len(items),
        counts=counts,
    )


@router.get("/{request_id}")
async def get_request(
    request_id: str,
    user: AdminUser = Depends(require_view),
    workflow: RequestWorkflow = Depends(get_workflow),
) -> dict:
    """Get full request details, including bank details."""
    return workflow.require_request(request_id).to_dict()


@router.post("/{request_id}/approve")
async def approve_request(
    request_id: str,
    user: AdminUser = Depends(require_approve),
    workflow: RequestWorkflow = Depends(get_workflow),
) -> dict:
    """Approve a PENDING request."""
    request = workflow.approve(request_id, user.name)
    return {"message": "Request approved", "id": request.id, "status": request.status.value}


@router.post("/{request_id}/reject")
async def reject_request(
    request_id: str,
    input_data: RejectionInput,
    user: AdminUser = Depends(require_approve),
    workflow: RequestWorkflow = Depends(get_workflow),
) -> dict:
    """Reject a PENDING request. A reason is required."""
    request = workflow.reject(request_id, input_data.reason, user.name)
    return {
        "message": "Request rejected",
        "id": request.id,
        "status": request.status.value,
        "rejection_reason": request.rejection_reason,
    }
